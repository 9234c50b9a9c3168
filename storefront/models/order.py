from enum import Enum
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime

from storefront.models.order_item import OrderItem


class OrderStatus(str, Enum):
    new = "new"
    confirmed = "confirmed"
    packed = "packed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"
    returned = "returned"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"
    partial = "partial"


class PaymentMethod(str, Enum):
    online = "online"
    cod = "cod"
    wallet = "wallet"


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(index=True, unique=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    status: OrderStatus = OrderStatus.new
    payment_status: PaymentStatus = PaymentStatus.pending
    payment_method: Optional[PaymentMethod] = None

    subtotal: float
    discount: float = 0
    tax: float = 0
    shipping_charge: float = 0
    total: float

    coupon_id: Optional[int] = Field(default=None, foreign_key="coupon.id")
    coupon_code: Optional[str] = None

    # gateway order this order was bound to at payment start
    gateway_order_id: Optional[str] = Field(default=None, index=True)

    shipping_address: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(back_populates="order")
