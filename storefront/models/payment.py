from sqlalchemy import Column, JSON, UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from storefront.models.order import PaymentMethod, PaymentStatus


class Payment(SQLModel, table=True):
    # a gateway transaction settles one order only; NULL (COD, refunds) repeats freely
    __table_args__ = (
        UniqueConstraint("transaction_id", name="uq_payment_transaction_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)

    amount: float
    method: PaymentMethod
    status: PaymentStatus

    transaction_id: Optional[str] = Field(default=None, index=True)
    gateway_response: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    refund_amount: Optional[float] = None
    refund_reason: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
