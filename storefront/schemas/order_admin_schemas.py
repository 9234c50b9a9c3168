from typing import Optional

from pydantic import BaseModel, Field

from storefront.models.order import OrderStatus, PaymentStatus


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class RefundRequest(BaseModel):
    amount: float = Field(gt=0)
    reason: Optional[str] = None


class CodPaymentUpdate(BaseModel):
    payment_status: PaymentStatus
