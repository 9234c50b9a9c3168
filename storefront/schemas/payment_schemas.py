from typing import Dict, Optional

from pydantic import BaseModel, Field


class CreateOrderRequest(BaseModel):
    amount: float  # major unit (rupees)
    receipt: Optional[str] = None
    currency: Optional[str] = None
    notes: Optional[Dict[str, str]] = None
    order_id: Optional[int] = None  # internal order to bind the gateway order to


class CreateOrderResponse(BaseModel):
    order_id: str
    amount: int  # minor unit (paise)
    currency: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
    order_id: int  # internal order id


class VerifyPaymentResponse(BaseModel):
    success: bool
    message: str


class RazorpayConnectRequest(BaseModel):
    key_id: str = Field(min_length=1)
    key_secret: str = Field(min_length=1)


class RazorpayStatus(BaseModel):
    connected: bool
    has_key_id: bool
    has_key_secret: bool
    key_id_preview: Optional[str] = None
    source: Optional[str] = None  # env | stored
    is_test_mode: Optional[bool] = None
