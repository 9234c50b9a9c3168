from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.models.order import PaymentMethod
from storefront.schemas.offer_schemas import CartLine


class ShippingAddress(BaseModel):
    full_name: str
    mobile_number: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    pincode: str
    landmark: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    items: List[CartLine] = Field(min_length=1)
    shipping_address: ShippingAddress
    payment_method: PaymentMethod = PaymentMethod.online
    coupon_code: Optional[str] = None
    notes: Optional[str] = None
