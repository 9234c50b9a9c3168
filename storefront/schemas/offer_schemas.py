from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from storefront.models.offer import Offer, OfferType


class OfferBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    type: OfferType = OfferType.percentage
    value: float = Field(gt=0)
    buy_quantity: Optional[int] = None
    get_quantity: Optional[int] = None
    min_order_value: Optional[float] = Field(default=None, ge=0)
    max_discount: Optional[float] = Field(default=None, gt=0)
    category_id: Optional[int] = None
    product_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    auto_apply: bool = True

    @model_validator(mode="after")
    def validate_rule(self):
        if self.type == OfferType.percentage and self.value > 100:
            raise ValueError("Percentage offers cannot exceed 100")
        if self.type == OfferType.buy_x_get_y:
            if not self.buy_quantity or self.buy_quantity < 1:
                raise ValueError("buy_quantity must be at least 1")
            if not self.get_quantity or self.get_quantity < 1:
                raise ValueError("get_quantity must be at least 1")
        if self.product_id is not None and self.category_id is not None:
            raise ValueError("An offer targets a product or a category, not both")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class OfferCreate(OfferBase):
    pass


class OfferUpdate(OfferBase):
    pass


class ProductOffer(BaseModel):
    offer: Offer
    discounted_price: float
    discount_amount: float
    discount_label: str


class AppliedOffer(BaseModel):
    offer: Offer
    discount: float


class CartDiscount(BaseModel):
    total_discount: float = 0
    applied_offers: List[AppliedOffer] = []


class CartLine(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartOffersRequest(BaseModel):
    items: List[CartLine]


class CouponCreate(BaseModel):
    code: str = Field(min_length=1)
    description: Optional[str] = None
    type: OfferType = OfferType.percentage
    value: float = Field(gt=0)
    min_order_value: Optional[float] = Field(default=None, ge=0)
    max_discount: Optional[float] = Field(default=None, gt=0)
    usage_limit: Optional[int] = Field(default=None, ge=1)
    per_user_limit: int = Field(default=1, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True

    @model_validator(mode="after")
    def validate_rule(self):
        self.code = self.code.strip().upper()
        if self.type == OfferType.percentage and self.value > 100:
            raise ValueError("Percentage coupons cannot exceed 100")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class ApplyCouponRequest(BaseModel):
    code: str = Field(min_length=1)
    subtotal: float = Field(ge=0)


class ApplyCouponResponse(BaseModel):
    code: str
    coupon_id: int
    discount: float
    message: str
