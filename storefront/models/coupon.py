from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from storefront.models.offer import OfferType


class Coupon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)  # stored upper-case
    description: Optional[str] = None

    type: OfferType = OfferType.percentage
    value: float
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None

    usage_limit: Optional[int] = None
    used_count: int = 0
    per_user_limit: int = 1

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
