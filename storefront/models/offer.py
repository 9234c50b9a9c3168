from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class OfferType(str, Enum):
    percentage = "percentage"
    flat = "flat"
    buy_x_get_y = "buy_x_get_y"


class Offer(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None

    type: OfferType = OfferType.percentage
    value: float
    buy_quantity: Optional[int] = None
    get_quantity: Optional[int] = None
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None

    # scope: product, category, or neither (site-wide)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    product_id: Optional[int] = Field(default=None, foreign_key="product.id", index=True)

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    auto_apply: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
