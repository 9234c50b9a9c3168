from typing import List, Optional

from pydantic import BaseModel, Field


class BundleItemIn(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class BundleCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    bundle_price: float = Field(gt=0)
    compare_price: Optional[float] = Field(default=None, gt=0)
    image_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
    items: List[BundleItemIn] = Field(min_length=1)
