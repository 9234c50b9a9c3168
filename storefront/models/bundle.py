from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING, List
from datetime import datetime

if TYPE_CHECKING:
    from .product import Product


class BundleItem(SQLModel, table=True):
    __tablename__ = "bundle_item"

    id: Optional[int] = Field(default=None, primary_key=True)
    bundle_id: int = Field(foreign_key="bundle.id", index=True)
    product_id: int = Field(foreign_key="product.id")
    quantity: int = 1
    sort_order: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    bundle: Optional["Bundle"] = Relationship(back_populates="items")
    product: Optional["Product"] = Relationship()


class Bundle(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: Optional[str] = None

    # sold as one unit; compare_price is the struck-through sum
    bundle_price: float
    compare_price: Optional[float] = None

    image_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List[BundleItem] = Relationship(
        back_populates="bundle",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "BundleItem.sort_order"},
    )
