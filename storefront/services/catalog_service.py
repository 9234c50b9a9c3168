from typing import Dict, Iterable

from slugify import slugify
from sqlmodel import Session, select

from storefront.exceptions import NotFoundError
from storefront.models.product import Product


def load_products(session: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
    """Active products keyed by id; any missing or inactive id is a 404."""
    wanted = set(product_ids)
    products = session.exec(
        select(Product)
        .where(Product.id.in_(list(wanted)))
        .where(Product.is_active == True)  # noqa: E712
    ).all()

    found = {p.id: p for p in products}
    missing = wanted - set(found)
    if missing:
        raise NotFoundError(f"Product not found: {', '.join(str(i) for i in sorted(missing))}")
    return found


def unique_slug(session: Session, model, name: str, exclude_id=None) -> str:
    base = slugify(name) or "item"
    slug = base
    n = 2
    while True:
        query = select(model).where(model.slug == slug)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)
        if not session.exec(query).first():
            return slug
        slug = f"{base}-{n}"
        n += 1
