import logging
from datetime import datetime
from typing import Optional

from slugify import slugify
from sqlmodel import Session, select

from storefront.exceptions import NotFoundError, ValidationError
from storefront.models.bundle import Bundle, BundleItem
from storefront.models.product import Product
from storefront.schemas.bundle_schemas import BundleCreate
from storefront.services.catalog_service import unique_slug
from storefront.utils.money import round_money

logger = logging.getLogger(__name__)


def bundle_detail(bundle: Bundle) -> dict:
    items = [
        {
            "product_id": item.product_id,
            "product_name": item.product.name if item.product else None,
            "price": item.product.price if item.product else None,
            "quantity": item.quantity,
        }
        for item in bundle.items
    ]
    items_total = round_money(sum((i["price"] or 0) * i["quantity"] for i in items))
    return {
        **bundle.model_dump(),
        "items": items,
        "items_total": items_total,
        "savings": round_money(max(0, items_total - bundle.bundle_price)),
    }


def save_bundle(session: Session, payload: BundleCreate, bundle: Optional[Bundle] = None) -> Bundle:
    """Create or replace a bundle together with its item list."""
    wanted = {item.product_id for item in payload.items}
    found = set(session.exec(select(Product.id).where(Product.id.in_(list(wanted)))).all())
    missing = wanted - found
    if missing:
        raise NotFoundError(f"Product not found: {', '.join(str(i) for i in sorted(missing))}")

    if payload.slug:
        slug = slugify(payload.slug)
        clash = session.exec(select(Bundle).where(Bundle.slug == slug)).first()
        if clash and (bundle is None or clash.id != bundle.id):
            raise ValidationError("Bundle slug already exists")
    elif bundle is not None and bundle.name == payload.name:
        slug = bundle.slug
    else:
        slug = unique_slug(session, Bundle, payload.name, exclude_id=bundle.id if bundle else None)

    fields = payload.model_dump(exclude={"items", "slug"})
    if bundle is None:
        bundle = Bundle(**fields, slug=slug)
    else:
        for field, value in fields.items():
            setattr(bundle, field, value)
        bundle.slug = slug
        bundle.updated_at = datetime.utcnow()

    # item list is replaced wholesale
    bundle.items = [
        BundleItem(product_id=item.product_id, quantity=item.quantity, sort_order=idx)
        for idx, item in enumerate(payload.items)
    ]
    session.add(bundle)
    session.commit()
    session.refresh(bundle)
    logger.info(f"Saved bundle {bundle.id} ({bundle.slug}) with {len(bundle.items)} items")
    return bundle
