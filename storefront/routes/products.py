from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from storefront.database import get_session
from storefront.dependencies.services import get_offer_repository
from storefront.exceptions import NotFoundError
from storefront.models.product import Product
from storefront.repositories.offers import OfferRepository
from storefront.services.pricing import resolve
from storefront.utils.pagination import paginate

router = APIRouter()


def _with_offer(product: Product, offers):
    return {"product": product, "offer": resolve(product, offers)}


@router.get("")
def list_products(
    category_id: Optional[int] = None,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    offer_repo: OfferRepository = Depends(get_offer_repository),
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712
    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    query = query.order_by(Product.id)

    # active window evaluated once for the whole page
    offers = offer_repo.list_active()
    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        transform=lambda p: _with_offer(p, offers),
    )


@router.get("/{product_id}")
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
    offer_repo: OfferRepository = Depends(get_offer_repository),
):
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise NotFoundError("Product not found")
    return _with_offer(product, offer_repo.list_active())
