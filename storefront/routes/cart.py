from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.dependencies.services import get_coupon_repository, get_offer_repository
from storefront.repositories.offers import CouponRepository, OfferRepository
from storefront.schemas.offer_schemas import (
    ApplyCouponRequest,
    ApplyCouponResponse,
    CartDiscount,
    CartOffersRequest,
)
from storefront.services.catalog_service import load_products
from storefront.services.coupon_service import apply_coupon
from storefront.services.pricing import calculate_cart_discount, priced_lines

router = APIRouter()


@router.post("/offers", response_model=CartDiscount)
def cart_offers(
    payload: CartOffersRequest,
    session: Session = Depends(get_session),
    offer_repo: OfferRepository = Depends(get_offer_repository),
):
    """Auto-applied offer discount for the submitted cart lines."""
    if not payload.items:
        return CartDiscount()

    products = load_products(session, [item.product_id for item in payload.items])
    return calculate_cart_discount(
        priced_lines(products, payload.items),
        offer_repo.list_active(),
    )


@router.post("/apply-coupon", response_model=ApplyCouponResponse)
def apply_coupon_code(
    payload: ApplyCouponRequest,
    coupon_repo: CouponRepository = Depends(get_coupon_repository),
):
    coupon, discount = apply_coupon(coupon_repo, payload.code, payload.subtotal)
    return ApplyCouponResponse(
        code=coupon.code,
        coupon_id=coupon.id,
        discount=discount,
        message=f"Coupon {coupon.code} applied successfully",
    )
