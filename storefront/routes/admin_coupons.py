import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from storefront.dependencies.admin import require_admin
from storefront.dependencies.services import get_coupon_repository
from storefront.exceptions import NotFoundError, ValidationError
from storefront.models.coupon import Coupon
from storefront.repositories.offers import CouponRepository
from storefront.schemas.offer_schemas import CouponCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def list_coupons(
    coupon_repo: CouponRepository = Depends(get_coupon_repository),
    admin=Depends(require_admin),
):
    return coupon_repo.list_all()


@router.post("/")
def create_coupon(
    payload: CouponCreate,
    coupon_repo: CouponRepository = Depends(get_coupon_repository),
    admin=Depends(require_admin),
):
    if coupon_repo.get_by_code(payload.code):
        raise ValidationError("Coupon code already exists")

    coupon = coupon_repo.save(Coupon(**payload.model_dump()))
    logger.info(f"Admin {admin.id} created coupon {coupon.code}")
    return coupon


@router.put("/{coupon_id}")
def update_coupon(
    coupon_id: int,
    payload: CouponCreate,
    coupon_repo: CouponRepository = Depends(get_coupon_repository),
    admin=Depends(require_admin),
):
    coupon = coupon_repo.get(coupon_id)
    if not coupon:
        raise NotFoundError("Coupon not found")

    clash = coupon_repo.get_by_code(payload.code)
    if clash and clash.id != coupon.id:
        raise ValidationError("Coupon code already exists")

    for field, value in payload.model_dump().items():
        setattr(coupon, field, value)
    coupon.updated_at = datetime.utcnow()
    return coupon_repo.save(coupon)


@router.delete("/{coupon_id}")
def delete_coupon(
    coupon_id: int,
    coupon_repo: CouponRepository = Depends(get_coupon_repository),
    admin=Depends(require_admin),
):
    coupon = coupon_repo.get(coupon_id)
    if not coupon:
        raise NotFoundError("Coupon not found")
    coupon_repo.delete(coupon)
    return {"message": "Coupon deleted successfully"}
