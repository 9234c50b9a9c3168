import logging
from typing import Tuple

from storefront.constants.gateway import CURRENCY_SYMBOL
from storefront.exceptions import ValidationError
from storefront.models.coupon import Coupon
from storefront.repositories.offers import CouponRepository
from storefront.services.pricing import coupon_discount
from storefront.utils.money import format_number

logger = logging.getLogger(__name__)


def apply_coupon(coupons: CouponRepository, code: str, subtotal: float) -> Tuple[Coupon, float]:
    """
    Validate a user-entered code against a cart subtotal.

    Read-only: usage counters are not touched here.
    """
    coupon = coupons.get_active_by_code(code)

    if not coupon or (coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit):
        logger.info(f"Rejected coupon code {code.strip().upper()!r}")
        raise ValidationError("This coupon code is not valid")

    if coupon.min_order_value and subtotal < coupon.min_order_value:
        raise ValidationError(
            f"Minimum order value is {CURRENCY_SYMBOL}{format_number(coupon.min_order_value)}"
        )

    return coupon, coupon_discount(coupon, subtotal)
