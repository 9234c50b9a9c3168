"""
Offer resolution and discount computation.

Offers reaching this module are already filtered to the active window
(``OfferRepository.list_active``); nothing here touches the database.
"""
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from storefront.constants.gateway import CURRENCY_SYMBOL
from storefront.models.coupon import Coupon
from storefront.models.offer import Offer, OfferType
from storefront.schemas.offer_schemas import AppliedOffer, CartDiscount, ProductOffer
from storefront.utils.money import format_number, round_money

# (discount_amount, discounted_price, label)
DiscountResult = Tuple[float, float, str]


def _percentage(offer: Offer, price: float) -> DiscountResult:
    discount = price * offer.value / 100
    if offer.max_discount and discount > offer.max_discount:
        discount = offer.max_discount
    return discount, price - discount, f"{format_number(offer.value)}% OFF"


def _flat(offer: Offer, price: float) -> DiscountResult:
    discount = offer.value
    return (
        discount,
        max(0, price - discount),
        f"{CURRENCY_SYMBOL}{format_number(offer.value)} OFF",
    )


def _buy_x_get_y(offer: Offer, price: float) -> DiscountResult:
    # badge only, the free-item effect on totals is not computed
    label = f"Buy {format_number(offer.buy_quantity)} Get {format_number(offer.get_quantity)}"
    return 0, price, label


DISCOUNT_RULES: Dict[OfferType, Callable[[Offer, float], DiscountResult]] = {
    OfferType.percentage: _percentage,
    OfferType.flat: _flat,
    OfferType.buy_x_get_y: _buy_x_get_y,
}

_missing = set(OfferType) - set(DISCOUNT_RULES)
if _missing:
    raise RuntimeError(f"No discount rule for offer types: {sorted(t.value for t in _missing)}")


def find_applicable_offer(product, offers: Sequence[Offer]) -> Optional[Offer]:
    """Product-specific offer first, then a category-wide one, else none."""
    for offer in offers:
        if offer.product_id is not None and offer.product_id == product.id:
            return offer

    if product.category_id is None:
        return None

    for offer in offers:
        if offer.category_id == product.category_id and offer.product_id is None:
            return offer
    return None


def resolve(product, offers: Sequence[Offer]) -> Optional[ProductOffer]:
    """
    Pick the single offer that applies to ``product`` and price it.

    ``product`` needs ``id``, ``category_id`` and ``price``. Returns ``None``
    when no offers are loaded or none targets the product.
    """
    if product is None or not offers:
        return None

    offer = find_applicable_offer(product, offers)
    if offer is None:
        return None

    rule = DISCOUNT_RULES[OfferType(offer.type)]
    discount, discounted_price, label = rule(offer, product.price)

    return ProductOffer(
        offer=offer,
        discounted_price=round_money(discounted_price),
        discount_amount=round_money(discount),
        discount_label=label,
    )


def calculate_cart_discount(
    lines: Iterable[Tuple[object, int]],
    offers: Sequence[Offer],
) -> CartDiscount:
    """
    Sum offer discounts over ``(product, quantity)`` lines.

    Lines sharing an offer are merged into one ``AppliedOffer`` entry.
    """
    applied: Dict[int, AppliedOffer] = {}
    total = 0.0

    for product, quantity in lines:
        product_offer = resolve(product, offers)
        if not product_offer or product_offer.discount_amount <= 0:
            continue

        discount = product_offer.discount_amount * quantity
        total += discount

        offer_id = product_offer.offer.id
        if offer_id in applied:
            applied[offer_id].discount = round_money(applied[offer_id].discount + discount)
        else:
            applied[offer_id] = AppliedOffer(
                offer=product_offer.offer, discount=round_money(discount)
            )

    return CartDiscount(
        total_discount=round_money(total),
        applied_offers=list(applied.values()),
    )


def coupon_discount(coupon: Coupon, subtotal: float) -> float:
    """Discount a coupon grants on a cart subtotal."""
    if coupon.type == OfferType.percentage:
        discount = subtotal * coupon.value / 100
        if coupon.max_discount:
            discount = min(discount, coupon.max_discount)
    elif coupon.type == OfferType.flat:
        discount = min(coupon.value, subtotal)
    else:
        discount = 0
    return round_money(discount)


def priced_lines(products_by_id: Dict[int, object], items) -> List[Tuple[object, int]]:
    return [(products_by_id[item.product_id], item.quantity) for item in items]
