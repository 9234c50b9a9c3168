import logging

from sqlmodel import Session

from storefront.config import settings
from storefront.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from storefront.models.order_item import OrderItem
from storefront.models.payment import Payment
from storefront.models.user import User
from storefront.repositories.offers import CouponRepository
from storefront.repositories.orders import OrderRepository
from storefront.repositories.payments import PaymentRepository
from storefront.schemas.checkout_schemas import PlaceOrderRequest
from storefront.services.catalog_service import load_products
from storefront.services.coupon_service import apply_coupon
from storefront.utils.money import round_money

logger = logging.getLogger(__name__)


def shipping_charge_for(subtotal: float) -> float:
    return 0 if subtotal >= settings.free_shipping_threshold else settings.shipping_charge


def place_order(session: Session, user: User, payload: PlaceOrderRequest) -> Order:
    """Create the internal order (system of record) in ``pending`` payment state."""
    orders = OrderRepository(session)
    payments = PaymentRepository(session)

    products = load_products(session, [item.product_id for item in payload.items])

    items = []
    subtotal = 0.0
    for line in payload.items:
        product = products[line.product_id]
        line_total = round_money(product.price * line.quantity)
        subtotal += line_total
        items.append(
            OrderItem(
                product_id=product.id,
                product_name=product.name,
                sku=product.sku,
                price=product.price,
                quantity=line.quantity,
                total=line_total,
            )
        )
    subtotal = round_money(subtotal)

    discount = 0.0
    coupon = None
    if payload.coupon_code:
        coupon, discount = apply_coupon(CouponRepository(session), payload.coupon_code, subtotal)

    shipping = shipping_charge_for(subtotal)
    total = round_money(subtotal - discount + shipping)

    order = orders.add(
        Order(
            order_number=orders.next_order_number(),
            user_id=user.id,
            status=OrderStatus.new,
            payment_status=PaymentStatus.pending,
            payment_method=payload.payment_method,
            subtotal=subtotal,
            discount=discount,
            shipping_charge=shipping,
            total=total,
            coupon_id=coupon.id if coupon else None,
            coupon_code=coupon.code if coupon else None,
            shipping_address=payload.shipping_address.model_dump(),
            notes=payload.notes,
        ),
        items,
    )

    if payload.payment_method == PaymentMethod.cod:
        payments.add(
            Payment(
                order_id=order.id,
                amount=total,
                method=PaymentMethod.cod,
                status=PaymentStatus.pending,
            )
        )

    session.commit()
    session.refresh(order)
    logger.info(f"Order {order.order_number} placed by user {user.id} ({payload.payment_method.value}, {total})")
    return order


def order_detail(order: Order, payments) -> dict:
    return {
        **order.model_dump(),
        "items": [item.model_dump() for item in order.items],
        "payments": [p.model_dump() for p in payments],
    }
