import logging
from datetime import datetime

from sqlmodel import Session

from storefront.constants.gateway import CURRENCY_SYMBOL
from storefront.constants.order_status import (
    COD_SETTABLE_STATUSES,
    REFUNDABLE_STATUSES,
    can_change_status,
    can_transition,
)
from storefront.exceptions import ValidationError
from storefront.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from storefront.models.payment import Payment
from storefront.repositories.payments import PaymentRepository
from storefront.utils.money import format_number, round_money

logger = logging.getLogger(__name__)


def _save(session: Session, order: Order) -> Order:
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def update_status(session: Session, order: Order, status: OrderStatus) -> Order:
    if order.status == status:
        return order
    if not can_change_status(order.status, status):
        raise ValidationError(f"Cannot move order from {order.status.value} to {status.value}")

    logger.info(f"Order {order.order_number} status {order.status.value} -> {status.value}")
    order.status = status
    return _save(session, order)


def record_refund(session: Session, order: Order, amount: float, reason=None) -> Payment:
    """
    Record a refund as a negative payment row. The order becomes
    ``refunded`` once refunds cover the total, ``partial`` before that.
    """
    if order.payment_status not in REFUNDABLE_STATUSES:
        raise ValidationError(f"Cannot refund an order whose payment is {order.payment_status.value}")

    payments = PaymentRepository(session)
    amount = round_money(amount)
    remaining = round_money(order.total - payments.refunded_total(order.id))
    if amount > remaining:
        raise ValidationError(
            f"Refund exceeds the refundable amount of {CURRENCY_SYMBOL}{format_number(remaining)}"
        )

    target = PaymentStatus.refunded if amount == remaining else PaymentStatus.partial
    if not can_transition(order.payment_status, target):
        raise ValidationError(f"Cannot refund an order whose payment is {order.payment_status.value}")

    refund = payments.add(
        Payment(
            order_id=order.id,
            amount=-amount,
            method=order.payment_method or PaymentMethod.online,
            status=PaymentStatus.refunded,
            refund_amount=amount,
            refund_reason=reason,
        )
    )
    order.payment_status = target
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(refund)

    logger.info(f"Refunded {amount} on order {order.order_number} ({target.value})")
    return refund


def set_cod_payment_status(session: Session, order: Order, payment_status: PaymentStatus) -> Order:
    """Cash collected (or not) on delivery; keeps the COD payment row in step."""
    if order.payment_method != PaymentMethod.cod:
        raise ValidationError("Only cash on delivery payments can be updated manually")
    if payment_status not in COD_SETTABLE_STATUSES:
        raise ValidationError(f"Payment status {payment_status.value} cannot be set manually")
    if order.payment_status == payment_status:
        return order
    if not can_transition(order.payment_status, payment_status):
        raise ValidationError(
            f"Cannot move payment from {order.payment_status.value} to {payment_status.value}"
        )

    cod_payment = PaymentRepository(session).find_cod(order.id)
    if cod_payment:
        cod_payment.status = payment_status
        cod_payment.updated_at = datetime.utcnow()
        session.add(cod_payment)

    logger.info(f"COD order {order.order_number} payment {order.payment_status.value} -> {payment_status.value}")
    order.payment_status = payment_status
    return _save(session, order)
