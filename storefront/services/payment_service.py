import logging
import time
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.config import settings
from storefront.constants.order_status import PAYABLE_STATUSES, can_transition
from storefront.exceptions import (
    AuthorizationError,
    InvalidSignatureError,
    NotFoundError,
    ValidationError,
)
from storefront.models.order import Order, PaymentMethod, PaymentStatus
from storefront.models.payment import Payment
from storefront.models.user import User
from storefront.repositories.orders import OrderRepository
from storefront.repositories.payments import PaymentRepository
from storefront.repositories.settings import SettingsRepository
from storefront.services.razorpay_gateway import RazorpayGateway, resolve_credentials
from storefront.utils.money import to_minor_units

logger = logging.getLogger(__name__)


class PaymentCaptureService:
    """
    Server half of the gateway handshake: create the gateway order, then
    verify the signed callback and mark the internal order paid.
    """

    def __init__(
        self,
        session: Session,
        orders: Optional[OrderRepository] = None,
        payments: Optional[PaymentRepository] = None,
        store_settings: Optional[SettingsRepository] = None,
        gateway_factory=RazorpayGateway,
    ):
        self.session = session
        self.orders = orders or OrderRepository(session)
        self.payments = payments or PaymentRepository(session)
        self.store_settings = store_settings or SettingsRepository(session)
        self.gateway_factory = gateway_factory

    def gateway(self) -> RazorpayGateway:
        return self.gateway_factory(resolve_credentials(self.store_settings))

    def _owned_order(self, user: User, order_id: int) -> Order:
        order = self.orders.get(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if user is None or order.user_id != user.id:
            logger.warning(
                f"SECURITY: user {user.id if user else None} tried to pay for order {order_id} "
                f"owned by {order.user_id}"
            )
            raise AuthorizationError("Unauthorized")
        return order

    def _recorded(self, order: Order, txn_id: str) -> Optional[Payment]:
        """The payment already on record for ``txn_id``, if it settled ``order``."""
        existing = self.payments.find_by_transaction(txn_id)
        if existing and existing.order_id != order.id:
            logger.warning(
                f"SECURITY: payment {txn_id} of order {existing.order_id} replayed "
                f"against order {order.id}"
            )
            raise ValidationError("Payment already used for another order")
        return existing

    def create_order(
        self,
        amount: float,
        receipt: Optional[str] = None,
        currency: Optional[str] = None,
        notes: Optional[Dict[str, str]] = None,
        *,
        user: Optional[User] = None,
        order_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Create the gateway order. With ``order_id`` the gateway order is
        bound to that internal order: the amount must equal its total and
        only a payment against this gateway order can settle it.
        """
        gateway = self.gateway()

        if amount is None or amount <= 0:
            raise ValidationError("Invalid amount")

        order = None
        if order_id is not None:
            order = self._owned_order(user, order_id)
            if order.payment_status not in PAYABLE_STATUSES:
                raise ValidationError(f"Order payment is already {order.payment_status.value}")
            if to_minor_units(amount) != to_minor_units(order.total):
                logger.warning(
                    f"Amount {amount} does not match total {order.total} of order {order.id}"
                )
                raise ValidationError("Amount does not match order total")
            notes = {**(notes or {}), "order_id": str(order.id)}
            receipt = receipt or order.order_number

        gateway_order = gateway.create_order(
            amount=to_minor_units(amount),
            currency=currency or settings.currency,
            receipt=receipt or f"rcpt_{int(time.time() * 1000)}",
            notes=notes,
        )
        if order is not None:
            self.orders.bind_gateway_order(order, gateway_order["id"])
        logger.info(
            f"Created gateway order {gateway_order['id']} for {gateway_order['amount']} "
            f"{gateway_order['currency']}"
        )

        return {
            "order_id": gateway_order["id"],
            "amount": gateway_order["amount"],
            "currency": gateway_order["currency"],
            "key_id": gateway.credentials.key_id,
        }

    def verify_payment(
        self,
        *,
        user: User,
        razorpay_order_id: str,
        razorpay_payment_id: str,
        razorpay_signature: str,
        order_id: int,
    ) -> Tuple[Payment, bool]:
        """
        Check the gateway signature, then the order and its owner, then
        record the payment. Returns ``(payment, created)``.
        """
        gateway = self.gateway()

        if not gateway.verify_signature(razorpay_order_id, razorpay_payment_id, razorpay_signature):
            logger.warning(
                f"SECURITY: invalid payment signature from user {user.id} "
                f"(gateway order {razorpay_order_id}, payment {razorpay_payment_id}, "
                f"order {order_id})"
            )
            raise InvalidSignatureError()

        order = self._owned_order(user, order_id)

        if order.gateway_order_id and order.gateway_order_id != razorpay_order_id:
            logger.warning(
                f"SECURITY: gateway order {razorpay_order_id} used for order {order.id} "
                f"bound to {order.gateway_order_id}"
            )
            raise ValidationError("Payment does not belong to this order")

        return self.finalize_payment(
            order=order,
            txn_id=razorpay_payment_id,
            gateway_response={
                "razorpay_order_id": razorpay_order_id,
                "razorpay_payment_id": razorpay_payment_id,
                "razorpay_signature": razorpay_signature,
            },
        )

    def finalize_payment(
        self,
        *,
        order: Order,
        txn_id: str,
        gateway_response: Dict[str, Any],
    ) -> Tuple[Payment, bool]:
        """
        Single source of truth for completing payments.

        The status flip and the payment insert share one commit. A replay of
        the same transaction returns the payment already on record.
        """
        existing = self._recorded(order, txn_id)
        if existing:
            logger.info(f"Payment {txn_id} for order {order.id} already recorded")
            return existing, False

        if not self.orders.mark_paid_if_payable(order.id):
            logger.warning(
                f"Order {order.id} was not payable ({order.payment_status}); "
                f"recording extra capture {txn_id}"
            )

        payment = self.payments.add(
            Payment(
                order_id=order.id,
                amount=order.total,
                method=PaymentMethod.online,
                status=PaymentStatus.paid,
                transaction_id=txn_id,
                gateway_response=gateway_response,
            )
        )

        try:
            self.session.commit()
        except IntegrityError:
            # concurrent retry inserted the same transaction first
            self.session.rollback()
            existing = self._recorded(order, txn_id)
            if existing is None:
                raise
            return existing, False

        self.session.refresh(payment)
        logger.info(f"Order {order.id} paid, transaction {txn_id}")
        return payment, True

    def mark_failed(self, *, user: User, order_id: int) -> Order:
        order = self._owned_order(user, order_id)

        if order.payment_status == PaymentStatus.failed:
            return order
        if not can_transition(order.payment_status, PaymentStatus.failed):
            raise ValidationError(f"Order payment is already {order.payment_status.value}")

        logger.info(f"Order {order.id} payment marked failed")
        return self.orders.set_payment_status(order, PaymentStatus.failed)
