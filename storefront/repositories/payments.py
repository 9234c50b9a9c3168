from typing import List, Optional

from sqlmodel import Session, select

from storefront.models.order import PaymentMethod, PaymentStatus
from storefront.models.payment import Payment


class PaymentRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_transaction(self, transaction_id: str) -> Optional[Payment]:
        """Gateway payment ids are unique across all orders."""
        return self.session.exec(
            select(Payment).where(Payment.transaction_id == transaction_id)
        ).first()

    def find_cod(self, order_id: int) -> Optional[Payment]:
        return self.session.exec(
            select(Payment)
            .where(Payment.order_id == order_id)
            .where(Payment.method == PaymentMethod.cod)
            .where(Payment.refund_amount.is_(None))
        ).first()

    def refunded_total(self, order_id: int) -> float:
        refunds = self.session.exec(
            select(Payment.refund_amount)
            .where(Payment.order_id == order_id)
            .where(Payment.status == PaymentStatus.refunded)
        ).all()
        return sum(r or 0 for r in refunds)

    def list_for_order(self, order_id: int) -> List[Payment]:
        return self.session.exec(
            select(Payment).where(Payment.order_id == order_id).order_by(Payment.id)
        ).all()

    def add(self, payment: Payment) -> Payment:
        """Append a payment record. Does not commit."""
        self.session.add(payment)
        return payment
