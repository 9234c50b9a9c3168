from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import update
from sqlmodel import Session, select

from storefront.constants.order_status import PAYABLE_STATUSES
from storefront.models.order import Order, OrderStatus, PaymentStatus
from storefront.models.order_item import OrderItem


class OrderRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, order_id: int) -> Optional[Order]:
        return self.session.get(Order, order_id)

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return self.session.exec(
            select(Order).where(Order.order_number == order_number)
        ).first()

    def admin_query(self, status: Optional[OrderStatus] = None, payment_status: Optional[PaymentStatus] = None):
        query = select(Order)
        if status is not None:
            query = query.where(Order.status == status)
        if payment_status is not None:
            query = query.where(Order.payment_status == payment_status)
        return query.order_by(Order.created_at.desc(), Order.id.desc())

    def list_for_user(self, user_id: int) -> List[Order]:
        return self.session.exec(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        ).all()

    @staticmethod
    def next_order_number() -> str:
        return f"ORD{datetime.utcnow():%y%m%d}{uuid4().hex[:6].upper()}"

    def add(self, order: Order, items: List[OrderItem]) -> Order:
        """Insert an order with its items. Does not commit."""
        self.session.add(order)
        self.session.flush()
        for item in items:
            item.order_id = order.id
            self.session.add(item)
        return order

    def mark_paid_if_payable(self, order_id: int) -> bool:
        """
        Compare-and-swap ``payment_status`` to ``paid``.

        Only one caller can win for a given order; the rest see ``False``.
        Does not commit, the caller owns the transaction.
        """
        result = self.session.exec(
            update(Order)
            .where(Order.id == order_id)
            .where(Order.payment_status.in_(PAYABLE_STATUSES))
            .values(payment_status=PaymentStatus.paid, updated_at=datetime.utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def bind_gateway_order(self, order: Order, gateway_order_id: str) -> Order:
        order.gateway_order_id = gateway_order_id
        order.updated_at = datetime.utcnow()
        self.session.add(order)
        self.session.commit()
        self.session.refresh(order)
        return order

    def set_payment_status(self, order: Order, payment_status: PaymentStatus) -> Order:
        order.payment_status = payment_status
        order.updated_at = datetime.utcnow()
        self.session.add(order)
        self.session.commit()
        self.session.refresh(order)
        return order
