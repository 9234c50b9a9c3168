from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.exceptions import NotFoundError
from storefront.models.order import Order, OrderStatus, PaymentStatus
from storefront.repositories.orders import OrderRepository
from storefront.repositories.payments import PaymentRepository
from storefront.schemas.order_admin_schemas import (
    CodPaymentUpdate,
    OrderStatusUpdate,
    RefundRequest,
)
from storefront.services import order_admin_service
from storefront.services.checkout_service import order_detail
from storefront.utils.pagination import paginate

router = APIRouter()


def _get_order(session: Session, order_id: int) -> Order:
    order = OrderRepository(session).get(order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order


def _detail(session: Session, order: Order):
    return order_detail(order, PaymentRepository(session).list_for_order(order.id))


@router.get("")
def list_orders(
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    query = OrderRepository(session).admin_query(status=status, payment_status=payment_status)
    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        transform=lambda o: {**o.model_dump(), "items": [i.model_dump() for i in o.items]},
    )


@router.get("/by-number/{order_number}")
def get_order_by_number(
    order_number: str,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    order = OrderRepository(session).get_by_number(order_number.strip().upper())
    if not order:
        raise NotFoundError("Order not found")
    return _detail(session, order)


@router.get("/{order_id}")
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return _detail(session, _get_order(session, order_id))


@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    order = order_admin_service.update_status(session, _get_order(session, order_id), payload.status)
    return {"order_id": order.id, "status": order.status}


@router.post("/{order_id}/refund")
def refund_order(
    order_id: int,
    payload: RefundRequest,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    order = _get_order(session, order_id)
    refund = order_admin_service.record_refund(session, order, payload.amount, payload.reason)
    return {
        "order_id": order.id,
        "payment_status": order.payment_status,
        "refund_id": refund.id,
        "refund_amount": refund.refund_amount,
    }


@router.put("/{order_id}/payment-status")
def update_cod_payment_status(
    order_id: int,
    payload: CodPaymentUpdate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    order = order_admin_service.set_cod_payment_status(
        session, _get_order(session, order_id), payload.payment_status
    )
    return {"order_id": order.id, "payment_status": order.payment_status}
