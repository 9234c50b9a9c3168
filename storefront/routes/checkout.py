from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.exceptions import NotFoundError
from storefront.models.user import User
from storefront.repositories.orders import OrderRepository
from storefront.repositories.payments import PaymentRepository
from storefront.schemas.checkout_schemas import PlaceOrderRequest
from storefront.services.checkout_service import order_detail, place_order
from storefront.utils.token import get_current_user

router = APIRouter()


@router.post("/place-order")
def place_order_route(
    payload: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = place_order(session, current_user, payload)
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "subtotal": order.subtotal,
        "discount": order.discount,
        "shipping_charge": order.shipping_charge,
        "total": order.total,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
    }


@router.get("/orders")
def my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return OrderRepository(session).list_for_user(current_user.id)


@router.get("/orders/{order_id}")
def my_order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = OrderRepository(session).get(order_id)
    # other users' orders look the same as missing ones
    if not order or order.user_id != current_user.id:
        raise NotFoundError("Order not found")
    return order_detail(order, PaymentRepository(session).list_for_order(order.id))
