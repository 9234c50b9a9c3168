from fastapi import APIRouter, Depends

from storefront.dependencies.services import get_payment_service
from storefront.models.user import User
from storefront.schemas.payment_schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from storefront.services.payment_service import PaymentCaptureService
from storefront.utils.token import get_current_user

router = APIRouter()


@router.post("/razorpay/create-order", response_model=CreateOrderResponse)
def create_razorpay_order(
    payload: CreateOrderRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentCaptureService = Depends(get_payment_service),
):
    """Create a Razorpay order before payment (amount in rupees)."""
    return service.create_order(
        payload.amount,
        receipt=payload.receipt,
        currency=payload.currency,
        notes=payload.notes,
        user=current_user,
        order_id=payload.order_id,
    )


@router.post("/razorpay/verify", response_model=VerifyPaymentResponse)
def verify_razorpay_payment(
    payload: VerifyPaymentRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentCaptureService = Depends(get_payment_service),
):
    _, created = service.verify_payment(
        user=current_user,
        razorpay_order_id=payload.razorpay_order_id,
        razorpay_payment_id=payload.razorpay_payment_id,
        razorpay_signature=payload.razorpay_signature,
        order_id=payload.order_id,
    )
    message = "Payment verified successfully" if created else "Payment already processed"
    return VerifyPaymentResponse(success=True, message=message)


@router.post("/orders/{order_id}/failed")
def mark_payment_failed(
    order_id: int,
    current_user: User = Depends(get_current_user),
    service: PaymentCaptureService = Depends(get_payment_service),
):
    order = service.mark_failed(user=current_user, order_id=order_id)
    return {"order_id": order.id, "payment_status": order.payment_status}
