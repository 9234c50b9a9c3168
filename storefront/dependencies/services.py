from fastapi import Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories import (
    CouponRepository,
    OfferRepository,
    SettingsRepository,
)
from storefront.services.payment_service import PaymentCaptureService
from storefront.services.razorpay_gateway import RazorpayGateway


def get_offer_repository(session: Session = Depends(get_session)) -> OfferRepository:
    return OfferRepository(session)


def get_coupon_repository(session: Session = Depends(get_session)) -> CouponRepository:
    return CouponRepository(session)


def get_settings_repository(session: Session = Depends(get_session)) -> SettingsRepository:
    return SettingsRepository(session)


def get_gateway_factory():
    """Swapped out in tests to keep the Razorpay SDK off the network."""
    return RazorpayGateway


def get_payment_service(
    session: Session = Depends(get_session),
    gateway_factory=Depends(get_gateway_factory),
) -> PaymentCaptureService:
    return PaymentCaptureService(session, gateway_factory=gateway_factory)
