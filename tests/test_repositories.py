from datetime import datetime, timedelta

from storefront.models import Coupon, Offer, OfferType, PaymentStatus
from storefront.repositories import CouponRepository, OfferRepository, OrderRepository, SettingsRepository

NOW = datetime(2026, 10, 19, 12, 0, 0)


def _offer(session, name, **kw):
    offer = Offer(name=name, type=OfferType.percentage, value=10, **kw)
    session.add(offer)
    session.commit()
    return offer


def test_list_active_applies_flag_and_date_window(session):
    _offer(session, "always")
    _offer(session, "switched off", is_active=False)
    _offer(session, "not started", start_date=NOW + timedelta(days=1))
    _offer(session, "expired", end_date=NOW - timedelta(seconds=1))
    _offer(session, "running", start_date=NOW - timedelta(days=2), end_date=NOW + timedelta(days=2))
    _offer(session, "ends exactly now", end_date=NOW)

    names = [o.name for o in OfferRepository(session).list_active(NOW)]

    assert names == ["always", "running", "ends exactly now"]


def test_coupon_lookup_is_case_insensitive_and_windowed(session):
    session.add(Coupon(code="WELCOME10", type=OfferType.percentage, value=10))
    session.add(Coupon(code="OLD", type=OfferType.flat, value=50, end_date=NOW - timedelta(days=1)))
    session.commit()
    repo = CouponRepository(session)

    assert repo.get_active_by_code(" welcome10 ", NOW).code == "WELCOME10"
    assert repo.get_active_by_code("old", NOW) is None
    assert repo.get_by_code("old").code == "OLD"


def test_mark_paid_if_payable_wins_once(session, customer, make_order):
    order = make_order(customer)
    repo = OrderRepository(session)

    assert repo.mark_paid_if_payable(order.id) is True
    session.commit()
    assert repo.mark_paid_if_payable(order.id) is False
    session.commit()

    session.refresh(order)
    assert order.payment_status == PaymentStatus.paid


def test_failed_orders_are_still_payable(session, customer, make_order):
    order = make_order(customer)
    repo = OrderRepository(session)
    repo.set_payment_status(order, PaymentStatus.failed)

    assert repo.mark_paid_if_payable(order.id) is True


def test_settings_upsert_and_delete(session):
    repo = SettingsRepository(session)

    repo.upsert("razorpay", {"is_connected": True})
    repo.upsert("razorpay", {"is_connected": False})
    assert repo.get_value("razorpay") == {"is_connected": False}

    repo.delete("razorpay")
    repo.delete("razorpay")
    assert repo.get_value("razorpay") is None
