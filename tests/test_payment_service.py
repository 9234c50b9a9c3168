from unittest.mock import MagicMock

import pytest
import razorpay
from sqlalchemy.exc import IntegrityError

from storefront.constants.gateway import RAZORPAY_CREDENTIALS_KEY
from storefront.exceptions import (
    AuthorizationError,
    ConfigurationError,
    GatewayError,
    InvalidSignatureError,
    NotFoundError,
    ValidationError,
)
from storefront.models import Payment, PaymentMethod, PaymentStatus
from storefront.repositories import PaymentRepository, SettingsRepository
from storefront.services.payment_service import PaymentCaptureService
from storefront.services.razorpay_gateway import GatewayCredentials, RazorpayGateway, resolve_credentials
from tests.conftest import KEY_ID, KEY_SECRET, sign

# HMAC-SHA256("secret", "order_1|pay_1")
KNOWN_DIGEST = "52115a0d3400de9e86aade1f1b6eba9e8974604f4e267a9e9a16633a4c8dd2cb"


def _gateway(secret):
    credentials = GatewayCredentials(key_id="rzp_test_x", key_secret=secret, source="env")
    return RazorpayGateway(credentials)


@pytest.fixture
def service(session, gateway_factory, razorpay_env):
    return PaymentCaptureService(session, gateway_factory=gateway_factory)


def _verify(service, user, order, payment_id="pay_1", gateway_order_id="order_Test123", signature=None):
    return service.verify_payment(
        user=user,
        razorpay_order_id=gateway_order_id,
        razorpay_payment_id=payment_id,
        razorpay_signature=signature or sign(gateway_order_id, payment_id),
        order_id=order if isinstance(order, int) else order.id,
    )


def test_signature_matches_known_vector():
    assert sign("order_1", "pay_1", "secret") == KNOWN_DIGEST
    assert _gateway("secret").verify_signature("order_1", "pay_1", KNOWN_DIGEST) is True


@pytest.mark.parametrize(
    "order_id, payment_id, secret",
    [
        ("order_1", "pay_1", "secret"),
        ("order_IluGWxBm9U8zJ8", "pay_IluGk3kN2V0Ubz", "test_secret_key"),
        ("order_ünïcode", "pay_2", "s|e|c"),
    ],
)
def test_signature_round_trip(order_id, payment_id, secret):
    assert _gateway(secret).verify_signature(order_id, payment_id, sign(order_id, payment_id, secret))


def test_signature_rejects_wrong_secret_and_garbage():
    gateway = _gateway("secret")

    assert gateway.verify_signature("order_1", "pay_1", sign("order_1", "pay_1", "other")) is False
    assert gateway.verify_signature("order_1", "pay_1", "") is False
    assert gateway.verify_signature("order_1", "pay_1", "ß" * 64) is False
    assert gateway.verify_signature("order_1", "pay_1", KNOWN_DIGEST.upper()) is False


def test_create_order_converts_to_minor_units(service, order_api):
    result = service.create_order(499.99, receipt="ORD0001")

    sent = order_api.create.call_args.args[0]
    assert sent["amount"] == 49999
    assert sent["currency"] == "INR"
    assert sent["receipt"] == "ORD0001"
    assert sent["notes"] == {}
    assert result == {
        "order_id": "order_Test123",
        "amount": 49999,
        "currency": "INR",
        "key_id": KEY_ID,
    }


def test_create_order_defaults_receipt(service, order_api):
    service.create_order(10)

    assert order_api.create.call_args.args[0]["receipt"].startswith("rcpt_")


@pytest.mark.parametrize("amount", [0, -5, None])
def test_create_order_rejects_bad_amount(service, order_api, amount):
    with pytest.raises(ValidationError):
        service.create_order(amount)
    order_api.create.assert_not_called()


def test_create_order_wraps_upstream_errors(service, order_api):
    order_api.create.side_effect = razorpay.errors.BadRequestError("The amount must be atleast INR 1.00")

    with pytest.raises(GatewayError) as exc:
        service.create_order(0.5)

    assert "atleast" in exc.value.upstream_body
    assert "atleast" not in exc.value.message


def test_credentials_fall_back_to_store_settings(session, no_razorpay_env):
    repo = SettingsRepository(session)
    with pytest.raises(ConfigurationError):
        resolve_credentials(repo)

    repo.upsert(RAZORPAY_CREDENTIALS_KEY, {"key_id": "rzp_live_stored99", "key_secret": "stored-secret"})
    credentials = resolve_credentials(repo)

    assert credentials.key_id == "rzp_live_stored99"
    assert credentials.source == "stored"
    assert credentials.is_test_mode is False


def test_env_credentials_win(session, razorpay_env):
    repo = SettingsRepository(session)
    repo.upsert(RAZORPAY_CREDENTIALS_KEY, {"key_id": "rzp_live_stored99", "key_secret": "stored-secret"})

    credentials = resolve_credentials(repo)

    assert (credentials.key_id, credentials.key_secret, credentials.source) == (KEY_ID, KEY_SECRET, "env")


def test_verify_marks_order_paid_and_records_payment(service, session, customer, make_order):
    order = make_order(customer, total=750.0)

    payment, created = _verify(service, customer, order)

    assert created is True
    session.refresh(order)
    assert order.payment_status == PaymentStatus.paid
    assert payment.amount == 750.0
    assert payment.method == PaymentMethod.online
    assert payment.status == PaymentStatus.paid
    assert payment.transaction_id == "pay_1"
    assert payment.gateway_response == {
        "razorpay_order_id": "order_Test123",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": sign("order_Test123", "pay_1"),
    }


def test_tampered_signature_fails_closed(service, session, customer, make_order):
    order = make_order(customer)
    good = sign("order_Test123", "pay_1")
    tampered = good[:-1] + ("0" if good[-1] != "0" else "1")

    with pytest.raises(InvalidSignatureError):
        _verify(service, customer, order, signature=tampered)

    session.refresh(order)
    assert order.payment_status == PaymentStatus.pending
    assert PaymentRepository(session).list_for_order(order.id) == []


def test_signature_is_checked_before_the_order_exists(service, customer, make_order):
    with pytest.raises(InvalidSignatureError):
        _verify(service, customer, 9999, signature="0" * 64)


def test_missing_order_is_not_found(service, customer, make_order):
    with pytest.raises(NotFoundError):
        _verify(service, customer, 9999)


def test_other_users_cannot_verify(service, session, customer, other_customer, make_order):
    order = make_order(customer)

    with pytest.raises(AuthorizationError):
        _verify(service, other_customer, order)

    session.refresh(order)
    assert order.payment_status == PaymentStatus.pending
    assert PaymentRepository(session).list_for_order(order.id) == []


def test_replayed_verification_is_idempotent(service, session, customer, make_order):
    order = make_order(customer)

    first, created_first = _verify(service, customer, order)
    second, created_second = _verify(service, customer, order)

    assert (created_first, created_second) == (True, False)
    assert first.id == second.id
    assert len(PaymentRepository(session).list_for_order(order.id)) == 1


def test_second_capture_on_paid_order_is_recorded_without_reflipping(service, session, customer, make_order):
    order = make_order(customer)
    _verify(service, customer, order, payment_id="pay_1")

    payment, created = _verify(service, customer, order, payment_id="pay_2")

    assert created is True
    assert payment.transaction_id == "pay_2"
    assert [p.transaction_id for p in PaymentRepository(session).list_for_order(order.id)] == ["pay_1", "pay_2"]


def test_lost_race_resolves_to_recorded_payment(service, session, customer, make_order, monkeypatch):
    order = make_order(customer)
    winner, _ = _verify(service, customer, order)

    real_find = service.payments.find_by_transaction
    calls = []

    def racing_find(txn_id):
        # first lookup happens "before" the other request committed
        calls.append(txn_id)
        return None if len(calls) == 1 else real_find(txn_id)

    monkeypatch.setattr(service.payments, "find_by_transaction", racing_find)

    payment, created = _verify(service, customer, order)

    assert created is False
    assert payment.id == winner.id
    assert len(PaymentRepository(session).list_for_order(order.id)) == 1


def test_verify_without_credentials_is_a_configuration_error(session, customer, make_order, gateway_factory, no_razorpay_env):
    order = make_order(customer)
    service = PaymentCaptureService(session, gateway_factory=gateway_factory)

    with pytest.raises(ConfigurationError):
        _verify(service, customer, order)


def test_mark_failed(service, session, customer, other_customer, make_order):
    order = make_order(customer)

    with pytest.raises(AuthorizationError):
        service.mark_failed(user=other_customer, order_id=order.id)

    assert service.mark_failed(user=customer, order_id=order.id).payment_status == PaymentStatus.failed
    # already failed: no-op
    assert service.mark_failed(user=customer, order_id=order.id).payment_status == PaymentStatus.failed


def test_paid_orders_cannot_be_marked_failed(service, customer, make_order):
    order = make_order(customer)
    _verify(service, customer, order)

    with pytest.raises(ValidationError):
        service.mark_failed(user=customer, order_id=order.id)


def test_check_credentials_reports_sdk_errors():
    client = MagicMock()
    client.payment.all.side_effect = razorpay.errors.BadRequestError("Authentication failed")
    gateway = RazorpayGateway(
        GatewayCredentials(key_id="rzp_test_bad", key_secret="nope", source="stored"),
        client=client,
    )

    assert gateway.check_credentials() is False


def test_payment_cannot_settle_a_second_order(service, session, customer, make_order):
    first = make_order(customer, number="ORD0001")
    second = make_order(customer, number="ORD0002")
    _verify(service, customer, first)

    with pytest.raises(ValidationError):
        _verify(service, customer, second)

    session.refresh(second)
    assert second.payment_status == PaymentStatus.pending
    assert PaymentRepository(session).list_for_order(second.id) == []


def test_transaction_ids_are_unique_across_orders(session, customer, make_order):
    first = make_order(customer, number="ORD0001")
    second = make_order(customer, number="ORD0002")
    session.add(Payment(order_id=first.id, amount=1, method=PaymentMethod.online,
                        status=PaymentStatus.paid, transaction_id="pay_dup"))
    session.commit()

    session.add(Payment(order_id=second.id, amount=1, method=PaymentMethod.online,
                        status=PaymentStatus.paid, transaction_id="pay_dup"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()

    # rows without a gateway transaction (COD, refunds) are not constrained
    for _ in range(2):
        session.add(Payment(order_id=first.id, amount=1, method=PaymentMethod.cod, status=PaymentStatus.pending))
    session.commit()


def test_create_order_binds_internal_order(service, session, customer, make_order, order_api):
    order = make_order(customer, total=750.0)

    result = service.create_order(750, user=customer, order_id=order.id)

    sent = order_api.create.call_args.args[0]
    assert sent["receipt"] == "ORD0001"
    assert sent["notes"] == {"order_id": str(order.id)}
    assert result["amount"] == 75000
    session.refresh(order)
    assert order.gateway_order_id == "order_Test123"


def test_create_order_amount_must_match_bound_order(service, customer, make_order, order_api):
    order = make_order(customer, total=750.0)

    with pytest.raises(ValidationError):
        service.create_order(1, user=customer, order_id=order.id)
    order_api.create.assert_not_called()


def test_create_order_for_someone_elses_order(service, customer, other_customer, make_order):
    order = make_order(customer)

    with pytest.raises(AuthorizationError):
        service.create_order(500, user=other_customer, order_id=order.id)


def test_create_order_for_paid_order(service, customer, make_order):
    order = make_order(customer)
    _verify(service, customer, order)

    with pytest.raises(ValidationError):
        service.create_order(500, user=customer, order_id=order.id)


def test_bound_order_rejects_other_gateway_orders(service, session, customer, make_order):
    order = make_order(customer)
    service.create_order(500, user=customer, order_id=order.id)

    with pytest.raises(ValidationError):
        _verify(service, customer, order, gateway_order_id="order_Cheap999")

    session.refresh(order)
    assert order.payment_status == PaymentStatus.pending

    payment, created = _verify(service, customer, order, gateway_order_id="order_Test123")
    assert created is True
