from unittest.mock import MagicMock

import pytest
import requests

from storefront.client import CheckoutClient, PaymentState

GATEWAY_ORDER = {"order_id": "order_Test123", "amount": 49900, "currency": "INR", "key_id": "rzp_test_AbCdEfGh1234"}
GATEWAY_RESPONSE = {
    "razorpay_order_id": "order_Test123",
    "razorpay_payment_id": "pay_1",
    "razorpay_signature": "abc123",
}


def _response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def callbacks():
    return MagicMock(), MagicMock()


def _client(http, token="tok", loader=None):
    return CheckoutClient(
        "http://api.test/",
        access_token=token,
        http=http,
        script_loader=loader or (lambda: True),
    )


def _start(client, callbacks):
    on_success, on_failure = callbacks
    return client.initiate_payment(
        amount=499,
        order_id=7,
        order_number="ORD0007",
        on_success=on_success,
        on_failure=on_failure,
        customer_name="Asha Rao",
        customer_email="asha@example.com",
        customer_phone="9876543210",
    )


def test_script_loads_once():
    loader = MagicMock(return_value=True)
    client = _client(MagicMock(), loader=loader)

    assert client.load_gateway_script() is True
    assert client.load_gateway_script() is True
    loader.assert_called_once_with()


def test_failed_script_load_can_be_retried():
    loader = MagicMock(side_effect=[False, True])
    client = _client(MagicMock(), loader=loader)

    assert client.load_gateway_script() is False
    assert client.load_gateway_script() is True


def test_default_loader_fetches_checkout_script(http):
    http.get.return_value = _response(200)
    client = CheckoutClient("http://api.test", http=http)

    assert client.load_gateway_script() is True
    assert http.get.call_args.args[0] == "https://checkout.razorpay.com/v1/checkout.js"


def test_initiate_builds_checkout_options(http, callbacks):
    http.post.return_value = _response(200, GATEWAY_ORDER)

    attempt = _start(_client(http), callbacks)

    assert attempt.state == PaymentState.order_created
    assert attempt.options == {
        "key": "rzp_test_AbCdEfGh1234",
        "amount": 49900,
        "currency": "INR",
        "name": "Decon Fashions",
        "description": "Payment for Order #ORD0007",
        "order_id": "order_Test123",
        "prefill": {"name": "Asha Rao", "email": "asha@example.com", "contact": "9876543210"},
        "theme": {"color": "#0066FF"},
    }
    url = http.post.call_args.args[0]
    assert url == "http://api.test/payments/razorpay/create-order"
    assert http.post.call_args.kwargs["json"] == {"amount": 499, "receipt": "ORD0007", "order_id": 7}
    assert http.post.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}


def test_complete_verifies_and_succeeds(http, callbacks):
    on_success, on_failure = callbacks
    http.post.side_effect = [
        _response(200, GATEWAY_ORDER),
        _response(200, {"success": True, "message": "Payment verified successfully"}),
    ]
    attempt = _start(_client(http), callbacks)

    attempt.complete(GATEWAY_RESPONSE)

    assert attempt.state == PaymentState.done
    on_success.assert_called_once_with()
    on_failure.assert_not_called()
    assert http.post.call_args.kwargs["json"] == {**GATEWAY_RESPONSE, "order_id": 7}


def test_complete_is_ignored_once_finished(http, callbacks):
    on_success, _ = callbacks
    http.post.side_effect = [_response(200, GATEWAY_ORDER), _response(200, {"success": True})]
    attempt = _start(_client(http), callbacks)

    attempt.complete(GATEWAY_RESPONSE)
    attempt.complete(GATEWAY_RESPONSE)

    assert on_success.call_count == 1
    assert http.post.call_count == 2


def test_verification_error_uses_server_message(http, callbacks):
    on_success, on_failure = callbacks
    http.post.side_effect = [
        _response(200, GATEWAY_ORDER),
        _response(400, {"error": "Invalid payment signature"}),
    ]
    attempt = _start(_client(http), callbacks)

    attempt.complete(GATEWAY_RESPONSE)

    assert attempt.state == PaymentState.failed
    on_failure.assert_called_once_with("Invalid payment signature")
    on_success.assert_not_called()


def test_dismiss_reports_cancellation(http, callbacks):
    _, on_failure = callbacks
    http.post.return_value = _response(200, GATEWAY_ORDER)
    attempt = _start(_client(http), callbacks)

    attempt.dismiss()

    assert attempt.state == PaymentState.failed
    on_failure.assert_called_once_with("Payment cancelled")


def test_script_failure_stops_before_order(http, callbacks):
    _, on_failure = callbacks

    attempt = _start(_client(http, loader=lambda: False), callbacks)

    assert attempt.state == PaymentState.failed
    on_failure.assert_called_once_with("Failed to load payment gateway")
    http.post.assert_not_called()


def test_missing_token(http, callbacks):
    _, on_failure = callbacks

    _start(_client(http, token=None), callbacks)

    on_failure.assert_called_once_with("Please login to continue")
    http.post.assert_not_called()


def test_create_order_error_falls_back_to_default(http, callbacks):
    _, on_failure = callbacks
    response = _response(502)
    response.json.side_effect = ValueError("not json")
    http.post.return_value = response

    _start(_client(http), callbacks)

    on_failure.assert_called_once_with("Failed to create order")


def test_network_error(http, callbacks):
    _, on_failure = callbacks
    http.post.side_effect = requests.ConnectionError("down")

    attempt = _start(_client(http), callbacks)

    assert attempt.failure_reason == "Failed to create order"
    on_failure.assert_called_once_with("Failed to create order")


def test_non_json_success_body_reports_failure(http, callbacks):
    _, on_failure = callbacks
    response = _response(200)
    response.json.side_effect = ValueError("Expecting value")
    http.post.return_value = response

    attempt = _start(_client(http), callbacks)

    assert attempt.state == PaymentState.failed
    on_failure.assert_called_once_with("Failed to create order")


def test_incomplete_gateway_order_reports_failure(http, callbacks):
    _, on_failure = callbacks
    http.post.return_value = _response(200, {"order_id": "order_Test123"})

    attempt = _start(_client(http), callbacks)

    assert attempt.state == PaymentState.failed
    assert attempt.options is None
    on_failure.assert_called_once_with("Failed to create order")


def test_non_json_verification_body_reports_failure(http, callbacks):
    on_success, on_failure = callbacks
    broken = _response(200)
    broken.json.side_effect = ValueError("Expecting value")
    http.post.side_effect = [_response(200, GATEWAY_ORDER), broken]
    attempt = _start(_client(http), callbacks)

    attempt.complete(GATEWAY_RESPONSE)

    assert attempt.state == PaymentState.failed
    on_failure.assert_called_once_with("Payment verification failed")
    on_success.assert_not_called()
