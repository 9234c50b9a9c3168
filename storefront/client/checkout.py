"""
Client side of the Razorpay handshake.

Mirrors what the storefront's browser code does: make sure the gateway
checkout script is reachable, ask the API for a gateway order, hand the
checkout options to whatever renders the modal, then send the signed
gateway response back for verification. Every failure, cancellation
included, goes through the caller's single ``on_failure`` callback.
"""
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests

from storefront.constants.gateway import (
    DEFAULT_STORE_NAME,
    DEFAULT_THEME_COLOR,
    RAZORPAY_CHECKOUT_SCRIPT,
)

logger = logging.getLogger(__name__)


class PaymentState(str, Enum):
    init = "init"
    order_created = "order_created"
    awaiting_verification = "awaiting_verification"
    verified = "verified"
    done = "done"
    failed = "failed"


class PaymentFlowError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PaymentAttempt:
    """One checkout attempt; a retry is a new attempt with a new gateway order."""

    def __init__(self, client: "CheckoutClient", order_id: int, on_success, on_failure):
        self.client = client
        self.order_id = order_id
        self.on_success = on_success
        self.on_failure = on_failure
        self.state = PaymentState.init
        self.options: Optional[Dict[str, Any]] = None
        self.failure_reason: Optional[str] = None

    def fail(self, message: str):
        self.state = PaymentState.failed
        self.failure_reason = message
        self.on_failure(message)

    def complete(self, response: Dict[str, str]):
        """Gateway success callback with the three ``razorpay_*`` fields."""
        if self.state != PaymentState.order_created:
            logger.warning(f"Ignoring gateway response for order {self.order_id} in state {self.state.value}")
            return

        response = response or {}
        self.state = PaymentState.awaiting_verification
        try:
            self.client.verify_payment(
                response.get("razorpay_order_id"),
                response.get("razorpay_payment_id"),
                response.get("razorpay_signature"),
                self.order_id,
            )
        except PaymentFlowError as e:
            self.fail(e.message or "Payment verification failed")
            return

        self.state = PaymentState.verified
        self.on_success()
        self.state = PaymentState.done

    def dismiss(self):
        """The user closed the gateway modal without paying."""
        if self.state == PaymentState.order_created:
            self.fail("Payment cancelled")


class CheckoutClient:
    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        http: Optional[requests.Session] = None,
        script_loader: Optional[Callable[[], bool]] = None,
        store_name: str = DEFAULT_STORE_NAME,
        theme_color: str = DEFAULT_THEME_COLOR,
        timeout: float = 15,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.http = http or requests.Session()
        self.script_loader = script_loader or self._fetch_checkout_script
        self.store_name = store_name
        self.theme_color = theme_color
        self.timeout = timeout
        self._script_loaded = False

    def _fetch_checkout_script(self) -> bool:
        try:
            response = self.http.get(RAZORPAY_CHECKOUT_SCRIPT, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Could not load gateway script: {e}")
            return False
        return response.ok

    def load_gateway_script(self) -> bool:
        # only success is remembered, a failed load can be retried
        if self._script_loaded:
            return True
        self._script_loaded = bool(self.script_loader())
        return self._script_loaded

    def _post(self, path: str, body: Dict[str, Any], default_error: str) -> Dict[str, Any]:
        if not self.access_token:
            raise PaymentFlowError("Please login to continue")

        try:
            response = self.http.post(
                f"{self.base_url}{path}",
                json=body,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"POST {path} failed: {e}")
            raise PaymentFlowError(default_error) from e

        if not response.ok:
            try:
                message = response.json().get("error") or default_error
            except (ValueError, AttributeError):
                message = default_error
            raise PaymentFlowError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"POST {path} returned a non-JSON body: {e}")
            raise PaymentFlowError(default_error, status_code=response.status_code) from e

    def create_order(
        self,
        amount: float,
        receipt: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        return self._post(
            "/payments/razorpay/create-order",
            {"amount": amount, "receipt": receipt, "order_id": order_id},
            "Failed to create order",
        )

    def verify_payment(
        self,
        razorpay_order_id: str,
        razorpay_payment_id: str,
        razorpay_signature: str,
        order_id: int,
    ) -> Dict[str, Any]:
        return self._post(
            "/payments/razorpay/verify",
            {
                "razorpay_order_id": razorpay_order_id,
                "razorpay_payment_id": razorpay_payment_id,
                "razorpay_signature": razorpay_signature,
                "order_id": order_id,
            },
            "Payment verification failed",
        )

    def initiate_payment(
        self,
        *,
        amount: float,
        order_id: int,
        order_number: str,
        on_success: Callable[[], None],
        on_failure: Callable[[str], None],
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        customer_phone: Optional[str] = None,
    ) -> PaymentAttempt:
        """
        Start a payment attempt and return it with ``options`` filled in
        for the gateway modal. The caller opens the modal and forwards its
        outcome to ``attempt.complete(...)`` or ``attempt.dismiss()``.
        """
        attempt = PaymentAttempt(self, order_id, on_success, on_failure)

        if not self.load_gateway_script():
            attempt.fail("Failed to load payment gateway")
            return attempt

        try:
            gateway_order = self.create_order(amount, order_number, order_id)
            attempt.options = {
                "key": gateway_order["key_id"],
                "amount": gateway_order["amount"],
                "currency": gateway_order["currency"],
                "name": self.store_name,
                "description": f"Payment for Order #{order_number}",
                "order_id": gateway_order["order_id"],
                "prefill": {
                    "name": customer_name,
                    "email": customer_email,
                    "contact": customer_phone,
                },
                "theme": {"color": self.theme_color},
            }
        except PaymentFlowError as e:
            attempt.fail(e.message or "Failed to initiate payment")
            return attempt
        except (KeyError, TypeError) as e:
            logger.error(f"Unexpected create-order response for order {order_number}: {e!r}")
            attempt.fail("Failed to create order")
            return attempt

        attempt.state = PaymentState.order_created
        return attempt
