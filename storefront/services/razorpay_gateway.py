import logging
from typing import Any, Dict, Optional

import razorpay
import requests
from pydantic import BaseModel

from storefront.config import settings as app_settings
from storefront.constants.gateway import RAZORPAY_CREDENTIALS_KEY
from storefront.exceptions import ConfigurationError, GatewayError
from storefront.repositories.settings import SettingsRepository

logger = logging.getLogger(__name__)

_SDK_ERRORS = (
    razorpay.errors.BadRequestError,
    razorpay.errors.GatewayError,
    razorpay.errors.ServerError,
    requests.RequestException,
)


class GatewayCredentials(BaseModel):
    key_id: str
    key_secret: str
    source: str  # env | stored

    @property
    def key_id_preview(self) -> str:
        return mask_key_id(self.key_id)

    @property
    def is_test_mode(self) -> bool:
        return self.key_id.startswith("rzp_test_")


def mask_key_id(key_id: str) -> str:
    return f"{key_id[:8]}...{key_id[-4:]}"


def resolve_credentials(
    store_settings: SettingsRepository,
    config=app_settings,
) -> GatewayCredentials:
    """
    Environment first, then the ``razorpay_credentials`` store setting.

    Raises ``ConfigurationError`` when neither holds a key pair.
    """
    if config.razorpay_key_id and config.razorpay_key_secret:
        return GatewayCredentials(
            key_id=config.razorpay_key_id,
            key_secret=config.razorpay_key_secret,
            source="env",
        )

    stored = store_settings.get_value(RAZORPAY_CREDENTIALS_KEY) or {}
    if stored.get("key_id") and stored.get("key_secret"):
        return GatewayCredentials(
            key_id=stored["key_id"],
            key_secret=stored["key_secret"],
            source="stored",
        )

    logger.error("Razorpay credentials not configured (env and store_settings empty)")
    raise ConfigurationError()


class RazorpayGateway:
    """Thin wrapper over the Razorpay SDK client."""

    def __init__(self, credentials: GatewayCredentials, client=None):
        self.credentials = credentials
        self.client = client or razorpay.Client(
            auth=(credentials.key_id, credentials.key_secret)
        )

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            return self.client.order.create(
                {
                    "amount": amount,  # paise
                    "currency": currency,
                    "receipt": receipt,
                    "notes": notes or {},
                }
            )
        except _SDK_ERRORS as e:
            logger.error(f"Razorpay order creation failed for receipt {receipt}: {e}")
            raise GatewayError(upstream_body=str(e)) from e

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        # HMAC-SHA256(secret, "order_id|payment_id"), constant-time compare in the SDK
        if not signature.isascii():
            return False
        try:
            self.client.utility.verify_payment_signature({
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except razorpay.errors.SignatureVerificationError:
            return False
        return True

    def check_credentials(self) -> bool:
        """Cheap authenticated call used to validate a key pair."""
        try:
            self.client.payment.all({"count": 1})
        except _SDK_ERRORS as e:
            logger.warning(f"Razorpay credential check failed: {e}")
            return False
        return True
