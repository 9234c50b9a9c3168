import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from storefront.config import settings
from storefront.constants.gateway import RAZORPAY_CREDENTIALS_KEY, RAZORPAY_STATUS_KEY
from storefront.dependencies.admin import require_admin
from storefront.dependencies.services import get_gateway_factory, get_settings_repository
from storefront.exceptions import ValidationError
from storefront.repositories.settings import SettingsRepository
from storefront.schemas.payment_schemas import RazorpayConnectRequest, RazorpayStatus
from storefront.services.razorpay_gateway import GatewayCredentials, mask_key_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/razorpay", response_model=RazorpayStatus)
def razorpay_status(
    store_settings: SettingsRepository = Depends(get_settings_repository),
    admin=Depends(require_admin),
):
    key_id = settings.razorpay_key_id
    key_secret = settings.razorpay_key_secret
    source = "env" if key_id and key_secret else None

    if not source:
        stored = store_settings.get_value(RAZORPAY_CREDENTIALS_KEY) or {}
        if stored.get("key_id") and stored.get("key_secret"):
            key_id, key_secret, source = stored["key_id"], stored["key_secret"], "stored"

    return RazorpayStatus(
        connected=bool(key_id and key_secret),
        has_key_id=bool(key_id),
        has_key_secret=bool(key_secret),
        key_id_preview=mask_key_id(key_id) if key_id else None,
        source=source,
        is_test_mode=key_id.startswith("rzp_test_") if key_id else None,
    )


@router.post("/razorpay/connect")
def razorpay_connect(
    payload: RazorpayConnectRequest,
    store_settings: SettingsRepository = Depends(get_settings_repository),
    gateway_factory=Depends(get_gateway_factory),
    admin=Depends(require_admin),
):
    credentials = GatewayCredentials(
        key_id=payload.key_id.strip(),
        key_secret=payload.key_secret.strip(),
        source="stored",
    )

    if not gateway_factory(credentials).check_credentials():
        raise ValidationError(
            "Invalid Razorpay credentials. Please verify your API Key ID and Secret."
        )

    store_settings.upsert(
        RAZORPAY_STATUS_KEY,
        {
            "key_id_preview": credentials.key_id_preview,
            "is_connected": True,
            "connected_at": datetime.utcnow().isoformat(),
            "is_test_mode": credentials.is_test_mode,
        },
    )
    store_settings.upsert(
        RAZORPAY_CREDENTIALS_KEY,
        {"key_id": credentials.key_id, "key_secret": credentials.key_secret},
    )
    logger.info(f"Admin {admin.id} connected Razorpay key {credentials.key_id_preview}")

    return {
        "success": True,
        "message": "Razorpay connected successfully",
        "is_test_mode": credentials.is_test_mode,
    }


@router.post("/razorpay/disconnect")
def razorpay_disconnect(
    store_settings: SettingsRepository = Depends(get_settings_repository),
    admin=Depends(require_admin),
):
    store_settings.upsert(RAZORPAY_STATUS_KEY, {"is_connected": False, "key_id_preview": None})
    store_settings.delete(RAZORPAY_CREDENTIALS_KEY)
    logger.info(f"Admin {admin.id} disconnected Razorpay")
    return {"success": True, "message": "Razorpay disconnected"}
