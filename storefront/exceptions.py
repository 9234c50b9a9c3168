"""
Error taxonomy for the storefront API.

Services raise these; a single FastAPI handler renders them as
``{"error": message}`` with the matching status code.
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(StorefrontError):
    """Gateway credentials (or another required setting) are missing."""
    default_message = (
        "Payments are not configured for this store. Please contact support."
    )


class AuthenticationError(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationError(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidSignatureError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid payment signature"


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class GatewayError(StorefrontError):
    """Upstream payment gateway answered with an error.

    ``upstream_body`` is for server logs only and never reaches the client.
    """
    default_message = "Failed to create payment order"

    def __init__(self, message=None, upstream_body=None):
        super().__init__(message)
        self.upstream_body = upstream_body


async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
