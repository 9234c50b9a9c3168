import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import settings
from storefront.database import create_db_and_tables
from storefront.exceptions import StorefrontError, storefront_error_handler
from storefront.routes import (
    admin_bundles,
    admin_catalog,
    admin_coupons,
    admin_offers,
    admin_orders,
    admin_settings,
    auth,
    bundles,
    cart,
    checkout,
    payments,
    products,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{field}: {message}" if field else message},
    )


app = FastAPI(title="Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StorefrontError, storefront_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(bundles.router, prefix="/bundles", tags=["Bundles"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(admin_catalog.router, prefix="/admin", tags=["Admin Catalog"])
app.include_router(admin_offers.router, prefix="/admin/offers", tags=["Admin Offers"])
app.include_router(admin_coupons.router, prefix="/admin/coupons", tags=["Admin Coupons"])
app.include_router(admin_bundles.router, prefix="/admin/bundles", tags=["Admin Bundles"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(admin_settings.router, prefix="/admin/settings", tags=["Admin Settings"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/register", "/auth/login"],
        "catalog": ["/products", "/products/{product_id}", "/bundles"],
        "cart": ["/cart/offers", "/cart/apply-coupon"],
        "checkout": ["/checkout/place-order", "/checkout/orders", "/checkout/orders/{order_id}"],
        "payments": [
            "/payments/razorpay/create-order",
            "/payments/razorpay/verify",
            "/payments/orders/{order_id}/failed",
        ],
        "admin": [
            "/admin/categories", "/admin/products", "/admin/offers",
            "/admin/coupons", "/admin/bundles", "/admin/orders",
            "/admin/settings/razorpay",
        ],
    }
