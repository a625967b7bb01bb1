"""Grocerly FastAPI application.

Storefront + Notifications web server that processes commands synchronously
via HTTP. Each request is wrapped in the correct domain context based on URL
prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from notifications.domain import notifications  # noqa: E402
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.domain import storefront  # noqa: E402
from storefront.errors import ErrorChannel, PermissionDeniedError

storefront.init()
notifications.init()

# Status changes made in the storefront land in the notification feed.
from notifications.notification.storefront_events import deliver_order_status_changed  # noqa: E402
from storefront.order.relay import subscribe_status_changes  # noqa: E402

subscribe_status_changes(deliver_order_status_changed)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/products": storefront,
    "/categories": storefront,
    "/coupons": storefront,
    "/shoppers": storefront,
    "/orders": storefront,
    "/notifications": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Grocerly API",
    description="Grocery storefront: catalogue, coupons, orders and notifications",
)

# Permission failures are reported here and never echoed to the caller.
error_channel = ErrorChannel()
app.state.error_channel = error_channel

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match, pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"errors": exc.messages})


@app.exception_handler(ObjectNotFoundError)
async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    error_channel.emit(exc)
    return JSONResponse(status_code=403, content={"detail": "Missing or insufficient permissions"})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from notifications.api.routes import router as notifications_router  # noqa: E402

from storefront.api import (  # noqa: E402
    category_router,
    coupon_router,
    order_router,
    product_router,
    shopper_router,
)

app.include_router(product_router)
app.include_router(category_router)
app.include_router(coupon_router)
app.include_router(shopper_router)
app.include_router(order_router)
app.include_router(notifications_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
                "notifications": {"name": notifications.name},
            },
        }
    )
