"""Storefront domain API package."""

from storefront.api.routes import (
    category_router,
    coupon_router,
    order_router,
    product_router,
    shopper_router,
)

__all__ = ["product_router", "category_router", "coupon_router", "shopper_router", "order_router"]
