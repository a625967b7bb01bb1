"""Storefront bounded context: catalogue stock, coupons, shoppers and orders.

Owns the only durable-write boundary of the shopping flow (order placement)
together with the client-side commerce state (cart, comparison, wishlist)
that feeds it.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
