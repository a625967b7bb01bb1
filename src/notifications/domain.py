"""Notifications bounded context: in-app messages for shoppers.

Consumes Storefront order events and keeps a per-user feed of short
messages (with a link back to the order) that the header bell shows and
marks as read.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
