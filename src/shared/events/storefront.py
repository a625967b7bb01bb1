"""Cross-domain event contracts for Storefront order events.

These mirror the source-of-truth events in src/storefront/order/events.py.
The Notifications domain registers them as external events with matching
__type__ strings so they deserialize from the ``storefront::order`` stream.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class OrderPlaced(BaseEvent):
    """A shopper's cart was turned into a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of order lines
    total_amount = Float(required=True)
    coupon_code = String()
    placed_at = DateTime(required=True)


class OrderStatusChanged(BaseEvent):
    """The back office moved an order to a new status.

    Consumed by the Notifications domain to tell the shopper.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
