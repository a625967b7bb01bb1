"""Outbound relay for order status changes.

Other contexts running in the same process (the notification feed)
subscribe here instead of importing the storefront domain. Subscribers get a
plain payload shaped like ``shared.events.storefront.OrderStatusChanged``.
A failing subscriber is logged and never rolls back the status change.
"""

from typing import Callable

import structlog
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.order.events import OrderStatusChanged
from storefront.order.order import Order

logger = structlog.get_logger(__name__)

_subscribers: list[Callable[[dict], None]] = []


def subscribe_status_changes(callback: Callable[[dict], None]) -> Callable[[], None]:
    """Register ``callback``; returns a function that unregisters it."""
    _subscribers.append(callback)

    def unsubscribe() -> None:
        if callback in _subscribers:
            _subscribers.remove(callback)

    return unsubscribe


def status_change_payload(event: OrderStatusChanged) -> dict:
    return {
        "order_id": str(event.order_id),
        "customer_id": str(event.customer_id),
        "previous_status": event.previous_status,
        "new_status": event.new_status,
        "changed_at": event.changed_at,
    }


@storefront.event_handler(part_of=Order)
class OrderStatusRelay:
    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        payload = status_change_payload(event)
        for callback in list(_subscribers):
            try:
                callback(payload)
            except Exception:
                logger.exception("Order status subscriber failed", order_id=payload["order_id"])
