"""Inbound cross-domain event handler: Notifications reacts to Storefront order events.

Every status change the back office makes becomes a message in the
shopper's feed. Delivery is best-effort: a failure here is logged and never
undoes the status change.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.storefront import OrderStatusChanged

logger = structlog.get_logger(__name__)

notifications.register_external_event(OrderStatusChanged, "Storefront.OrderStatusChanged.v1")


def order_link(order_id: str) -> str:
    return f"/dashboard/orders/{order_id}"


def status_message(order_id: str, status: str) -> str:
    return f"Order #{str(order_id)[-6:]} is now {status}"


@notifications.event_handler(part_of=Notification, stream_category="storefront::order")
class OrderStatusEventsHandler:
    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        if not event.customer_id:
            logger.info("OrderStatusChanged without customer_id, skipping", order_id=str(event.order_id))
            return

        notification = Notification.create(
            user_id=str(event.customer_id),
            message=status_message(event.order_id, event.new_status),
            link=order_link(str(event.order_id)),
        )
        current_domain.repository_for(Notification).add(notification)

        logger.info(
            "Order status notification created",
            user_id=str(event.customer_id),
            order_id=str(event.order_id),
            status=event.new_status,
        )


def deliver_order_status_changed(payload: dict) -> None:
    """Hand a Storefront ``OrderStatusChanged`` payload to this domain in-process.

    Used when both domains run in the same process (the HTTP app). Errors
    are logged, not raised.
    """
    try:
        with notifications.domain_context():
            event = OrderStatusChanged(**payload)
            OrderStatusEventsHandler().on_order_status_changed(event)
    except Exception:
        logger.exception("Failed to deliver order status notification", order_id=payload.get("order_id"))
