"""Order summary: lightweight row per order for dashboard lists."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import Order, OrderStatus


@storefront.projection
class OrderSummary:
    order_id: Identifier(identifier=True, required=True)
    customer_id: Identifier(required=True)
    status: String(required=True)
    item_count: Integer(default=0)
    unit_count: Integer(default=0)
    total_amount: Float()
    coupon_code: String()
    placed_at: DateTime()
    updated_at: DateTime()


@storefront.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                customer_id=event.customer_id,
                status=OrderStatus.PENDING.value,
                item_count=len(items),
                unit_count=sum(item.get("quantity", 0) for item in items),
                total_amount=event.total_amount,
                coupon_code=event.coupon_code,
                placed_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        try:
            summary = repo.get(event.order_id)
        except ObjectNotFoundError:
            return
        summary.status = event.new_status
        summary.updated_at = event.changed_at
        repo.add(summary)
