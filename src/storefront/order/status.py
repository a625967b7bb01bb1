"""Back-office order status changes: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.shopper import require_admin
from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id: Identifier(required=True)
    new_status: String(required=True, max_length=20)
    actor_id: Identifier(required=True)


@storefront.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        require_admin(
            command.actor_id,
            path=f"users/{order.customer_id}/orders/{order.id}",
            operation="update",
            request_data={"status": command.new_status},
        )

        order.change_status(command.new_status)
        repo.add(order)
