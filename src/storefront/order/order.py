"""Order aggregate (CQRS): a placed order and its back-office status.

Prices on order items are the discounted unit prices at the moment of
placement. They never follow later catalogue changes.

Statuses:
    Pending → Confirmed → Shipped → Delivered
    any non-terminal status → Cancelled
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


@storefront.entity(part_of="Order")
class OrderItem:
    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    price: Float(required=True, min_value=0.0)  # Discounted unit price

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.price,
        }


@storefront.aggregate
class Order:
    customer_id: Identifier(required=True)
    order_date: DateTime(required=True)
    total_amount: Float(required=True, min_value=0.0)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address: String(required=True, max_length=500)
    phone: String(max_length=30)
    coupon_code: String(max_length=50)
    items: HasMany(OrderItem)

    @classmethod
    def place(cls, customer_id, shipping_address, items_data, total_amount, phone=None, coupon_code=None):
        """Create a pending order from already-validated line data."""
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            order_date=now,
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            phone=phone,
            coupon_code=coupon_code,
        )
        for data in items_data:
            order.add_items(
                OrderItem(
                    product_id=data["product_id"],
                    product_name=data["product_name"],
                    quantity=data["quantity"],
                    price=data["price"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps([item.to_dict() for item in order.items]),
                total_amount=total_amount,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    def change_status(self, new_status):
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None

        current = OrderStatus(self.status)
        if target == current:
            return
        if current in _TERMINAL_STATES:
            raise ValidationError({"status": [f"Order is already {current.value}"]})

        self.status = target.value
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=datetime.now(UTC),
            )
        )
