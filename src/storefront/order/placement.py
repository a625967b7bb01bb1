"""Order placement: the one place where a cart becomes durable.

``PlaceOrder`` is all-or-nothing. Every line is checked against live stock
before anything is written; a single short line fails the whole command and
no order, stock or shopper change is stored.
"""

import json
from collections import Counter

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.coupon.coupon import find_redeemable_coupon
from storefront.customer.shopper import Shopper
from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id: Identifier(required=True)
    shipping_address: String(required=True, max_length=500)
    phone: String(max_length=30)
    items: Text(required=True)  # JSON: list of {product_id, name, unit_price, discount_percent, quantity}
    total_amount: Float(required=True)
    coupon_code: String(max_length=50)


def _load_products(product_ids):
    repo = current_domain.repository_for(Product)
    products = {}
    for product_id in product_ids:
        try:
            products[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            raise ValidationError({"items": [f"Product {product_id} not found"]}) from None
    return products


def _check_stock(products, requested):
    shortages = [
        f"Not enough stock for {products[pid].name}. Available: {products[pid].stock}, Requested: {qty}"
        for pid, qty in requested.items()
        if not products[pid].has_stock_for(qty)
    ]
    if shortages:
        raise ValidationError({"stock": shortages})


def _order_line(line, product):
    discount = line.get("discount_percent") or 0.0
    unit_price = line.get("unit_price", product.price)
    return {
        "product_id": str(product.id),
        "product_name": line.get("name") or product.name,
        "quantity": line["quantity"],
        "price": unit_price * (1 - discount / 100),
    }


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not lines:
            raise ValidationError({"items": ["Cannot place an order with an empty cart"]})
        if any(int(line.get("quantity", 0)) < 1 for line in lines):
            raise ValidationError({"items": ["Every line needs a quantity of at least 1"]})

        shopper_repo = current_domain.repository_for(Shopper)
        try:
            shopper = shopper_repo.get(command.customer_id)
        except ObjectNotFoundError:
            raise ValidationError({"customer_id": ["User does not exist."]}) from None

        requested = Counter()
        for line in lines:
            requested[str(line["product_id"])] += int(line["quantity"])

        products = _load_products(requested)
        _check_stock(products, requested)

        if command.coupon_code:
            find_redeemable_coupon(command.coupon_code)

        # Nothing has been written up to here.
        order = Order.place(
            customer_id=command.customer_id,
            shipping_address=command.shipping_address,
            items_data=[_order_line(line, products[str(line["product_id"])]) for line in lines],
            total_amount=command.total_amount,
            phone=command.phone,
            coupon_code=command.coupon_code.strip().upper() if command.coupon_code else None,
        )
        current_domain.repository_for(Order).add(order)

        product_repo = current_domain.repository_for(Product)
        for product_id, quantity in requested.items():
            product = products[product_id]
            product.sell(quantity)
            product_repo.add(product)

        shopper.record_order(command.total_amount, phone=command.phone)
        shopper_repo.add(shopper)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            lines=len(lines),
            total_amount=command.total_amount,
        )
        return str(order.id)
