"""Application tests for all-or-nothing order placement."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.catalogue.management import AddProduct
from storefront.catalogue.product import Product
from storefront.coupon.coupon import Coupon
from storefront.customer.shopper import RegisterShopper, Shopper
from storefront.order.order import Order, OrderStatus
from storefront.order.placement import PlaceOrder
from storefront.order.queries import orders_for_customer


def _register(name="Amina"):
    return current_domain.process(
        RegisterShopper(name=name, email=f"{name.lower()}@example.com"),
        asynchronous=False,
    )


def _add_product(name="Huile d'olive", price=230.0, stock=10, discount=10.0):
    return current_domain.process(
        AddProduct(name=name, price=price, stock=stock, discount=discount),
        asynchronous=False,
    )


def _line(product_id, quantity, name="Huile d'olive", unit_price=230.0, discount_percent=10.0):
    return {
        "product_id": product_id,
        "name": name,
        "unit_price": unit_price,
        "discount_percent": discount_percent,
        "quantity": quantity,
    }


def _place(customer_id, lines, total_amount=621.0, coupon_code=None):
    command = PlaceOrder(
        customer_id=customer_id,
        shipping_address="12 rue Larbi Ben M'hidi, Oran",
        phone="0555 12 34 56",
        items=json.dumps(lines),
        total_amount=total_amount,
        coupon_code=coupon_code,
    )
    return current_domain.process(command, asynchronous=False)


class TestPlaceOrderSuccess:
    def test_creates_pending_order_with_discounted_line_prices(self):
        shopper_id = _register()
        product_id = _add_product()

        order_id = _place(shopper_id, [_line(product_id, 3)])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.total_amount == 621.0
        assert order.items[0].price == pytest.approx(207.0)
        assert order.items[0].quantity == 3

    def test_decrements_stock_and_counts_sold(self):
        shopper_id = _register()
        product_id = _add_product(stock=10)

        _place(shopper_id, [_line(product_id, 3)])

        product = current_domain.repository_for(Product).get(product_id)
        assert product.stock == 7
        assert product.sold == 3

    def test_updates_shopper_statistics(self):
        shopper_id = _register()
        product_id = _add_product()

        _place(shopper_id, [_line(product_id, 3)])

        shopper = current_domain.repository_for(Shopper).get(shopper_id)
        assert shopper.order_count == 1
        assert shopper.total_spent == pytest.approx(621.0)
        assert shopper.loyalty_points == 6
        assert shopper.phone == "0555 12 34 56"

    def test_order_listed_for_customer(self):
        shopper_id = _register()
        product_id = _add_product()
        order_id = _place(shopper_id, [_line(product_id, 1)], total_amount=207.0)

        orders = orders_for_customer(shopper_id)
        assert [str(order.id) for order in orders] == [order_id]

    def test_coupon_code_is_recorded(self):
        shopper_id = _register()
        product_id = _add_product()
        current_domain.repository_for(Coupon).add(
            Coupon.create(code="RAMADAN10", discount_percentage=10, expiry_date=datetime.now(UTC) + timedelta(days=1))
        )

        order_id = _place(shopper_id, [_line(product_id, 3)], total_amount=558.9, coupon_code="ramadan10")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.coupon_code == "RAMADAN10"
        assert order.total_amount == 558.9


class TestPlaceOrderFailure:
    def test_not_enough_stock_changes_nothing(self):
        shopper_id = _register()
        product_id = _add_product(stock=2)

        with pytest.raises(ValidationError) as exc:
            _place(shopper_id, [_line(product_id, 3)])

        assert "Available: 2, Requested: 3" in exc.value.messages["stock"][0]
        product = current_domain.repository_for(Product).get(product_id)
        assert product.stock == 2
        assert product.sold == 0
        assert orders_for_customer(shopper_id) == []
        assert current_domain.repository_for(Shopper).get(shopper_id).order_count == 0

    def test_one_short_line_blocks_the_whole_order(self):
        shopper_id = _register()
        plenty = _add_product(name="Semoule", stock=50)
        scarce = _add_product(name="Safran", stock=1)

        with pytest.raises(ValidationError):
            _place(shopper_id, [_line(plenty, 5, name="Semoule"), _line(scarce, 2, name="Safran")])

        assert current_domain.repository_for(Product).get(plenty).stock == 50
        assert current_domain.repository_for(Product).get(scarce).stock == 1

    def test_all_shortages_are_reported(self):
        shopper_id = _register()
        first = _add_product(name="Semoule", stock=0)
        second = _add_product(name="Safran", stock=1)

        with pytest.raises(ValidationError) as exc:
            _place(shopper_id, [_line(first, 1), _line(second, 2)])

        assert len(exc.value.messages["stock"]) == 2

    def test_unknown_shopper(self):
        product_id = _add_product()
        with pytest.raises(ValidationError) as exc:
            _place("ghost", [_line(product_id, 1)])
        assert exc.value.messages["customer_id"] == ["User does not exist."]

    def test_unknown_product(self):
        shopper_id = _register()
        with pytest.raises(ValidationError) as exc:
            _place(shopper_id, [_line("no-such-product", 1)])
        assert "not found" in exc.value.messages["items"][0]

    def test_empty_items(self):
        shopper_id = _register()
        with pytest.raises(ValidationError):
            _place(shopper_id, [])

    def test_zero_quantity_line(self):
        shopper_id = _register()
        product_id = _add_product()
        with pytest.raises(ValidationError):
            _place(shopper_id, [_line(product_id, 0)])

    def test_expired_coupon_blocks_order(self):
        shopper_id = _register()
        product_id = _add_product(stock=5)
        current_domain.repository_for(Coupon).add(
            Coupon.create(code="OLD", discount_percentage=10, expiry_date=datetime.now(UTC) - timedelta(days=1))
        )

        with pytest.raises(ValidationError) as exc:
            _place(shopper_id, [_line(product_id, 1)], coupon_code="OLD")

        assert "expired" in exc.value.messages["coupon_code"][0]
        assert current_domain.repository_for(Product).get(product_id).stock == 5
