"""Tests for the Product aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import ProductAdded, ProductDiscountChanged, ProductRestocked, ProductSold
from storefront.catalogue.product import Product
from storefront.state.products import ProductKind


def _make_product(**overrides):
    data = {
        "name": "Huile d'olive 1L",
        "price": 230.0,
        "stock": 10,
        "discount": 10.0,
        "category_id": "cat-epicerie",
        "images": ["oil-front.jpg", "oil-back.jpg"],
    }
    data.update(overrides)
    return Product.create(**data)


class TestProductCreation:
    def test_create_sets_fields(self):
        product = _make_product()
        assert product.name == "Huile d'olive 1L"
        assert product.kind == ProductKind.STANDARD.value
        assert product.sold == 0
        assert product.image_list == ["oil-front.jpg", "oil-back.jpg"]

    def test_create_raises_product_added(self):
        product = _make_product()
        events = [e for e in product._events if isinstance(e, ProductAdded)]
        assert len(events) == 1
        assert events[0].product_id == str(product.id)
        assert events[0].stock == 10

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            _make_product(price=0)

    def test_discount_over_100_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(discount=120)

    def test_bundle_requires_items(self):
        with pytest.raises(ValidationError):
            _make_product(kind=ProductKind.BUNDLE.value)

    def test_bundle_with_items(self):
        product = _make_product(kind=ProductKind.BUNDLE.value, bundle_items=["p1", "p2"])
        assert product.kind == ProductKind.BUNDLE.value

    def test_standard_product_cannot_list_bundle_items(self):
        with pytest.raises(ValidationError):
            _make_product(bundle_items=["p1"])


class TestProductSnapshot:
    def test_snapshot_copies_catalogue_values(self):
        product = _make_product()
        snapshot = product.to_snapshot()
        assert snapshot.product_id == str(product.id)
        assert snapshot.price == 230.0
        assert snapshot.discount == 10.0
        assert snapshot.images == ("oil-front.jpg", "oil-back.jpg")
        assert snapshot.primary_image == "oil-front.jpg"
        assert snapshot.discounted_price == pytest.approx(207.0)

    def test_discounted_price(self):
        assert _make_product(price=200.0, discount=25).discounted_price == pytest.approx(150.0)


class TestDiscount:
    def test_set_discount(self):
        product = _make_product(discount=0)
        product.set_discount(15)
        assert product.discount == 15
        events = [e for e in product._events if isinstance(e, ProductDiscountChanged)]
        assert events[0].previous_discount == 0
        assert events[0].new_discount == 15

    def test_same_discount_raises_no_event(self):
        product = _make_product(discount=10)
        product._events.clear()
        product.set_discount(10)
        assert product._events == []

    @pytest.mark.parametrize("percent", [-1, 101])
    def test_out_of_range_rejected(self, percent):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.set_discount(percent)


class TestStock:
    def test_restock(self):
        product = _make_product(stock=2)
        product.restock(5)
        assert product.stock == 7
        assert any(isinstance(e, ProductRestocked) for e in product._events)

    def test_restock_requires_positive_quantity(self):
        with pytest.raises(ValidationError):
            _make_product().restock(0)

    def test_sell_decrements_stock_and_counts_sold(self):
        product = _make_product(stock=5)
        product.sell(3)
        assert product.stock == 2
        assert product.sold == 3
        sold = [e for e in product._events if isinstance(e, ProductSold)]
        assert sold[0].remaining_stock == 2

    def test_sell_more_than_stock_rejected(self):
        product = _make_product(stock=2)
        with pytest.raises(ValidationError) as exc:
            product.sell(3)
        assert "Available: 2, Requested: 3" in exc.value.messages["stock"][0]
        assert product.stock == 2

    def test_sell_exact_stock(self):
        product = _make_product(stock=4)
        product.sell(4)
        assert product.stock == 0
