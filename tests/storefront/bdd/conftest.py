"""Shared BDD fixtures and step definitions for the Storefront."""

import pytest
from pytest_bdd import given, parsers, then
from storefront.state.products import ProductSnapshot
from storefront.state.session import StorefrontSession
from storefront.state.storage import MemoryStorage
from storefront.state.toasts import MemoryToastSink


@pytest.fixture()
def shop():
    """Mutable holder for the session, storages and catalogue under test."""
    return {
        "durable": MemoryStorage(),
        "session_storage": MemoryStorage(),
        "toasts": MemoryToastSink(),
        "products": {},
        "session": None,
        "user_id": None,
    }


def _split(names):
    return [name.strip() for name in names.split(",") if name.strip()]


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an empty storefront session for "{user_id}"'))
def empty_session(shop, user_id):
    shop["user_id"] = user_id
    shop["session"] = StorefrontSession.open(
        shop["durable"], shop["session_storage"], user_id=user_id, toasts=shop["toasts"]
    )


@given(parsers.cfparse('a product "{product_id}" priced {price:g} with a {discount:g} percent discount'))
def priced_product(shop, product_id, price, discount):
    shop["products"][product_id] = ProductSnapshot(
        product_id=product_id, name=product_id, price=price, discount=discount, stock=100
    )


@given(parsers.cfparse('products "{product_ids}" in the catalogue'))
def catalogue_products(shop, product_ids):
    for product_id in _split(product_ids):
        shop["products"][product_id] = ProductSnapshot(product_id=product_id, name=product_id, price=10.0)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart holds {count:d} items"))
def cart_holds(shop, count):
    assert shop["session"].cart.total_items == count


@then("the cart is empty")
def cart_is_empty(shop):
    assert shop["session"].cart.items == ()


@then(parsers.cfparse('the shopper sees the "{key}" toast'))
def sees_toast(shop, key):
    assert key in shop["toasts"].keys
