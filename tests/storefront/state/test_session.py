"""Tests for StorefrontSession wiring: rehydration, persistence and toasts."""

import json

import pytest
from storefront.state.cart import CartLineItem, CartState
from storefront.state.persistence import CART_KEY, COMPARISON_KEY, load_state, save_state, wishlist_key
from storefront.state.products import ProductSnapshot
from storefront.state.session import StorefrontSession
from storefront.state.storage import FileStorage, MemoryStorage
from storefront.state.toasts import MemoryToastSink, ToastVariant
from storefront.state.wishlist import WishlistState


def _product(product_id, price=100.0, discount=0.0):
    return ProductSnapshot(product_id=product_id, name=f"Product {product_id}", price=price, discount=discount)


@pytest.fixture
def durable():
    return MemoryStorage()


@pytest.fixture
def session_storage():
    return MemoryStorage()


@pytest.fixture
def toasts():
    return MemoryToastSink()


class TestRehydration:
    def test_cart_is_loaded_before_open_returns(self, durable, session_storage):
        stored = CartState(items=(CartLineItem(product_id="p1", name="Thé", unit_price=90.0, quantity=3),))
        save_state(durable, CART_KEY, stored)

        session = StorefrontSession.open(durable, session_storage)

        assert session.cart.total_items == 3

    def test_corrupt_cart_starts_empty(self, durable, session_storage):
        durable.set_item(CART_KEY, "garbage")
        session = StorefrontSession.open(durable, session_storage)
        assert session.cart.items == ()

    def test_rehydration_does_not_rewrite_storage(self, durable, session_storage):
        durable.set_item(CART_KEY, "garbage")
        StorefrontSession.open(durable, session_storage)
        assert durable.get_item(CART_KEY) == "garbage"

    def test_undecodable_cart_file_starts_empty(self, tmp_path, session_storage):
        (tmp_path / "cart.json").write_bytes(b'{"version": 1, "data": {"items": [\xff\xfe]}}')

        session = StorefrontSession.open(FileStorage(tmp_path), session_storage)

        assert session.cart.items == ()

    def test_similar_user_ids_keep_separate_wishlists(self, tmp_path, session_storage):
        StorefrontSession.open(FileStorage(tmp_path), session_storage, user_id="user/1").wishlist.toggle("p1")
        StorefrontSession.open(FileStorage(tmp_path), session_storage, user_id="user_1").wishlist.toggle("p9")

        reopened = StorefrontSession.open(FileStorage(tmp_path), session_storage, user_id="user/1")

        assert reopened.wishlist.product_ids == ("p1",)

    def test_wishlist_is_per_user(self, durable, session_storage):
        save_state(durable, wishlist_key("user-1"), WishlistState(user_id="user-1", product_ids=("p1",)))

        mine = StorefrontSession.open(durable, session_storage, user_id="user-1")
        theirs = StorefrontSession.open(durable, session_storage, user_id="user-2")

        assert mine.wishlist.product_ids == ("p1",)
        assert theirs.wishlist.product_ids == ()


class TestPersistence:
    def test_cart_changes_go_to_durable_storage(self, durable, session_storage):
        session = StorefrontSession.open(durable, session_storage)
        session.cart.add_item(_product("p1"))

        assert load_state(durable, CART_KEY, CartState).find("p1") is not None
        assert session_storage.get_item(CART_KEY) is None

    def test_comparison_goes_to_session_storage(self, durable, session_storage):
        session = StorefrontSession.open(durable, session_storage)
        session.comparison.toggle(_product("p1"))

        payload = json.loads(session_storage.get_item(COMPARISON_KEY))
        assert payload["data"]["items"][0]["product_id"] == "p1"
        assert durable.get_item(COMPARISON_KEY) is None

    def test_wishlist_saved_under_user_key(self, durable, session_storage):
        session = StorefrontSession.open(durable, session_storage, user_id="user-1")
        session.wishlist.toggle("p9")

        assert load_state(durable, wishlist_key("user-1"), WishlistState).product_ids == ("p9",)

    def test_anonymous_wishlist_is_never_written(self, durable, session_storage):
        session = StorefrontSession.open(durable, session_storage)
        session.wishlist.toggle("p9")
        assert not [key for key in durable.keys() if key.startswith("wishlist")]

    def test_reopened_session_sees_previous_cart(self, durable, session_storage):
        first = StorefrontSession.open(durable, session_storage)
        first.cart.add_item(_product("p1", price=230.0, discount=10.0))
        first.cart.update_quantity("p1", 3)

        second = StorefrontSession.open(durable, MemoryStorage())

        assert second.cart.total_price == pytest.approx(621.0)


class TestToasts:
    def test_comparison_limit_toast(self, durable, session_storage, toasts):
        session = StorefrontSession.open(durable, session_storage, toasts=toasts)
        for pid in ("p1", "p2", "p3", "p4", "p5"):
            session.comparison.toggle(_product(pid))

        assert toasts.keys == ["compare.toast.limitReached"]
        assert toasts.toasts[0].variant is ToastVariant.DESTRUCTIVE
        assert toasts.toasts[0].params == {"count": 4}

    def test_login_required_toast(self, durable, session_storage, toasts):
        session = StorefrontSession.open(durable, session_storage, toasts=toasts)
        session.wishlist.toggle("p1")
        assert toasts.keys == ["auth.toast.loginRequired"]

    def test_wishlist_added_and_removed_toasts(self, durable, session_storage, toasts):
        session = StorefrontSession.open(durable, session_storage, user_id="user-1", toasts=toasts)
        session.wishlist.toggle("p1")
        session.wishlist.toggle("p1")
        assert toasts.keys == ["wishlist.toast.added", "wishlist.toast.removed"]

    def test_rehydration_shows_no_wishlist_toast(self, durable, session_storage, toasts):
        save_state(durable, wishlist_key("user-1"), WishlistState(user_id="user-1", product_ids=("p1",)))
        StorefrontSession.open(durable, session_storage, user_id="user-1", toasts=toasts)
        assert toasts.toasts == []
