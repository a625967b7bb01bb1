"""Wiring of the three client stores for one shopper session."""

import structlog

from storefront.state.cart import CartState, CartStore
from storefront.state.comparison import ComparisonState, ComparisonStore
from storefront.state.persistence import (
    CART_KEY,
    COMPARISON_KEY,
    PersistState,
    load_state,
    wishlist_key,
)
from storefront.state.storage import KeyValueStorage
from storefront.state.toasts import SignalToasts, ToastSink, WishlistToasts
from storefront.state.wishlist import WishlistState, WishlistStore

logger = structlog.get_logger(__name__)


class StorefrontSession:
    """Cart, comparison and wishlist stores bound to their storages.

    Build it with :meth:`open`; the stores are rehydrated before ``open``
    returns, so nothing reads them in their pre-load state.
    """

    def __init__(self, cart: CartStore, comparison: ComparisonStore, wishlist: WishlistStore, toasts: ToastSink):
        self.cart = cart
        self.comparison = comparison
        self.wishlist = wishlist
        self.toasts = toasts

    @property
    def user_id(self) -> str | None:
        return self.wishlist.user_id

    @classmethod
    def open(
        cls,
        durable: KeyValueStorage,
        session: KeyValueStorage,
        user_id: str | None = None,
        toasts: ToastSink | None = None,
    ) -> "StorefrontSession":
        toasts = toasts or ToastSink()
        signal_toasts = SignalToasts(toasts)

        cart = CartStore()
        cart.rehydrate(load_state(durable, CART_KEY, CartState))
        cart.add_effect(PersistState(durable, CART_KEY))

        comparison = ComparisonStore()
        comparison.rehydrate(load_state(session, COMPARISON_KEY, ComparisonState))
        comparison.add_effect(PersistState(session, COMPARISON_KEY))
        comparison.subscribe(signal_toasts)

        wishlist = WishlistStore(user_id=user_id)
        if user_id:
            wishlist.rehydrate(load_state(durable, wishlist_key(user_id), WishlistState))
            wishlist.add_effect(PersistState(durable, wishlist_key(user_id)))
            wishlist.add_effect(WishlistToasts(toasts))
        wishlist.subscribe(signal_toasts)

        logger.debug(
            "storefront_session_opened",
            user_id=user_id,
            cart_lines=len(cart.items),
            comparison_items=len(comparison.items),
            wishlist_items=len(wishlist.product_ids),
        )
        return cls(cart=cart, comparison=comparison, wishlist=wishlist, toasts=toasts)
