"""Wishlist: a per-user toggle store of product ids.

Anonymous shoppers cannot keep a wishlist. Their toggles are declined with
``LOGIN_REQUIRED`` so the caller can show a login prompt.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, model_validator

from storefront.state.store import ReplaceState, Signal, Store


class WishlistState(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    product_ids: tuple[str, ...] = ()

    @model_validator(mode="after")
    def product_ids_must_be_unique(self):
        if len(self.product_ids) != len(set(self.product_ids)):
            raise ValueError("Wishlist contains duplicate products")
        return self

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def contains(self, product_id: str) -> bool:
        return product_id in self.product_ids


@dataclass(frozen=True)
class ToggleWishlist:
    product_id: str


def reduce_wishlist(state: WishlistState, action):
    if isinstance(action, ToggleWishlist):
        if not state.is_authenticated:
            return state, Signal.LOGIN_REQUIRED
        if state.contains(action.product_id):
            remaining = tuple(pid for pid in state.product_ids if pid != action.product_id)
            return state.model_copy(update={"product_ids": remaining}), None
        return state.model_copy(update={"product_ids": (*state.product_ids, action.product_id)}), None

    if isinstance(action, ReplaceState) and isinstance(action.state, WishlistState):
        # Never adopt a list persisted for somebody else.
        if action.state.user_id != state.user_id:
            return state, None
        return action.state, None

    return state, None


class WishlistStore(Store):
    name = "wishlist"

    def __init__(self, user_id: str | None = None, effects=None):
        super().__init__(WishlistState(user_id=user_id), reduce_wishlist, effects)

    @property
    def user_id(self) -> str | None:
        return self.state.user_id

    @property
    def product_ids(self) -> tuple[str, ...]:
        return self.state.product_ids

    def contains(self, product_id: str) -> bool:
        return self.state.contains(product_id)

    def toggle(self, product_id: str) -> Signal | None:
        return self.dispatch(ToggleWishlist(product_id=product_id))
