"""Order snapshot handed from the client cart to order placement."""

import json

from pydantic import BaseModel, ConfigDict, Field

from storefront.state.cart import CartLineItem, CartState


class OrderSnapshot(BaseModel):
    """Immutable copy of the cart at checkout time.

    Later changes to the live cart do not affect a snapshot that is already
    on its way to order placement.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    shipping_address: str = Field(min_length=1)
    phone: str | None = None
    items: tuple[CartLineItem, ...] = Field(min_length=1)
    total_amount: float = Field(ge=0)
    coupon_code: str | None = None

    @classmethod
    def from_cart(
        cls,
        cart: CartState,
        user_id: str,
        shipping_address: str,
        phone: str | None = None,
        total_amount: float | None = None,
        coupon_code: str | None = None,
    ) -> "OrderSnapshot":
        return cls(
            user_id=user_id,
            shipping_address=shipping_address,
            phone=phone or None,
            items=cart.items,
            total_amount=cart.total_price if total_amount is None else total_amount,
            coupon_code=coupon_code or None,
        )

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def items_json(self) -> str:
        return json.dumps([item.model_dump(mode="json") for item in self.items])
