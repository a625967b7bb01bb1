"""Shopping cart state, reducer and store.

Adding a product that is already in the cart does nothing: quantities are
changed from the cart view through ``update_quantity``. Stock is not checked
here; it is validated once, at order placement.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator

from storefront.state.products import ProductSnapshot
from storefront.state.store import ReplaceState, Store


class CartLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    name: str
    unit_price: float = Field(ge=0)
    discount_percent: float = Field(default=0.0, ge=0, le=100)
    quantity: int = Field(default=1, ge=1)
    image_ref: str | None = None

    @classmethod
    def from_product(cls, product: ProductSnapshot, quantity: int = 1) -> "CartLineItem":
        return cls(
            product_id=product.product_id,
            name=product.name,
            unit_price=product.price,
            discount_percent=product.discount,
            quantity=quantity,
            image_ref=product.primary_image,
        )

    @property
    def discounted_unit_price(self) -> float:
        return self.unit_price * (1 - self.discount_percent / 100)

    @property
    def line_total(self) -> float:
        return self.discounted_unit_price * self.quantity


class CartState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[CartLineItem, ...] = ()

    @model_validator(mode="after")
    def product_ids_must_be_unique(self):
        ids = [item.product_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Cart contains duplicate product lines")
        return self

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> float:
        return sum(item.line_total for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> CartLineItem | None:
        return next((item for item in self.items if item.product_id == product_id), None)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AddItem:
    product: ProductSnapshot


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True)
class ClearCart:
    pass


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------
def _add_item(state: CartState, action: AddItem) -> CartState:
    if state.find(action.product.product_id) is not None:
        return state
    return CartState(items=(*state.items, CartLineItem.from_product(action.product)))


def _update_quantity(state: CartState, action: UpdateQuantity) -> CartState:
    line = state.find(action.product_id)
    if line is None:
        return state
    if action.quantity <= 0:
        return _remove_item(state, RemoveItem(product_id=action.product_id))
    if line.quantity == action.quantity:
        return state

    updated = line.model_copy(update={"quantity": action.quantity})
    return CartState(items=tuple(updated if item is line else item for item in state.items))


def _remove_item(state: CartState, action: RemoveItem) -> CartState:
    if state.find(action.product_id) is None:
        return state
    return CartState(items=tuple(item for item in state.items if item.product_id != action.product_id))


def _clear(state: CartState, action: ClearCart) -> CartState:
    return state if state.is_empty else CartState()


def _replace(state: CartState, action: ReplaceState) -> CartState:
    return action.state if isinstance(action.state, CartState) else state


_REDUCERS = {
    AddItem: _add_item,
    UpdateQuantity: _update_quantity,
    RemoveItem: _remove_item,
    ClearCart: _clear,
    ReplaceState: _replace,
}


def reduce_cart(state: CartState, action):
    """Pure cart transition. Unknown actions leave the state untouched."""
    reducer = _REDUCERS.get(type(action))
    if reducer is None:
        return state, None
    return reducer(state, action), None


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class CartStore(Store):
    name = "cart"

    def __init__(self, initial_state: CartState | None = None, effects=None):
        super().__init__(initial_state or CartState(), reduce_cart, effects)

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self.state.items

    @property
    def total_items(self) -> int:
        return self.state.total_items

    @property
    def total_price(self) -> float:
        return self.state.total_price

    def add_item(self, product: ProductSnapshot) -> None:
        self.dispatch(AddItem(product=product))

    def update_quantity(self, product_id: str, quantity: int) -> None:
        self.dispatch(UpdateQuantity(product_id=product_id, quantity=quantity))

    def remove_item(self, product_id: str) -> None:
        self.dispatch(RemoveItem(product_id=product_id))

    def clear(self) -> None:
        self.dispatch(ClearCart())
