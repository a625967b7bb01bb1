"""Product comparison bar: a toggle store capped at four products."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, model_validator

from storefront.state.products import ProductSnapshot
from storefront.state.store import ReplaceState, Signal, Store

MAX_COMPARISON_ITEMS = 4


class ComparisonState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[ProductSnapshot, ...] = ()

    @model_validator(mode="after")
    def items_must_be_unique_and_capped(self):
        ids = [item.product_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Comparison contains duplicate products")
        if len(ids) > MAX_COMPARISON_ITEMS:
            raise ValueError(f"Comparison holds at most {MAX_COMPARISON_ITEMS} products")
        return self

    @property
    def is_full(self) -> bool:
        return len(self.items) >= MAX_COMPARISON_ITEMS

    def contains(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)


@dataclass(frozen=True)
class ToggleComparison:
    product: ProductSnapshot


@dataclass(frozen=True)
class RemoveFromComparison:
    product_id: str


@dataclass(frozen=True)
class ClearComparison:
    pass


def _without(state: ComparisonState, product_id: str) -> ComparisonState:
    return ComparisonState(items=tuple(item for item in state.items if item.product_id != product_id))


def reduce_comparison(state: ComparisonState, action):
    """Pure comparison transition.

    Toggling a new product into a full comparison is rejected: the existing
    products stay, in order, and ``LIMIT_REACHED`` is signalled. The oldest
    entry is never evicted.
    """
    if isinstance(action, ToggleComparison):
        product_id = action.product.product_id
        if state.contains(product_id):
            return _without(state, product_id), None
        if state.is_full:
            return state, Signal.LIMIT_REACHED
        return ComparisonState(items=(*state.items, action.product)), None

    if isinstance(action, RemoveFromComparison):
        if not state.contains(action.product_id):
            return state, None
        return _without(state, action.product_id), None

    if isinstance(action, ClearComparison):
        return (state if not state.items else ComparisonState()), None

    if isinstance(action, ReplaceState) and isinstance(action.state, ComparisonState):
        return action.state, None

    return state, None


class ComparisonStore(Store):
    name = "comparison"
    max_items = MAX_COMPARISON_ITEMS

    def __init__(self, initial_state: ComparisonState | None = None, effects=None):
        super().__init__(initial_state or ComparisonState(), reduce_comparison, effects)

    @property
    def items(self) -> tuple[ProductSnapshot, ...]:
        return self.state.items

    def contains(self, product_id: str) -> bool:
        return self.state.contains(product_id)

    def toggle(self, product: ProductSnapshot) -> Signal | None:
        return self.dispatch(ToggleComparison(product=product))

    def remove(self, product_id: str) -> None:
        self.dispatch(RemoveFromComparison(product_id=product_id))

    def clear(self) -> None:
        self.dispatch(ClearComparison())
