"""Tests for the generic Store: effects, signals and rehydration."""

from storefront.state.cart import CartLineItem, CartState, CartStore
from storefront.state.comparison import ComparisonStore
from storefront.state.products import ProductSnapshot
from storefront.state.store import Signal


def _product(product_id="p1"):
    return ProductSnapshot(product_id=product_id, name="Couscous", price=12.5)


class TestEffects:
    def test_effect_runs_on_change(self):
        calls = []
        store = CartStore(effects=[lambda previous, current, action: calls.append((previous, current))])
        store.add_item(_product())

        assert len(calls) == 1
        previous, current = calls[0]
        assert previous.is_empty
        assert current.find("p1") is not None

    def test_effect_skipped_on_no_op(self):
        calls = []
        store = CartStore(effects=[lambda previous, current, action: calls.append(action)])
        store.remove_item("missing")
        store.clear()
        assert calls == []

    def test_failing_effect_does_not_break_dispatch(self):
        seen = []

        def broken(previous, current, action):
            raise RuntimeError("storage full")

        store = CartStore(effects=[broken, lambda previous, current, action: seen.append(current)])
        store.add_item(_product())

        assert store.total_items == 1
        assert len(seen) == 1


class TestSignals:
    def test_unsubscribe(self):
        store = ComparisonStore()
        received = []
        unsubscribe = store.subscribe(lambda signal, action: received.append(signal))
        unsubscribe()

        for pid in ("p1", "p2", "p3", "p4", "p5"):
            store.toggle(_product(pid))

        assert received == []

    def test_signal_returned_from_dispatch(self):
        store = ComparisonStore()
        for pid in ("p1", "p2", "p3", "p4"):
            store.toggle(_product(pid))
        assert store.toggle(_product("p5")) == Signal.LIMIT_REACHED


class TestRehydrate:
    def test_rehydrate_none_keeps_initial_state(self):
        store = CartStore()
        initial = store.state
        store.rehydrate(None)
        assert store.state is initial

    def test_rehydrate_replaces_state_and_runs_effects(self):
        calls = []
        store = CartStore(effects=[lambda previous, current, action: calls.append(current)])
        loaded = CartState(items=(CartLineItem(product_id="p1", name="Couscous", unit_price=12.5, quantity=2),))

        store.rehydrate(loaded)

        assert store.state is loaded
        assert store.total_items == 2
        assert calls == [loaded]
