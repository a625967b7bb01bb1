"""Order placement factory.

Provides get_placement() / set_placement() to swap implementations:
- DomainOrderPlacement by default (storefront domain, in process)
- FakeOrderPlacement for client-side tests
"""

from storefront.checkout.port import OrderPlacementPort

_current_placement: OrderPlacementPort | None = None


def get_placement() -> OrderPlacementPort:
    """Return the current order placement. Defaults to DomainOrderPlacement."""
    global _current_placement
    if _current_placement is None:
        from storefront.checkout.domain_adapter import DomainOrderPlacement

        _current_placement = DomainOrderPlacement()
    return _current_placement


def set_placement(placement: OrderPlacementPort) -> None:
    """Override the active order placement (useful for tests)."""
    global _current_placement
    _current_placement = placement


def reset_placement() -> None:
    """Reset to default placement."""
    global _current_placement
    _current_placement = None
