"""Order placement port (abstract interface).

Checkout only knows this contract. ``DomainOrderPlacement`` runs the
``PlaceOrder`` command in the storefront domain; ``FakeOrderPlacement``
stands in for it in client-side tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.checkout.snapshot import OrderSnapshot


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of handing a snapshot to order placement."""

    success: bool
    order_id: str | None = None
    failure_reason: str | None = None
    permission_denied: bool = False


class OrderPlacementPort(ABC):
    """Abstract order placement interface."""

    @abstractmethod
    async def place_order(self, snapshot: OrderSnapshot) -> PlacementResult:
        """Create the order for ``snapshot`` or report why it was refused.

        Implementations must be all-or-nothing: a failed result means no
        order was stored and no stock moved.
        """
        ...

    async def quote(self, coupon_code: str, subtotal: float) -> float:
        """Price ``subtotal`` after ``coupon_code``.

        Raises ``ValueError`` with a shopper-facing message for unknown,
        inactive or expired codes.
        """
        raise ValueError("Coupons are not supported by this placement adapter")
