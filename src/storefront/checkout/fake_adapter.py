"""Configurable fake order placement for client-side tests and demos.

Keeps its own stock table so a "not enough stock" refusal can be simulated
without a running domain.
"""

from uuid import uuid4

from storefront.checkout.port import OrderPlacementPort, PlacementResult
from storefront.checkout.snapshot import OrderSnapshot


class FakeOrderPlacement(OrderPlacementPort):
    def __init__(self, stock: dict[str, int] | None = None, coupons: dict[str, float] | None = None) -> None:
        self.stock: dict[str, int] = dict(stock or {})
        self.coupons: dict[str, float] = {code.upper(): pct for code, pct in (coupons or {}).items()}
        self.should_succeed: bool = True
        self.failure_reason: str = "Order placement unavailable"
        self.permission_denied: bool = False
        self.placed: list[tuple[str, OrderSnapshot]] = []
        self.calls: list[OrderSnapshot] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Order placement unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def place_order(self, snapshot: OrderSnapshot) -> PlacementResult:
        self.calls.append(snapshot)

        if self.permission_denied:
            return PlacementResult(
                success=False,
                failure_reason="Missing or insufficient permissions",
                permission_denied=True,
            )
        if not self.should_succeed:
            return PlacementResult(success=False, failure_reason=self.failure_reason)

        for item in snapshot.items:
            available = self.stock.get(item.product_id)
            if available is not None and available < item.quantity:
                return PlacementResult(
                    success=False,
                    failure_reason=(
                        f"Not enough stock for {item.name}. Available: {available}, Requested: {item.quantity}"
                    ),
                )

        for item in snapshot.items:
            if item.product_id in self.stock:
                self.stock[item.product_id] -= item.quantity

        order_id = f"fake-order-{uuid4().hex[:12]}"
        self.placed.append((order_id, snapshot))
        return PlacementResult(success=True, order_id=order_id)

    async def quote(self, coupon_code: str, subtotal: float) -> float:
        code = (coupon_code or "").strip().upper()
        if code not in self.coupons:
            raise ValueError(f"Coupon {code} does not exist")
        return subtotal * (1 - self.coupons[code] / 100)
