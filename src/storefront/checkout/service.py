"""Checkout flow: cart snapshot → order placement → clear cart on success.

The cart is cleared only after placement confirms the order. A refused
placement (not enough stock, invalid coupon, permissions) leaves the cart
exactly as it was so the shopper can adjust quantities and retry.
"""

from dataclasses import dataclass

import structlog

from storefront.checkout import get_placement
from storefront.checkout.port import OrderPlacementPort
from storefront.checkout.snapshot import OrderSnapshot
from storefront.state.session import StorefrontSession
from storefront.state.toasts import Toast, ToastVariant

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    order_id: str | None = None
    error: str | None = None
    total_amount: float | None = None


class CheckoutService:
    def __init__(self, session: StorefrontSession, placement: OrderPlacementPort | None = None):
        self.session = session
        self.placement = placement or get_placement()
        self._in_flight = False

    @property
    def is_busy(self) -> bool:
        """True while a submission is awaiting placement; the UI disables the button."""
        return self._in_flight

    def _fail(self, key: str, error: str, **params) -> CheckoutResult:
        self.session.toasts.show(Toast(key=key, variant=ToastVariant.DESTRUCTIVE, params={"reason": error, **params}))
        return CheckoutResult(success=False, error=error)

    async def quote(self, coupon_code: str | None = None) -> float:
        """Total the shopper will pay, after an optional coupon."""
        subtotal = self.session.cart.total_price
        if not coupon_code:
            return subtotal
        return await self.placement.quote(coupon_code, subtotal)

    async def submit(self, shipping_address: str, phone: str | None = None, coupon_code: str | None = None):
        if self._in_flight:
            return CheckoutResult(success=False, error="A checkout is already in progress")

        user_id = self.session.user_id
        if not user_id:
            return self._fail("auth.toast.loginRequired", "You must be logged in to place an order")

        cart = self.session.cart.state
        if cart.is_empty:
            return self._fail("checkout.toast.emptyCart", "Your cart is empty")
        if not shipping_address or not shipping_address.strip():
            return self._fail("checkout.toast.addressRequired", "A shipping address is required")

        self._in_flight = True
        try:
            try:
                total = await self.quote(coupon_code)
            except ValueError as exc:
                return self._fail("checkout.toast.invalidCoupon", str(exc), coupon_code=coupon_code)

            snapshot = OrderSnapshot.from_cart(
                cart,
                user_id=user_id,
                shipping_address=shipping_address.strip(),
                phone=phone,
                total_amount=total,
                coupon_code=coupon_code,
            )
            result = await self.placement.place_order(snapshot)
        finally:
            self._in_flight = False

        if not result.success:
            logger.info("Checkout failed, cart kept", user_id=user_id, reason=result.failure_reason)
            return self._fail("checkout.toast.failed", result.failure_reason or "Order could not be placed")

        self.session.cart.clear()
        self.session.toasts.show(Toast(key="checkout.toast.success", params={"order_id": result.order_id}))
        logger.info("Checkout completed", user_id=user_id, order_id=result.order_id, total_amount=total)
        return CheckoutResult(success=True, order_id=result.order_id, total_amount=total)
