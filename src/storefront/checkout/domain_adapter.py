"""Order placement backed by the storefront domain."""

import structlog
from protean.exceptions import ValidationError

from storefront.checkout.port import OrderPlacementPort, PlacementResult
from storefront.checkout.snapshot import OrderSnapshot
from storefront.errors import ErrorChannel, PermissionDeniedError

logger = structlog.get_logger(__name__)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten Protean's ``{field: [messages]}`` into one readable line."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = [msg for field_messages in messages.values() for msg in field_messages]
        if parts:
            return "; ".join(str(part) for part in parts)
    return str(exc)


class DomainOrderPlacement(OrderPlacementPort):
    """Processes ``PlaceOrder`` synchronously inside the storefront domain."""

    def __init__(self, domain=None, error_channel: ErrorChannel | None = None):
        if domain is None:
            from storefront.domain import storefront

            domain = storefront
        self.domain = domain
        self.error_channel = error_channel or ErrorChannel()

    async def place_order(self, snapshot: OrderSnapshot) -> PlacementResult:
        from storefront.order.placement import PlaceOrder

        command = PlaceOrder(
            customer_id=snapshot.user_id,
            shipping_address=snapshot.shipping_address,
            phone=snapshot.phone,
            items=snapshot.items_json(),
            total_amount=snapshot.total_amount,
            coupon_code=snapshot.coupon_code,
        )

        try:
            with self.domain.domain_context():
                order_id = self.domain.process(command, asynchronous=False)
        except ValidationError as exc:
            reason = describe_validation_error(exc)
            logger.info("Order placement refused", user_id=snapshot.user_id, reason=reason)
            return PlacementResult(success=False, failure_reason=reason)
        except PermissionDeniedError as exc:
            self.error_channel.emit(exc)
            return PlacementResult(success=False, failure_reason=str(exc), permission_denied=True)

        return PlacementResult(success=True, order_id=str(order_id))

    async def quote(self, coupon_code: str, subtotal: float) -> float:
        from storefront.coupon.coupon import find_redeemable_coupon

        try:
            with self.domain.domain_context():
                coupon = find_redeemable_coupon(coupon_code)
        except ValidationError as exc:
            raise ValueError(describe_validation_error(exc)) from None
        return coupon.apply_to(subtotal)
