"""Coupon aggregate: percentage discount codes applied at checkout.

A coupon is never stored on the cart. Checkout looks it up by code and
applies it multiplicatively to the cart subtotal.
"""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.shopper import require_admin
from storefront.domain import storefront


def _as_utc(moment):
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@storefront.aggregate
class Coupon:
    code: String(required=True, max_length=50)
    discount_percentage: Float(required=True, min_value=1.0, max_value=100.0)
    expiry_date: DateTime(required=True)
    is_active: Boolean(default=True)

    @classmethod
    def create(cls, code, discount_percentage, expiry_date, is_active=True):
        return cls(
            code=code.strip().upper(),
            discount_percentage=discount_percentage,
            expiry_date=_as_utc(expiry_date),
            is_active=is_active,
        )

    def is_expired(self, at=None) -> bool:
        at = _as_utc(at) or datetime.now(UTC)
        return _as_utc(self.expiry_date) <= at

    def is_redeemable(self, at=None) -> bool:
        return bool(self.is_active) and not self.is_expired(at)

    def apply_to(self, subtotal: float) -> float:
        return subtotal * (1 - self.discount_percentage / 100)

    def deactivate(self):
        self.is_active = False


def find_redeemable_coupon(code, at=None) -> Coupon:
    """Return the active, unexpired coupon for ``code`` or raise ``ValidationError``."""
    normalized = (code or "").strip().upper()
    if not normalized:
        raise ValidationError({"coupon_code": ["Coupon code is required"]})

    matches = current_domain.repository_for(Coupon)._dao.query.filter(code=normalized).all().items
    if not matches:
        raise ValidationError({"coupon_code": [f"Coupon {normalized} does not exist"]})

    coupon = matches[0]
    if not coupon.is_active:
        raise ValidationError({"coupon_code": [f"Coupon {normalized} is no longer active"]})
    if coupon.is_expired(at):
        raise ValidationError({"coupon_code": [f"Coupon {normalized} has expired"]})
    return coupon


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code: String(required=True, max_length=50)
    discount_percentage: Float(required=True)
    expiry_date: DateTime(required=True)
    actor_id: Identifier(required=True)


@storefront.command(part_of="Coupon")
class DeactivateCoupon:
    code: String(required=True, max_length=50)
    actor_id: Identifier(required=True)


@storefront.command_handler(part_of=Coupon)
class CouponManagementHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        require_admin(command.actor_id, path="coupons", operation="create", request_data={"code": command.code})

        repo = current_domain.repository_for(Coupon)
        code = command.code.strip().upper()
        if repo._dao.query.filter(code=code).all().items:
            raise ValidationError({"code": [f"Coupon {code} already exists"]})

        coupon = Coupon.create(
            code=code,
            discount_percentage=command.discount_percentage,
            expiry_date=command.expiry_date,
        )
        repo.add(coupon)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        require_admin(command.actor_id, path="coupons", operation="update", request_data={"code": command.code})

        repo = current_domain.repository_for(Coupon)
        code = command.code.strip().upper()
        matches = repo._dao.query.filter(code=code).all().items
        if not matches:
            raise ValidationError({"code": [f"Coupon {code} does not exist"]})

        coupon = matches[0]
        coupon.deactivate()
        repo.add(coupon)
