"""Shopper aggregate: the account document that orders are attached to.

Keeps the running order statistics and loyalty balance that order placement
updates, plus the role that gates back-office commands.
"""

import math
from datetime import UTC, datetime
from enum import Enum

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import PermissionDeniedError

# One loyalty point per 100 DZD spent, rounded down.
LOYALTY_POINT_VALUE = 100


class ShopperRole(Enum):
    USER = "User"
    ADMIN = "Admin"


@storefront.aggregate
class Shopper:
    external_id: Identifier()  # Identity provider uid
    name: String(required=True, max_length=255)
    email: String(required=True, max_length=255)
    phone: String(max_length=30)
    role: String(choices=ShopperRole, default=ShopperRole.USER.value)
    order_count: Integer(default=0)
    total_spent: Float(default=0.0)
    loyalty_points: Integer(default=0)
    registered_at: DateTime()

    @classmethod
    def register(cls, name, email, phone=None, external_id=None, role=ShopperRole.USER.value):
        return cls(
            external_id=external_id,
            name=name,
            email=email,
            phone=phone,
            role=role,
            order_count=0,
            total_spent=0.0,
            loyalty_points=0,
            registered_at=datetime.now(UTC),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == ShopperRole.ADMIN.value

    def record_order(self, total_amount, phone=None):
        self.order_count = (self.order_count or 0) + 1
        self.total_spent = (self.total_spent or 0.0) + total_amount
        self.loyalty_points = (self.loyalty_points or 0) + math.floor(total_amount / LOYALTY_POINT_VALUE)
        if phone:
            self.phone = phone


def require_admin(actor_id, path, operation, request_data=None):
    """Raise ``PermissionDeniedError`` unless ``actor_id`` is a registered admin."""
    actor = None
    if actor_id:
        try:
            actor = current_domain.repository_for(Shopper).get(actor_id)
        except ObjectNotFoundError:
            actor = None

    if actor is None or not actor.is_admin:
        raise PermissionDeniedError(path=path, operation=operation, request_data=request_data)
    return actor


@storefront.command(part_of="Shopper")
class RegisterShopper:
    name: String(required=True, max_length=255)
    email: String(required=True, max_length=255)
    phone: String(max_length=30)
    external_id: Identifier()
    role: String(max_length=10)


@storefront.command_handler(part_of=Shopper)
class RegisterShopperHandler:
    @handle(RegisterShopper)
    def register_shopper(self, command):
        shopper = Shopper.register(
            name=command.name,
            email=command.email,
            phone=command.phone,
            external_id=command.external_id,
            role=command.role or ShopperRole.USER.value,
        )
        current_domain.repository_for(Shopper).add(shopper)
        return str(shopper.id)
