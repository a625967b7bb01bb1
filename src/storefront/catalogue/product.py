"""Product aggregate: a grocery catalogue entry with its shelf stock.

Products come in two kinds: standard items and bundles (a basket of other
products sold under one price). Stock and the sold counter live on the
product itself; order placement is the only writer that decrements stock.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductAdded,
    ProductDiscountChanged,
    ProductRestocked,
    ProductSold,
)
from storefront.domain import storefront
from storefront.state.products import ProductKind, ProductSnapshot


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text()
    sku: String(max_length=50)
    barcode: String(max_length=50)
    kind: String(choices=ProductKind, default=ProductKind.STANDARD.value)
    category_id: Identifier()
    price: Float(required=True, min_value=0.01)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)  # Percentage
    stock: Integer(default=0, min_value=0)
    sold: Integer(default=0, min_value=0)
    images: Text()  # JSON array of image URLs
    bundle_items: Text()  # JSON array of product ids, bundles only
    created_at: DateTime()

    @invariant.post
    def bundle_must_list_its_items(self):
        items = json.loads(self.bundle_items) if self.bundle_items else []
        if self.kind == ProductKind.BUNDLE.value and not items:
            raise ValidationError({"bundle_items": ["A bundle must contain at least one product"]})
        if self.kind == ProductKind.STANDARD.value and items:
            raise ValidationError({"bundle_items": ["Only bundles can list bundle items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        price,
        stock=0,
        discount=0.0,
        category_id=None,
        description=None,
        sku=None,
        barcode=None,
        images=None,
        kind=ProductKind.STANDARD.value,
        bundle_items=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            sku=sku,
            barcode=barcode,
            kind=kind,
            category_id=category_id,
            price=price,
            discount=discount or 0.0,
            stock=stock,
            sold=0,
            images=json.dumps(list(images or [])),
            bundle_items=json.dumps(list(bundle_items)) if bundle_items else None,
            created_at=now,
        )

        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                kind=product.kind,
                category_id=category_id,
                price=price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def image_list(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def discounted_price(self) -> float:
        return self.price * (1 - (self.discount or 0.0) / 100)

    def to_snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=str(self.id),
            name=self.name,
            price=self.price,
            discount=self.discount or 0.0,
            stock=self.stock,
            images=tuple(self.image_list),
            category_id=str(self.category_id) if self.category_id else None,
            kind=ProductKind(self.kind),
        )

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def set_discount(self, percent):
        if percent is None or percent < 0 or percent > 100:
            raise ValidationError({"discount": ["Discount must be between 0 and 100 percent"]})

        previous = self.discount or 0.0
        if previous == percent:
            return

        self.discount = percent
        self.raise_(
            ProductDiscountChanged(
                product_id=str(self.id),
                previous_discount=previous,
                new_discount=percent,
            )
        )

    def restock(self, quantity):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Restock quantity must be at least 1"]})

        self.stock += quantity
        self.raise_(
            ProductRestocked(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
            )
        )

    def has_stock_for(self, quantity) -> bool:
        return self.stock >= quantity

    def sell(self, quantity):
        """Take ``quantity`` units off the shelf for a placed order."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Ordered quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise ValidationError(
                {"stock": [f"Not enough stock for {self.name}. Available: {self.stock}, Requested: {quantity}"]}
            )

        self.stock -= quantity
        self.sold += quantity
        self.raise_(
            ProductSold(
                product_id=str(self.id),
                quantity=quantity,
                remaining_stock=self.stock,
            )
        )
