"""Catalogue management: commands and handlers.

Adding and restocking products, and the back-office "discount a whole
category" action. The category discount is admin-only.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.shopper import require_admin
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True)
    stock: Integer(default=0)
    discount: Float(default=0.0)
    category_id: Identifier()
    description: Text()
    sku: String(max_length=50)
    barcode: String(max_length=50)
    images: Text()  # JSON array of image URLs
    kind: String(max_length=20)
    bundle_items: Text()  # JSON array of product ids


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True)


@storefront.command(part_of="Product")
class ApplyCategoryDiscount:
    """Set the same percentage discount on every product of a category."""

    category_id: Identifier(required=True)
    discount: Float(required=True)
    actor_id: Identifier(required=True)


def _json_list(value):
    if not value:
        return []
    return json.loads(value) if isinstance(value, str) else list(value)


@storefront.command_handler(part_of=Product)
class CatalogueManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        kwargs = {}
        if command.kind:
            kwargs["kind"] = command.kind

        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            discount=command.discount or 0.0,
            category_id=command.category_id,
            description=command.description,
            sku=command.sku,
            barcode=command.barcode,
            images=_json_list(command.images),
            bundle_items=_json_list(command.bundle_items),
            **kwargs,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)

    @handle(ApplyCategoryDiscount)
    def apply_category_discount(self, command):
        require_admin(
            command.actor_id,
            path="products",
            operation="update",
            request_data={"discount": command.discount, "category_id": str(command.category_id)},
        )

        if command.discount < 0 or command.discount > 100:
            raise ValidationError({"discount": ["Discount must be between 0 and 100 percent"]})

        repo = current_domain.repository_for(Product)
        products = repo._dao.query.filter(category_id=str(command.category_id)).all().items
        if not products:
            return 0

        for product in products:
            product.set_discount(command.discount)
            repo.add(product)

        logger.info(
            "Category discount applied",
            category_id=str(command.category_id),
            discount=command.discount,
            updated=len(products),
        )
        return len(products)
