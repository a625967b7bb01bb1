"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    kind = String(required=True)
    category_id = Identifier()
    price = Float(required=True)
    stock = Integer(required=True)
    added_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDiscountChanged:
    """The percentage discount on a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_discount = Float(required=True)
    new_discount = Float(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductSold:
    """Stock left the shelf because an order was placed."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining_stock = Integer(required=True)
