"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    sku: String(required=True, sanitize=False)
    name: String(required=True, sanitize=False)
    slug: String(sanitize=False)
    category_id: Identifier(required=True)
    price: Float(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Stock on hand changed. ``change`` is negative for reductions."""

    __version__ = 1

    product_id: Identifier(required=True)
    change: Integer(required=True)
    stock: Integer(required=True)


@storefront.event(part_of="Product")
class ProductRatingRecalculated:
    __version__ = 1

    product_id: Identifier(required=True)
    average: Float(required=True)
    count: Integer(required=True)
