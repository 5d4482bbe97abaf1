"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    category = String()
    price = Float(required=True)
    stock = Integer(required=True)
    status = String(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """Catalogue details of a product were edited by an admin."""

    __version__ = 1

    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: {field: new_value}
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The selling price of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    changed_at = DateTime(required=True)
