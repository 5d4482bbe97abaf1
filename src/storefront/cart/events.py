"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product in a given colour was added to the cart (or merged into an existing line)."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were removed, after checkout or on the customer's request."""

    __version__ = 1

    customer_id = Identifier(required=True)
    removed_lines = Integer(required=True)
