"""Shopping Cart aggregate (CQRS) — one working cart per customer.

The cart is keyed by the customer id, so a customer can never own two carts.
Each line is identified by (product, colour) and carries a snapshot of the
product's price and stock taken when the line was last touched. The
snapshots are advisory: checkout re-reads the live product before charging.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront
from storefront.errors import CartLimitExceeded, InsufficientStock, InvalidColor, InvalidQuantity, NotFound, OutOfStock

MAX_QUANTITY_PER_ITEM = 10
MAX_LINES = 20
MAX_TOTAL_UNITS = 50


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    color = String(required=True, max_length=50)
    name = String(max_length=100)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1, max_value=MAX_QUANTITY_PER_ITEM)
    price = Float(required=True, min_value=0.0)  # Snapshot of the product price
    stock = Integer(default=0)  # Snapshot of the product stock, advisory only
    added_at = DateTime()

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


def _is_valid_quantity(quantity, minimum) -> bool:
    return (
        isinstance(quantity, int)
        and not isinstance(quantity, bool)
        and minimum <= quantity <= MAX_QUANTITY_PER_ITEM
    )


def check_update_quantity(quantity):
    """Quantities a line can be set to. Zero means remove the line."""
    if not _is_valid_quantity(quantity, 0):
        raise InvalidQuantity("quantity", f"Quantity must be between 0 and {MAX_QUANTITY_PER_ITEM}")


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def lines_must_be_unique_per_product_and_color(self):
        keys = [(str(i.product_id), i.color) for i in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A product and colour can only appear once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=str(customer_id), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Totals (always derived from the lines)
    # -------------------------------------------------------------------
    @property
    def cart_total(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, product_id, color):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and i.color == color),
            None,
        )

    def _check_unit_limit(self, extra_units):
        if self.unit_count + extra_units > MAX_TOTAL_UNITS:
            raise CartLimitExceeded("items", f"Cart cannot contain more than {MAX_TOTAL_UNITS} total items")

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, color, quantity):
        """Add ``quantity`` units of ``product`` in ``color``.

        An existing line for the same product and colour is merged: the
        quantities are summed and clamped to the per-line maximum and to the
        live stock.
        """
        if not product.offers_color(color):
            raise InvalidColor("color", "Selected color is not available")
        if product.stock == 0:
            raise OutOfStock("quantity", f"{product.name} is out of stock")
        if not _is_valid_quantity(quantity, 1):
            raise InvalidQuantity("quantity", f"Quantity must be between 1 and {MAX_QUANTITY_PER_ITEM}")
        if quantity > product.stock:
            raise InsufficientStock("quantity", f"Only {product.stock} left in stock")

        now = datetime.now(UTC)
        existing = self.find_item(product.id, color)

        if existing:
            line_quantity = min(existing.quantity + quantity, MAX_QUANTITY_PER_ITEM, product.stock)
            self._check_unit_limit(line_quantity - existing.quantity)
            existing.quantity = line_quantity
            existing.price = product.price
            existing.stock = product.stock
        else:
            if self.item_count >= MAX_LINES:
                raise CartLimitExceeded("items", f"Cart cannot contain more than {MAX_LINES} unique items")
            self._check_unit_limit(quantity)
            line_quantity = quantity
            self.add_items(
                CartItem(
                    product_id=str(product.id),
                    color=color,
                    name=product.name,
                    image=product.primary_image,
                    quantity=quantity,
                    price=product.price,
                    stock=product.stock,
                    added_at=now,
                )
            )

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                product_id=str(product.id),
                color=color,
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )

    def update_item(self, product, color, quantity):
        """Set the quantity of an existing line. Zero removes the line."""
        check_update_quantity(quantity)

        if quantity == 0:
            self.remove_item(product.id, color)
            return

        item = self.find_item(product.id, color)
        if item is None:
            raise NotFound("item", product.id, "Item not found in cart")

        if quantity > product.stock:
            raise InsufficientStock("quantity", f"Only {product.stock} left in stock")
        self._check_unit_limit(quantity - item.quantity)

        previous_quantity = item.quantity
        item.quantity = quantity
        item.price = product.price
        item.stock = product.stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                customer_id=str(self.customer_id),
                product_id=str(product.id),
                color=color,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, color) -> bool:
        """Remove a line. Removing a line that is not in the cart is a no-op."""
        item = self.find_item(product_id, color)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                color=color,
            )
        )
        return True

    def clear(self):
        """Empty the cart unconditionally."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartCleared(
                customer_id=str(self.customer_id),
                removed_lines=removed,
            )
        )
