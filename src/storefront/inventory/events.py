"""Stock movement events raised by the Product aggregate.

Every movement written through the stock ledger produces a StockAdjusted
fact; dropping to or below the product's threshold also produces
LowStockDetected, which the notification handlers turn into an admin alert.
"""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class StockAdjusted:
    """Stock was added to or removed from a product."""

    __version__ = 1

    product_id = Identifier(required=True)
    adjustment_type = String(required=True)  # add, remove
    quantity = Integer(required=True)
    reason = String(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    adjusted_at = DateTime(required=True)


@storefront.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    current_stock = Integer(required=True)
    stock_threshold = Integer(required=True)
    detected_at = DateTime(required=True)
