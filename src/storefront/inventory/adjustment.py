"""StockAdjustment record and the admin stock adjustment command.

Adjustment records are append-only: they are created by the stock ledger
next to the product mutation they describe and are never edited or deleted.
"""

from datetime import UTC, datetime

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import AdjustmentType, Product
from storefront.domain import storefront
from storefront.inventory.ledger import adjust_stock
from storefront.utils.paging import fetch_all


@storefront.aggregate
class StockAdjustment:
    product_id = Identifier(required=True)
    adjustment_type = String(required=True, choices=AdjustmentType)
    quantity = Integer(required=True, min_value=1)
    reason = String(required=True, max_length=255)
    resulting_stock = Integer(required=True, min_value=0)
    adjusted_by = String(max_length=255)
    adjusted_at = DateTime(required=True)

    @classmethod
    def record(cls, product_id, adjustment_type, quantity, reason, resulting_stock, adjusted_by=None):
        return cls(
            product_id=str(product_id),
            adjustment_type=adjustment_type,
            quantity=quantity,
            reason=reason,
            resulting_stock=resulting_stock,
            adjusted_by=adjusted_by,
            adjusted_at=datetime.now(UTC),
        )


@storefront.repository(part_of=StockAdjustment)
class StockAdjustmentRepository:
    def history_for(self, product_id) -> list[StockAdjustment]:
        """All adjustments for a product, newest first."""
        query = self._dao.query.filter(product_id=str(product_id)).order_by("-adjusted_at")
        return fetch_all(query)


@storefront.command(part_of="Product")
class AdjustStock:
    """Manually add or remove stock (admin)."""

    product_id = Identifier(required=True)
    adjustment_type = String(required=True)  # add, remove
    quantity = Integer(required=True)
    reason = String(max_length=255)
    adjusted_by = String(max_length=255)


@storefront.command_handler(part_of=Product)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        product = current_domain.repository_for(Product).fetch(command.product_id)
        return adjust_stock(
            product,
            adjustment_type=command.adjustment_type,
            quantity=command.quantity,
            reason=command.reason,
            adjusted_by=command.adjusted_by,
        )
