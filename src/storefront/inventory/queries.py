"""Stock ledger reads."""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.inventory.adjustment import StockAdjustment


def stock_history(product_id) -> list[dict]:
    """Adjustments for an existing product, newest first."""
    current_domain.repository_for(Product).fetch(product_id)
    return [
        {
            "id": str(record.id),
            "type": record.adjustment_type,
            "quantity": record.quantity,
            "reason": record.reason,
            "resulting_stock": record.resulting_stock,
            "adjusted_by": record.adjusted_by,
            "adjusted_at": record.adjusted_at.isoformat(),
        }
        for record in current_domain.repository_for(StockAdjustment).history_for(product_id)
    ]
