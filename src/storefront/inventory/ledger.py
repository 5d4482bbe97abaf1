"""Stock ledger — the only path through which product stock changes.

Each call mutates the product and appends a StockAdjustment in the same unit
of work, so a stock level is never persisted without its audit record.
Order placement and cancellation use the same entry point as admin
adjustments, with ``order:<id>`` and ``cancel:<id>`` reasons.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.errors import EmptyReasonOrMissingField

logger = structlog.get_logger(__name__)


def order_reason(order_id) -> str:
    return f"order:{order_id}"


def cancellation_reason(order_id) -> str:
    return f"cancel:{order_id}"


def adjust_stock(product, adjustment_type, quantity, reason, adjusted_by=None) -> int:
    """Apply a stock movement to ``product`` and record it. Returns the new level."""
    from storefront.catalogue.product import Product
    from storefront.inventory.adjustment import StockAdjustment

    if reason is None or not str(reason).strip():
        raise EmptyReasonOrMissingField("reason", "Please provide a reason for the stock adjustment")

    new_stock = product.adjust_stock(adjustment_type, quantity, reason.strip())

    current_domain.repository_for(Product).add(product)
    current_domain.repository_for(StockAdjustment).add(
        StockAdjustment.record(
            product_id=product.id,
            adjustment_type=adjustment_type,
            quantity=quantity,
            reason=reason.strip(),
            resulting_stock=new_stock,
            adjusted_by=adjusted_by,
        )
    )

    logger.info(
        "Stock adjusted",
        product_id=str(product.id),
        adjustment_type=adjustment_type,
        quantity=quantity,
        reason=reason,
        new_stock=new_stock,
    )
    return new_stock
