"""Order cancellation — command and handler.

Cancelling puts every item back into stock through the ledger with a
``cancel:<order id>`` reason, in the same unit of work as the status change.
"""

from collections import OrderedDict

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import Forbidden
from storefront.inventory.ledger import adjust_stock, cancellation_reason
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    is_admin = Boolean(default=False)
    reason = String(max_length=500)


def restore_stock(order, adjusted_by=None):
    """Return the quantities of a cancelled order to the products they came from."""
    quantities = OrderedDict()
    for item in order.items:
        product_id = str(item.product_id)
        quantities[product_id] = quantities.get(product_id, 0) + item.quantity

    product_repo = current_domain.repository_for(Product)
    for product_id, quantity in quantities.items():
        adjust_stock(
            product_repo.fetch(product_id),
            "add",
            quantity,
            cancellation_reason(order.id),
            adjusted_by=adjusted_by,
        )


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)

        if not command.is_admin and str(order.customer_id) != str(command.requested_by):
            raise Forbidden("Not authorized to cancel this order")

        order.cancel(
            cancelled_by="admin" if command.is_admin else "customer",
            reason=command.reason,
        )
        restore_stock(order, adjusted_by=command.requested_by)
        repo.add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            requested_by=command.requested_by,
            reason=command.reason,
        )
        return order
