"""Order fulfillment — the admin status update.

Admins move an order along its lifecycle one step at a time. Shipping needs
carrier details; cancelling from here restores stock exactly like a customer
cancellation does.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.cancellation import restore_stock
from storefront.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)
    tracking_url = String(max_length=500)
    reason = String(max_length=500)
    changed_by = Identifier()


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        previous_status = order.status

        order.transition_to(
            command.status,
            carrier=command.carrier,
            tracking_number=command.tracking_number,
            tracking_url=command.tracking_url,
            reason=command.reason,
            changed_by="admin",
        )
        if order.status == OrderStatus.CANCELLED.value:
            restore_stock(order, adjusted_by=command.changed_by)
        repo.add(order)

        logger.info(
            "order_status_updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
        return order
