"""Customer emails that follow order lifecycle events."""

from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.notification.dispatch import send_email
from storefront.notification.templates import (
    OrderCancellationTemplate,
    OrderConfirmationTemplate,
    OrderStatusUpdateTemplate,
)
from storefront.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderProcessing,
    OrderShipped,
)
from storefront.order.order import Order, OrderStatus


@storefront.event_handler(part_of=Order)
class OrderNotificationsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        send_email(
            event.customer_email,
            OrderConfirmationTemplate,
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "subtotal": event.subtotal,
                "shipping_fee": event.shipping_fee,
                "total": event.total,
                "currency": event.currency,
            },
        )

    @handle(OrderProcessing)
    def on_order_processing(self, event: OrderProcessing) -> None:
        send_email(
            event.customer_email,
            OrderStatusUpdateTemplate,
            {"order_id": str(event.order_id), "status": OrderStatus.PROCESSING.value},
        )

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        send_email(
            event.customer_email,
            OrderStatusUpdateTemplate,
            {
                "order_id": str(event.order_id),
                "status": OrderStatus.SHIPPED.value,
                "carrier": event.carrier,
                "tracking_number": event.tracking_number,
                "tracking_url": event.tracking_url,
            },
        )

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        send_email(
            event.customer_email,
            OrderStatusUpdateTemplate,
            {"order_id": str(event.order_id), "status": OrderStatus.DELIVERED.value},
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        send_email(
            event.customer_email,
            OrderCancellationTemplate,
            {"order_id": str(event.order_id), "reason": event.reason},
        )
