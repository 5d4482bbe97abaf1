"""Domain events for the Order aggregate.

Events carry the customer's contact details so that notification handlers
can act on them without reloading the order.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer checked out their cart and an order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_name = String()
    customer_email = String()
    items = Text(required=True)  # JSON: list of item dicts
    subtotal = Float(required=True)
    shipping_fee = Float(required=True)
    total = Float(required=True)
    currency = String(default="PKR")
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderProcessing:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String()
    started_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderShipped:
    """The order was handed to a carrier."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String()
    carrier = String()
    tracking_number = String()
    tracking_url = String()
    shipped_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String()
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled. Its items go back into stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String()
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String(required=True)
    items = Text(required=True)  # JSON: list of {product_id, color, quantity}
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    updated_at = DateTime(required=True)
