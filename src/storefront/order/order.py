"""Order aggregate — an immutable record of what a customer bought.

Items, prices, shipping fee and shipping address are snapshotted at checkout
and never change afterwards, whatever happens to the catalogue. Only the
lifecycle fields move, and only along the transition table below:

    pending → processing → shipped → delivered
    pending | processing → cancelled
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.errors import EmptyReasonOrMissingField, InvalidTransition
from storefront.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderProcessing,
    OrderShipped,
    PaymentStatusUpdated,
)
from storefront.shipping.rates import CURRENCY


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    COD = "cod"
    CARD = "card"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
_PHONE_PATTERN = re.compile(r"^\+?[\d\s-]{10,}$")
_POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")


def can_transition(current, target) -> bool:
    return OrderStatus(target) in _VALID_TRANSITIONS.get(OrderStatus(current), set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where and to whom the order is delivered, captured at checkout."""

    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=10)

    @invariant.post
    def contact_details_must_be_well_formed(self):
        errors = {}
        if not _EMAIL_PATTERN.match(self.email or ""):
            errors["email"] = ["Please provide a valid email address"]
        if not _PHONE_PATTERN.match(self.phone or ""):
            errors["phone"] = ["Please provide a valid phone number"]
        if not _POSTAL_CODE_PATTERN.match(self.postal_code or ""):
            errors["postal_code"] = ["Please provide a valid 5-digit postal code"]
        if errors:
            raise ValidationError(errors)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
        }


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at checkout. The currency travels with them."""

    subtotal = Float(required=True, min_value=0.0)
    shipping_fee = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=CURRENCY)

    @invariant.post
    def total_must_be_subtotal_plus_shipping(self):
        if round(self.subtotal + self.shipping_fee, 2) != round(self.total, 2):
            raise ValidationError({"total": ["Total must equal subtotal plus shipping fee"]})


@storefront.value_object(part_of="Order")
class TrackingInfo:
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)
    tracking_url = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    image = String(max_length=500)
    color = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "image": self.image,
            "color": self.color,
            "quantity": self.quantity,
            "price": self.price,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    pricing = ValueObject(OrderPricing)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    tracking = ValueObject(TrackingInfo)
    cancellation_reason = String(max_length=500)
    cancelled_by = String(max_length=50)
    notes = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def must_contain_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, items_data, shipping_address, payment_method, shipping_fee, notes=None):
        """Create a pending order from priced checkout lines.

        Args:
            customer_id: The customer placing the order.
            items_data: List of dicts with product_id, name, image, color,
                        quantity and price (the live price at checkout).
            shipping_address: Dict with name, email, phone, street, city,
                              state and postal_code.
            payment_method: ``cod`` or ``card``.
            shipping_fee: Fee resolved for the address, 0 when shipping is free.
        """
        now = datetime.now(UTC)
        subtotal = round(sum(item["price"] * item["quantity"] for item in items_data), 2)
        payment_status = PaymentStatus.PENDING if payment_method == PaymentMethod.COD.value else PaymentStatus.PROCESSING

        order = cls(
            customer_id=str(customer_id),
            items=[OrderItem(**item) for item in items_data],
            shipping_address=ShippingAddress(**shipping_address),
            pricing=OrderPricing(
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                total=round(subtotal + shipping_fee, 2),
                currency=CURRENCY,
            ),
            payment_method=payment_method,
            payment_status=payment_status.value,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                customer_name=order.shipping_address.name,
                customer_email=order.shipping_address.email,
                items=json.dumps([item.to_dict() for item in order.items]),
                subtotal=order.pricing.subtotal,
                shipping_fee=order.pricing.shipping_fee,
                total=order.pricing.total,
                currency=order.pricing.currency,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    @property
    def customer_email(self):
        return self.shipping_address.email if self.shipping_address else None

    @property
    def is_cancellable(self) -> bool:
        return can_transition(self.status, OrderStatus.CANCELLED)

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        if not can_transition(self.status, target_status):
            raise InvalidTransition(
                "status",
                f"Cannot transition from {self.status} to {target_status.value}",
            )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def mark_processing(self):
        self._assert_can_transition(OrderStatus.PROCESSING)
        now = datetime.now(UTC)
        self.status = OrderStatus.PROCESSING.value
        self.updated_at = now
        self.raise_(
            OrderProcessing(
                order_id=str(self.id),
                customer_email=self.customer_email,
                started_at=now,
            )
        )

    def ship(self, carrier, tracking_number, tracking_url=None):
        """Hand the order to a carrier. Carrier and tracking number must be supplied."""
        self._assert_can_transition(OrderStatus.SHIPPED)
        if carrier is None:
            raise EmptyReasonOrMissingField("carrier", "Carrier is required to ship an order")
        if tracking_number is None:
            raise EmptyReasonOrMissingField("tracking_number", "Tracking number is required to ship an order")

        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.tracking = TrackingInfo(
            carrier=carrier,
            tracking_number=tracking_number,
            tracking_url=tracking_url,
        )
        self.updated_at = now
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                customer_email=self.customer_email,
                carrier=carrier,
                tracking_number=tracking_number,
                tracking_url=tracking_url,
                shipped_at=now,
            )
        )

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                customer_email=self.customer_email,
                delivered_at=now,
            )
        )

    def cancel(self, cancelled_by, reason=None):
        """Cancel a pending or processing order.

        Putting the items back into stock is the caller's job; the raised
        ``OrderCancelled`` event lists them.
        """
        if not self.is_cancellable:
            raise InvalidTransition("status", "Order cannot be cancelled at this stage")

        now = datetime.now(UTC)
        previous_status = self.status
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_by = str(cancelled_by)
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_email=self.customer_email,
                previous_status=previous_status,
                reason=reason,
                cancelled_by=str(cancelled_by),
                items=json.dumps(
                    [{"product_id": str(i.product_id), "color": i.color, "quantity": i.quantity} for i in self.items]
                ),
                cancelled_at=now,
            )
        )

    def transition_to(
        self,
        target_status,
        carrier=None,
        tracking_number=None,
        tracking_url=None,
        reason=None,
        changed_by=None,
    ):
        """Move the order to ``target_status`` through the matching lifecycle method."""
        try:
            target = OrderStatus(target_status)
        except ValueError:
            raise InvalidTransition("status", f"Unknown order status: {target_status}") from None

        if target == OrderStatus.PROCESSING:
            self.mark_processing()
        elif target == OrderStatus.SHIPPED:
            self.ship(carrier, tracking_number, tracking_url)
        elif target == OrderStatus.DELIVERED:
            self.deliver()
        elif target == OrderStatus.CANCELLED:
            self.cancel(cancelled_by=changed_by or "admin", reason=reason)
        else:
            self._assert_can_transition(target)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, payment_status):
        try:
            new_status = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Invalid payment status: {payment_status}"]}) from None

        now = datetime.now(UTC)
        previous_status = self.payment_status
        self.payment_status = new_status.value
        self.updated_at = now
        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status.value,
                updated_at=now,
            )
        )
