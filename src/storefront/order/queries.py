"""Read helpers for orders: lookups with access checks and API payloads."""

from protean.utils.globals import current_domain

from storefront.errors import Forbidden
from storefront.order.order import Order
from storefront.utils.paging import Page


def order_payload(order) -> dict:
    tracking = order.tracking
    return {
        "id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "items": [{**item.to_dict(), "line_total": item.line_total} for item in order.items],
        "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "pricing": {
            "subtotal": order.pricing.subtotal,
            "shipping_fee": order.pricing.shipping_fee,
            "total": order.pricing.total,
            "currency": order.pricing.currency,
        },
        "tracking": (
            {
                "carrier": tracking.carrier,
                "tracking_number": tracking.tracking_number,
                "tracking_url": tracking.tracking_url,
            }
            if tracking
            else None
        ),
        "cancellation_reason": order.cancellation_reason,
        "cancelled_by": order.cancelled_by,
        "notes": order.notes,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


def order_for_viewer(order_id, user_id, is_admin=False) -> Order:
    """Load an order that ``user_id`` is allowed to see."""
    order = current_domain.repository_for(Order).fetch(order_id)
    if not is_admin and str(order.customer_id) != str(user_id):
        raise Forbidden("Not authorized to view this order")
    return order


def orders_for_customer(customer_id, status=None, page=1, limit=10) -> Page:
    return current_domain.repository_for(Order).for_customer(customer_id, status=status, page=page, limit=limit)


def search_orders(
    status=None, payment_status=None, placed_from=None, placed_to=None, page=1, limit=10
) -> Page:
    return current_domain.repository_for(Order).search(
        status=status,
        payment_status=payment_status,
        placed_from=placed_from,
        placed_to=placed_to,
        page=page,
        limit=limit,
    )
