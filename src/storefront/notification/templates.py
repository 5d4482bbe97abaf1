"""Email templates for customer and staff notifications.

Each template renders a ``{"subject", "body"}`` dict from the event context.
"""

STORE_NAME = "L'ardene Leather"


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": f"Order Confirmation - #{order_id}",
            "body": (
                f"Hi {context.get('customer_name') or 'there'},\n\n"
                f"Thank you for your order #{order_id}.\n\n"
                f"Subtotal: {context.get('currency', 'PKR')} {context.get('subtotal', 0):.2f}\n"
                f"Shipping: {context.get('currency', 'PKR')} {context.get('shipping_fee', 0):.2f}\n"
                f"Total: {context.get('currency', 'PKR')} {context.get('total', 0):.2f}\n\n"
                "We'll let you know as soon as it ships.\n\n"
                f"{STORE_NAME}"
            ),
        }


class OrderStatusUpdateTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "updated")
        lines = [f"Your order #{order_id} is now {status}."]
        if context.get("carrier"):
            lines.append(f"Carrier: {context['carrier']}")
        if context.get("tracking_number"):
            lines.append(f"Tracking number: {context['tracking_number']}")
        if context.get("tracking_url"):
            lines.append(f"Track it here: {context['tracking_url']}")
        return {
            "subject": f"Order Status Update - #{order_id}",
            "body": "\n".join(lines) + f"\n\n{STORE_NAME}",
        }


class OrderCancellationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        reason = context.get("reason")
        return {
            "subject": f"Order Cancelled - #{order_id}",
            "body": (
                f"Your order #{order_id} has been cancelled.\n"
                + (f"Reason: {reason}\n" if reason else "")
                + f"\nIf this was unexpected, please contact us.\n\n{STORE_NAME}"
            ),
        }


class LowStockAlertTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name", "N/A")
        return {
            "subject": f"[Low Stock] {name}",
            "body": (
                f"Low stock alert for {name}\n\n"
                f"Product ID: {context.get('product_id', 'N/A')}\n"
                f"Current stock: {context.get('current_stock', 0)}\n"
                f"Threshold: {context.get('stock_threshold', 0)}\n\n"
                "Please restock as needed."
            ),
        }
