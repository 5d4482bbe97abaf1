"""Staff alert when a product runs low."""

import os

from protean.utils.mixins import handle

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.inventory.events import LowStockDetected
from storefront.notification.dispatch import send_email
from storefront.notification.templates import LowStockAlertTemplate


def admin_email() -> str | None:
    return os.environ.get("STOREFRONT_ADMIN_EMAIL")


@storefront.event_handler(part_of=Product)
class LowStockAlertHandler:
    @handle(LowStockDetected)
    def on_low_stock_detected(self, event: LowStockDetected) -> None:
        send_email(
            admin_email(),
            LowStockAlertTemplate,
            {
                "product_id": str(event.product_id),
                "name": event.name,
                "current_stock": event.current_stock,
                "stock_threshold": event.stock_threshold,
            },
        )
