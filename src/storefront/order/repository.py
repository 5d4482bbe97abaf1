"""Repository for the Order aggregate."""

from datetime import UTC

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.order.order import Order
from storefront.utils.paging import Page, fetch_page

NEWEST_FIRST = "-created_at"


def _as_utc(moment):
    # Stored timestamps are UTC; bounds without a timezone are taken as UTC too
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment.astimezone(UTC)


@storefront.repository(part_of=Order)
class OrderRepository:
    def fetch(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise NotFound("order", order_id, "Order not found") from None

    def for_customer(self, customer_id, status=None, page=1, limit=10) -> Page:
        query = self._dao.query.filter(customer_id=str(customer_id))
        if status:
            query = query.filter(status=status)
        return fetch_page(query.order_by(NEWEST_FIRST), page=page, limit=limit)

    def search(
        self,
        status=None,
        payment_status=None,
        placed_from=None,
        placed_to=None,
        page=1,
        limit=10,
    ) -> Page:
        """Admin listing. Every filter is optional; results are newest first."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        if payment_status:
            query = query.filter(payment_status=payment_status)
        if placed_from:
            query = query.filter(created_at__gte=_as_utc(placed_from))
        if placed_to:
            query = query.filter(created_at__lte=_as_utc(placed_to))
        return fetch_page(query.order_by(NEWEST_FIRST), page=page, limit=limit)
