"""Shipping-fee resolver.

Maps a delivery address to a fee using a per-city table with a default for
unmapped cities, and waives the fee once the subtotal reaches the
free-shipping threshold. The resolved fee is copied into the order at
placement, so later table changes never touch existing orders.
"""

from dataclasses import dataclass, field

from storefront.errors import InvalidDestination
from storefront.shipping import rates


@dataclass(frozen=True)
class ShippingQuote:
    fee: float
    free_shipping: bool
    estimated_delivery_days: str
    services: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    currency: str = rates.CURRENCY

    def to_dict(self) -> dict:
        return {
            "fee": self.fee,
            "free_shipping": self.free_shipping,
            "estimated_delivery_days": self.estimated_delivery_days,
            "services": list(self.services),
            "restrictions": list(self.restrictions),
            "currency": self.currency,
        }


def _city_of(address) -> str:
    city = address.get("city") if isinstance(address, dict) else getattr(address, "city", None)
    return (city or "").strip()


class ShippingFeeResolver:
    def __init__(
        self,
        fee_table: dict[str, float] | None = None,
        default_fee: float | None = None,
        free_shipping_threshold: float | None = None,
    ):
        self.fee_table = dict(fee_table) if fee_table is not None else rates.default_fee_table()
        self.default_fee = rates.DEFAULT_SHIPPING_FEE if default_fee is None else default_fee
        self.free_shipping_threshold = (
            rates.FREE_SHIPPING_THRESHOLD if free_shipping_threshold is None else free_shipping_threshold
        )
        # Case-insensitive lookups; addresses arrive from free-text forms
        self._by_city = {city.lower(): fee for city, fee in self.fee_table.items()}

    def resolve_fee(self, address) -> float:
        return self._by_city.get(_city_of(address).lower(), self.default_fee)

    def is_free_shipping(self, subtotal) -> bool:
        return subtotal >= self.free_shipping_threshold

    def fee_for(self, address, subtotal) -> float:
        """The fee an order with ``subtotal`` shipping to ``address`` pays."""
        if self.is_free_shipping(subtotal):
            return 0.0
        return self.resolve_fee(address)

    def quote(self, address, subtotal=0.0) -> ShippingQuote:
        city = _city_of(address)
        restrictions = []
        if city in rates.REMOTE_CITIES:
            restrictions.append("Delivery may take longer due to remote location")

        services = ["Standard Delivery"]
        if city in rates.MAJOR_CITIES:
            services.append("Express Delivery")

        return ShippingQuote(
            fee=self.fee_for(address, subtotal),
            free_shipping=self.is_free_shipping(subtotal),
            estimated_delivery_days=rates.DELIVERY_ESTIMATES.get(city, rates.DEFAULT_DELIVERY_ESTIMATE),
            services=services,
            restrictions=restrictions,
        )


def validate_destination(state, city) -> None:
    """Reject a state we do not deliver to, or a city outside that state."""
    if state not in rates.REGIONS:
        raise InvalidDestination("state", "Invalid state selected")
    if city not in rates.REGIONS[state]:
        raise InvalidDestination("city", f"{city} is not a valid city in {state}")


_resolver_instance = None


def get_resolver() -> ShippingFeeResolver:
    """Return the configured shipping-fee resolver (singleton)."""
    global _resolver_instance
    if _resolver_instance is None:
        _resolver_instance = ShippingFeeResolver()
    return _resolver_instance


def reset_resolver():
    """Reset the resolver singleton (useful for testing)."""
    global _resolver_instance
    _resolver_instance = None
