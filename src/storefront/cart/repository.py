"""Repository for the ShoppingCart aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id) -> ShoppingCart | None:
        try:
            return self.get(str(customer_id))
        except ObjectNotFoundError:
            return None

    def get_or_create(self, customer_id) -> ShoppingCart:
        """Return the customer's cart, creating an empty one on first use."""
        return self.for_customer(customer_id) or ShoppingCart.create(customer_id)
