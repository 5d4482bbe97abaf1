"""Cart item management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart, check_update_quantity
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True, max_length=50)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True, max_length=50)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(required=True, max_length=50)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).fetch_available(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)
        cart.add_item(product, command.color, command.quantity)
        repo.add(cart)

        logger.info(
            "cart_item_added",
            customer_id=command.customer_id,
            product_id=command.product_id,
            color=command.color,
            quantity=command.quantity,
        )
        return cart

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        check_update_quantity(command.quantity)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)

        if command.quantity == 0:
            if cart.remove_item(command.product_id, command.color):
                repo.add(cart)
            return cart

        product = current_domain.repository_for(Product).fetch_available(command.product_id)
        cart.update_item(product, command.color, command.quantity)
        repo.add(cart)
        return cart

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)
        if cart.remove_item(command.product_id, command.color):
            repo.add(cart)
        return cart

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)
        cart.clear()
        repo.add(cart)
        return cart
