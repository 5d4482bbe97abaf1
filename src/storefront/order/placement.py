"""Checkout: turning a customer's cart into an order.

Everything the handler touches (products, stock adjustments, the order and
the cart) is written in the handler's unit of work, so a failure at any
step leaves all of them as they were.
"""

import json
from collections import OrderedDict

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import EmptyCart, InsufficientStock, InvalidColor, OutOfStock
from storefront.inventory.ledger import adjust_stock, order_reason
from storefront.order.order import Order, PaymentMethod
from storefront.shipping import resolver as shipping

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    notes = String(max_length=1000)


def _check_stock(product, quantity):
    if product.stock == 0:
        raise OutOfStock("stock", f"{product.name} is out of stock")
    if product.stock < quantity:
        raise InsufficientStock("stock", f"Only {product.stock} of {product.name} left in stock")


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_customer(command.customer_id)
        if cart is None or not cart.items:
            raise EmptyCart("cart", "Your cart is empty")

        # Re-read every product: cart snapshots are advisory only
        product_repo = current_domain.repository_for(Product)
        products = {}
        demand = OrderedDict()
        for item in cart.items:
            product_id = str(item.product_id)
            if product_id not in products:
                products[product_id] = product_repo.fetch_available(product_id)
            if not products[product_id].offers_color(item.color):
                raise InvalidColor("color", f"{item.color} is no longer available for {item.name}")
            demand[product_id] = demand.get(product_id, 0) + item.quantity

        for product_id, quantity in demand.items():
            _check_stock(products[product_id], quantity)

        lines = [
            {
                "product_id": str(item.product_id),
                "name": products[str(item.product_id)].name,
                "image": products[str(item.product_id)].primary_image,
                "color": item.color,
                "quantity": item.quantity,
                "price": products[str(item.product_id)].price,
            }
            for item in cart.items
        ]
        subtotal = round(sum(line["price"] * line["quantity"] for line in lines), 2)

        address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        shipping_fee = shipping.get_resolver().fee_for(address, subtotal)

        order = Order.place(
            customer_id=command.customer_id,
            items_data=lines,
            shipping_address=address,
            payment_method=command.payment_method or PaymentMethod.COD.value,
            shipping_fee=shipping_fee,
            notes=command.notes,
        )

        for product_id, quantity in demand.items():
            adjust_stock(
                products[product_id],
                "remove",
                quantity,
                order_reason(order.id),
                adjusted_by=command.customer_id,
            )

        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            customer_id=command.customer_id,
            subtotal=order.pricing.subtotal,
            shipping_fee=order.pricing.shipping_fee,
            total=order.pricing.total,
        )
        return order


def place_order(customer_id, shipping_address, payment_method=PaymentMethod.COD.value, notes=None) -> Order:
    """Place an order for the customer's cart.

    A product changed by a concurrent checkout is detected when the unit of
    work commits and reported as ``InsufficientStock``; the customer should
    review the cart and try again.
    """
    command = PlaceOrder(
        customer_id=str(customer_id),
        shipping_address=json.dumps(shipping_address) if isinstance(shipping_address, dict) else shipping_address,
        payment_method=payment_method,
        notes=notes,
    )
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError:
        logger.warning("order_placement_conflict", customer_id=str(customer_id))
        raise InsufficientStock(
            "stock", "Stock changed while your order was being placed, please review your cart"
        ) from None
