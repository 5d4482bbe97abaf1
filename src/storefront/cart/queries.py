"""Read side of the cart: the customer's cart checked against the live catalogue.

Reading a cart never mutates it. Lines whose product has disappeared, been
withdrawn or lost the selected colour are reported under ``invalid_items``;
lines whose stock or price moved since they were added are reported under
``warnings``. The customer decides what to do about them.
"""

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.errors import NotFound


def _line_payload(item, product=None) -> dict:
    return {
        "product_id": str(item.product_id),
        "color": item.color,
        "name": item.name,
        "image": item.image,
        "quantity": item.quantity,
        "price": item.price,
        "line_total": item.line_total,
        "live_price": product.price if product else None,
        "available_stock": product.stock if product else 0,
    }


def _check_line(item, product) -> tuple[str | None, list[str]]:
    """Return (invalid reason, warnings) for one line."""
    if product is None:
        return "Product no longer exists", []
    if not product.is_active:
        return "Product is no longer available", []
    if not product.offers_color(item.color):
        return "Selected color is no longer available", []

    warnings = []
    if product.stock < item.quantity:
        warnings.append(f"Only {product.stock} items available")
    if product.price != item.price:
        warnings.append("Price has changed")
    return None, warnings


def cart_view(customer_id) -> dict:
    """Build the customer's cart with live stock and price checks."""
    cart = current_domain.repository_for(ShoppingCart).for_customer(customer_id)
    products = current_domain.repository_for(Product)

    view = {
        "customer_id": str(customer_id),
        "items": [],
        "cart_total": 0.0,
        "item_count": 0,
        "unit_count": 0,
        "warnings": [],
        "invalid_items": [],
    }
    if cart is None:
        return view

    for item in cart.items:
        try:
            product = products.fetch(item.product_id)
        except NotFound:
            product = None

        reason, warnings = _check_line(item, product)
        line = _line_payload(item, product)
        if reason:
            view["invalid_items"].append({**line, "reason": reason})
        for message in warnings:
            view["warnings"].append(
                {"product_id": line["product_id"], "color": item.color, "name": item.name, "message": message}
            )
        view["items"].append(line)

    view["cart_total"] = cart.cart_total
    view["item_count"] = cart.item_count
    view["unit_count"] = cart.unit_count
    return view
