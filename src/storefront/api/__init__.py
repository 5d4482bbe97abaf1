"""Storefront API package."""

from storefront.api.errors import install_error_handlers
from storefront.api.routes import cart_router, order_router, product_router, shipping_router

__all__ = ["cart_router", "order_router", "product_router", "shipping_router", "install_error_handlers"]
