"""Catalogue reads for the API."""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.utils.paging import Page


def product_payload(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "price": product.price,
        "stock": product.stock,
        "stock_threshold": product.stock_threshold,
        "is_low_stock": product.is_low_stock,
        "colors": product.color_options,
        "images": product.image_urls,
        "status": product.status,
    }


def available_product(product_id) -> Product:
    return current_domain.repository_for(Product).fetch_available(product_id)


def low_stock_products() -> list[Product]:
    return current_domain.repository_for(Product).find_low_stock()


def browse_products(search=None, category=None, sort="-created_at", page=1, limit=12) -> Page:
    """Active products for the storefront listing."""
    return current_domain.repository_for(Product).browse(
        search=search, category=category, sort=sort, page=page, limit=limit
    )
