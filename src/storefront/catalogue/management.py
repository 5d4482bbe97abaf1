"""Catalogue management — admin commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=100)
    description = String(max_length=500)
    category = String(max_length=50)
    price = Float(required=True)
    stock = Integer(default=0)
    stock_threshold = Integer(default=0)
    colors = Text(required=True)  # JSON array of colour names
    images = Text()  # JSON array of image URLs
    status = String(max_length=20)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    name = String(max_length=100)
    description = String(max_length=500)
    category = String(max_length=50)
    price = Float()
    stock_threshold = Integer()
    colors = Text()
    images = Text()
    status = String(max_length=20)


def _as_list(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else list(value)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            stock=command.stock or 0,
            stock_threshold=command.stock_threshold or 0,
            colors=_as_list(command.colors),
            images=_as_list(command.images),
            status=command.status,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.fetch(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            stock_threshold=command.stock_threshold,
            status=command.status,
            colors=_as_list(command.colors),
            images=_as_list(command.images),
        )
        repo.add(product)
