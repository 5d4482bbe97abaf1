"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.product import Product, ProductStatus
from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.utils.paging import Page, fetch_all, fetch_page

PRODUCT_SORTS = ("-created_at", "created_at", "price", "-price", "name", "-name")


@storefront.repository(part_of=Product)
class ProductRepository:
    def fetch(self, product_id) -> Product:
        """Load a product or raise the storefront's NotFound."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise NotFound("product", product_id, f"Product not found with id of {product_id}") from None

    def fetch_available(self, product_id) -> Product:
        """Load a product that customers can currently buy."""
        product = self.fetch(product_id)
        if not product.is_active:
            raise NotFound("product", product_id, "Product not found or is not available")
        return product

    def browse(
        self,
        search=None,
        category=None,
        status=ProductStatus.ACTIVE.value,
        sort="-created_at",
        page=1,
        limit=12,
    ) -> Page:
        """One page of the catalogue, newest first unless ``sort`` says otherwise."""
        if sort not in PRODUCT_SORTS:
            raise ValidationError({"sort": [f"Sort must be one of {', '.join(PRODUCT_SORTS)}"]})

        query = self._dao.query
        if status:
            query = query.filter(status=status)
        if category and category != "all":
            query = query.filter(category=category)
        if search:
            query = query.filter(name__icontains=search.strip())
        return fetch_page(query.order_by(sort), page=page, limit=limit)

    def find_low_stock(self) -> list[Product]:
        """Products at or below their low-stock threshold, lowest stock first.

        The threshold is per product, so every product is scanned.
        """
        return [p for p in fetch_all(self._dao.query.order_by("stock")) if p.is_low_stock]
