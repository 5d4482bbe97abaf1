"""Product aggregate — the catalogue record read by cart and checkout logic.

A product carries the live selling price and stock level. Carts snapshot both
when a line is added, but checkout always re-reads them from here. Stock is
only ever changed through the stock ledger (``storefront.inventory.ledger``),
which records an audit entry next to every movement.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from storefront.catalogue.events import ProductAdded, ProductDetailsUpdated, ProductPriceChanged
from storefront.domain import storefront
from storefront.errors import InsufficientStock, InvalidAdjustment, InvalidQuantity
from storefront.inventory.events import LowStockDetected, StockAdjusted


class ProductStatus(Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class ProductCategory(Enum):
    WALLETS = "Wallets"
    CARDHOLDERS = "Cardholders"


class AdjustmentType(Enum):
    ADD = "add"
    REMOVE = "remove"


# Fields an admin may edit through UpdateProductDetails
_EDITABLE_FIELDS = ("name", "description", "category", "price", "stock_threshold", "status")


@storefront.aggregate
class Product:
    name = String(required=True, max_length=100)
    description = String(max_length=500)
    category = String(choices=ProductCategory)
    price = Float(required=True, min_value=0.01)
    stock = Integer(required=True, min_value=0, default=0)
    stock_threshold = Integer(required=True, min_value=0, default=0)
    colors = Text(required=True)  # JSON array of colour names
    images = Text()  # JSON array of image URLs, first is primary
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def must_offer_at_least_one_color(self):
        if not self.color_options:
            raise ValidationError({"colors": ["Please add available colors"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        price,
        colors,
        stock=0,
        stock_threshold=0,
        category=None,
        description=None,
        images=None,
        status=None,
    ):
        if not colors:
            raise ValidationError({"colors": ["Please add available colors"]})

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            category=category,
            price=price,
            stock=stock,
            stock_threshold=stock_threshold,
            colors=json.dumps(list(colors)),
            images=json.dumps(list(images or [])),
            status=status or ProductStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                category=category,
                price=price,
                stock=stock,
                status=product.status,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def color_options(self) -> list[str]:
        return json.loads(self.colors) if self.colors else []

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def primary_image(self) -> str | None:
        urls = self.image_urls
        return urls[0] if urls else None

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.stock_threshold

    def offers_color(self, color) -> bool:
        return color in self.color_options

    # -------------------------------------------------------------------
    # Admin edits
    # -------------------------------------------------------------------
    def update_details(self, colors=None, images=None, **changes):
        """Apply catalogue edits. Stock only moves through ``adjust_stock``."""
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be edited"] for field in sorted(unknown)})

        now = datetime.now(UTC)
        applied = {}
        previous_price = self.price

        for field, value in changes.items():
            if value is None:
                continue
            setattr(self, field, value)
            applied[field] = value

        if colors is not None:
            self.colors = json.dumps(list(colors))
            applied["colors"] = list(colors)
        if images is not None:
            self.images = json.dumps(list(images))
            applied["images"] = list(images)

        if not applied:
            return

        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                changes=json.dumps(applied),
                updated_at=now,
            )
        )
        if "price" in applied and applied["price"] != previous_price:
            self.raise_(
                ProductPriceChanged(
                    product_id=str(self.id),
                    previous_price=previous_price,
                    new_price=self.price,
                    changed_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Stock movements (driven by the stock ledger)
    # -------------------------------------------------------------------
    def adjust_stock(self, adjustment_type, quantity, reason):
        """Move stock up or down and return the resulting level.

        Removing more than is on hand fails without touching the level, so
        stock can never go negative.
        """
        try:
            kind = AdjustmentType(adjustment_type)
        except ValueError:
            raise InvalidAdjustment("type", f"Unknown stock operation '{adjustment_type}'. Use add or remove") from None

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity("quantity", "Quantity must be a positive whole number")

        previous_stock = self.stock
        if kind == AdjustmentType.REMOVE and quantity > previous_stock:
            raise InsufficientStock("quantity", f"Insufficient stock. Available: {previous_stock}")

        new_stock = previous_stock + quantity if kind == AdjustmentType.ADD else previous_stock - quantity
        now = datetime.now(UTC)
        self.stock = new_stock
        self.updated_at = now

        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                adjustment_type=kind.value,
                quantity=quantity,
                reason=reason,
                previous_stock=previous_stock,
                new_stock=new_stock,
                adjusted_at=now,
            )
        )
        if kind == AdjustmentType.REMOVE and self.is_low_stock:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    name=self.name,
                    current_stock=new_stock,
                    stock_threshold=self.stock_threshold,
                    detected_at=now,
                )
            )
        return new_stock
