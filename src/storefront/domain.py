"""Storefront bounded context — Catalogue, Shopping Cart, Checkout and Stock Ledger.

Handles the product catalogue, per-customer shopping carts, order placement
with live stock and price re-validation, the order fulfillment lifecycle and
the audited stock ledger behind every stock movement.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
