"""Error taxonomy for the storefront.

Rejected mutations derive from Protean's ``ValidationError`` and missing
records from ``ObjectNotFoundError``, so code that already handles the
framework exceptions keeps working. Every error carries a stable ``code``
that the API returns to clients alongside a field -> messages mapping.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorefrontError(ValidationError):
    """Base class for business rule violations."""

    code = "invalid_request"

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__({field: [message]})


class InvalidQuantity(StorefrontError):
    code = "invalid_quantity"


class OutOfStock(StorefrontError):
    code = "out_of_stock"


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"


class EmptyCart(StorefrontError):
    code = "empty_cart"


class InvalidTransition(StorefrontError):
    code = "invalid_transition"


class EmptyReasonOrMissingField(StorefrontError):
    code = "missing_field"


class InvalidColor(StorefrontError):
    code = "invalid_color"


class InvalidAdjustment(StorefrontError):
    code = "invalid_adjustment"


class InvalidDestination(StorefrontError):
    code = "invalid_destination"


class CartLimitExceeded(StorefrontError):
    code = "cart_limit_exceeded"


class NotFound(ObjectNotFoundError):
    """Raised when a product, cart line or order does not exist."""

    code = "not_found"

    def __init__(self, entity: str, identifier, message: str | None = None):
        self.entity = entity
        self.identifier = identifier
        self.message = message or f"{entity.capitalize()} {identifier} not found"
        super().__init__({entity: [self.message]})
        self.messages = {entity: [self.message]}


class Forbidden(Exception):
    """Raised when the acting user may not touch the requested resource."""

    code = "forbidden"

    def __init__(self, message: str = "Not authorized to access this resource"):
        self.message = message
        self.messages = {"user": [message]}
        super().__init__(message)
