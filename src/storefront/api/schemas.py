"""Pydantic request schemas for the storefront API.

Bodies are only checked for shape here; business limits (quantity ranges,
stock, transitions) are enforced by the domain and reported with its error
codes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Cart ---


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": "prod-001", "color": "Brown", "quantity": 2}]
        }
    }

    product_id: str
    color: str = Field(..., max_length=50)
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


# --- Shipping ---


class ShippingAddressSchema(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ayesha Khan",
                    "email": "ayesha@example.com",
                    "phone": "+92 300 1234567",
                    "street": "12 Mall Road",
                    "city": "Lahore",
                    "state": "Punjab",
                    "postal_code": "54000",
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str = Field(..., max_length=20)
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=10)


class ShippingQuoteRequest(BaseModel):
    state: str
    city: str
    subtotal: float = 0.0


# --- Orders ---


class PlaceOrderRequest(BaseModel):
    shipping_address: ShippingAddressSchema
    payment_method: str = "cod"
    notes: str | None = Field(None, max_length=1000)


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "shipped",
                    "carrier": "TCS",
                    "tracking_number": "TCS-778812",
                    "tracking_url": "https://track.example.com/TCS-778812",
                }
            ]
        }
    }

    status: str
    carrier: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    reason: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str


# --- Products ---


class CreateProductRequest(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = Field(None, max_length=500)
    category: str | None = None
    price: float
    stock: int = 0
    stock_threshold: int = 0
    colors: list[str]
    images: list[str] = []
    status: str | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=500)
    category: str | None = None
    price: float | None = None
    stock_threshold: int | None = None
    colors: list[str] | None = None
    images: list[str] | None = None
    status: str | None = None


class StockAdjustmentRequest(BaseModel):
    type: str
    quantity: int
    reason: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
