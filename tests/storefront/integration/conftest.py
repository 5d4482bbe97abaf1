import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import (
    cart_router,
    install_error_handlers,
    order_router,
    product_router,
    shipping_router,
)


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(shipping_router)
    app.include_router(order_router)
    app.include_router(product_router)
    install_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def admin_headers():
    return {"X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest.fixture()
def customer_headers():
    return {"X-User-Id": "cust-001"}


@pytest.fixture()
def create_product(client, admin_headers):
    """Create a product through the admin endpoint and return its id."""

    def _create(**overrides):
        body = {
            "name": "Classic Bifold",
            "category": "Wallets",
            "price": 1200.0,
            "stock": 10,
            "stock_threshold": 2,
            "colors": ["Brown", "Black"],
            "images": ["https://cdn.example.com/bifold.jpg"],
        }
        body.update(overrides)
        response = client.post("/products", json=body, headers=admin_headers)
        assert response.status_code == 201
        return response.json()["product_id"]

    return _create
