"""Integration tests for checkout and order management endpoints."""

import pytest
from protean.utils.globals import current_domain
from storefront.catalogue.product import Product

CUSTOMER = {"X-User-Id": "cust-001"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}

ADDRESS = {
    "name": "Ayesha Khan",
    "email": "ayesha@example.com",
    "phone": "+92 300 1234567",
    "street": "12 Mall Road",
    "city": "Lahore",
    "state": "Punjab",
    "postal_code": "54000",
}


def _checkout(client, create_product, quantity=2, stock=10, headers=CUSTOMER):
    product_id = create_product(stock=stock)
    client.post(
        "/cart/items",
        json={"product_id": product_id, "color": "Brown", "quantity": quantity},
        headers=headers,
    )
    response = client.post("/orders", json={"shipping_address": ADDRESS}, headers=headers)
    return response, product_id


@pytest.fixture()
def order_id(client, create_product):
    response, _ = _checkout(client, create_product)
    return response.json()["id"]


class TestPlaceOrder:
    def test_checkout(self, client, create_product):
        response, product_id = _checkout(client, create_product, quantity=2)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"
        assert data["pricing"]["subtotal"] == 2400.0
        assert data["pricing"]["total"] == data["pricing"]["subtotal"] + data["pricing"]["shipping_fee"]
        assert data["items"][0]["quantity"] == 2

        assert current_domain.repository_for(Product).get(product_id).stock == 8
        assert client.get("/cart", headers=CUSTOMER).json()["items"] == []

    def test_empty_cart(self, client):
        response = client.post("/orders", json={"shipping_address": ADDRESS}, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["error"] == "empty_cart"

    def test_stock_sold_out_before_checkout(self, client, create_product, admin_headers):
        product_id = create_product(stock=3)
        client.post(
            "/cart/items",
            json={"product_id": product_id, "color": "Brown", "quantity": 3},
            headers=CUSTOMER,
        )
        client.put(
            f"/products/{product_id}/stock",
            json={"type": "remove", "quantity": 2, "reason": "Damaged in storage"},
            headers=admin_headers,
        )

        response = client.post("/orders", json={"shipping_address": ADDRESS}, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["error"] == "insufficient_stock"
        assert client.get("/cart", headers=CUSTOMER).json()["unit_count"] == 3

    def test_invalid_address(self, client, create_product):
        product_id = create_product()
        client.post(
            "/cart/items",
            json={"product_id": product_id, "color": "Brown", "quantity": 1},
            headers=CUSTOMER,
        )
        response = client.post(
            "/orders",
            json={"shipping_address": {**ADDRESS, "postal_code": "5400"}},
            headers=CUSTOMER,
        )
        assert response.status_code == 400
        assert current_domain.repository_for(Product).get(product_id).stock == 10


class TestReadOrders:
    def test_my_orders(self, client, order_id):
        response = client.get("/orders/mine", headers=CUSTOMER)
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["items"]] == [order_id]

    def test_owner_can_view(self, client, order_id):
        assert client.get(f"/orders/{order_id}", headers=CUSTOMER).status_code == 200

    def test_other_customer_cannot_view(self, client, order_id):
        response = client.get(f"/orders/{order_id}", headers={"X-User-Id": "cust-999"})
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_admin_can_view(self, client, order_id):
        assert client.get(f"/orders/{order_id}", headers=ADMIN).status_code == 200

    def test_unknown_order(self, client):
        assert client.get("/orders/no-such-order", headers=ADMIN).status_code == 404

    def test_admin_listing_by_status(self, client, order_id):
        pending = client.get("/orders", params={"status": "pending"}, headers=ADMIN).json()["items"]
        shipped = client.get("/orders", params={"status": "shipped"}, headers=ADMIN).json()["items"]

        assert [o["id"] for o in pending] == [order_id]
        assert shipped == []

    def test_listing_requires_admin(self, client, order_id):
        assert client.get("/orders", headers=CUSTOMER).status_code == 403

    def test_admin_listing_pages(self, client, create_product):
        placed = [_checkout(client, create_product, quantity=1)[0].json()["id"] for _ in range(3)]

        first = client.get("/orders", params={"limit": 2}, headers=ADMIN).json()
        second = client.get("/orders", params={"limit": 2, "page": 2}, headers=ADMIN).json()

        assert first["total"] == 3
        assert first["has_next"] is True
        assert [o["id"] for o in first["items"] + second["items"]] == list(reversed(placed))

    def test_admin_listing_by_payment_status_and_date(self, client, order_id):
        client.put(f"/orders/{order_id}/payment", json={"payment_status": "completed"}, headers=ADMIN)

        completed = client.get("/orders", params={"payment_status": "completed"}, headers=ADMIN).json()
        future = client.get("/orders", params={"start_date": "2999-01-01T00:00:00"}, headers=ADMIN).json()
        past = client.get("/orders", params={"end_date": "2000-01-01T00:00:00Z"}, headers=ADMIN).json()

        assert [o["id"] for o in completed["items"]] == [order_id]
        assert future["total"] == 0
        assert past["total"] == 0

    def test_my_orders_pages(self, client, create_product):
        for _ in range(3):
            _checkout(client, create_product, quantity=1)

        response = client.get("/orders/mine", params={"limit": 2, "page": 2}, headers=CUSTOMER).json()
        assert len(response["items"]) == 1
        assert response["total"] == 3
        assert response["has_prev"] is True


class TestCancelOrder:
    def test_customer_cancels(self, client, order_id):
        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Ordered twice"}, headers=CUSTOMER)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancellation_reason"] == "Ordered twice"

    def test_other_customer_cannot_cancel(self, client, order_id):
        response = client.put(f"/orders/{order_id}/cancel", json={}, headers={"X-User-Id": "cust-999"})
        assert response.status_code == 403

    def test_cancel_restores_stock(self, client, create_product):
        response, product_id = _checkout(client, create_product, quantity=2, stock=5)
        client.put(f"/orders/{response.json()['id']}/cancel", json={}, headers=CUSTOMER)

        assert current_domain.repository_for(Product).get(product_id).stock == 5


class TestOrderStatus:
    def test_lifecycle(self, client, order_id):
        assert client.put(f"/orders/{order_id}/status", json={"status": "processing"}, headers=ADMIN).status_code == 200

        response = client.put(
            f"/orders/{order_id}/status",
            json={"status": "shipped", "carrier": "TCS", "tracking_number": "TCS-1"},
            headers=ADMIN,
        )
        assert response.status_code == 200
        assert response.json()["tracking"]["carrier"] == "TCS"

        response = client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=ADMIN)
        assert response.json()["status"] == "delivered"

    def test_invalid_transition(self, client, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=ADMIN)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_transition"

    def test_shipping_needs_carrier(self, client, order_id):
        client.put(f"/orders/{order_id}/status", json={"status": "processing"}, headers=ADMIN)
        response = client.put(
            f"/orders/{order_id}/status",
            json={"status": "shipped", "tracking_number": "TCS-1"},
            headers=ADMIN,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "missing_field"

    def test_requires_admin(self, client, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "processing"}, headers=CUSTOMER)
        assert response.status_code == 403

    def test_payment_status(self, client, order_id):
        response = client.put(f"/orders/{order_id}/payment", json={"payment_status": "completed"}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["payment_status"] == "completed"

    def test_unknown_payment_status(self, client, order_id):
        response = client.put(f"/orders/{order_id}/payment", json={"payment_status": "refunded"}, headers=ADMIN)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
