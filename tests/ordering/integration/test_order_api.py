"""Integration tests for Ordering API endpoints via TestClient."""

import pytest

OWNER = "jane@example.com"


@pytest.fixture()
def tee(make_product, ledger, location):
    product = make_product(title="Classic Tee", price=20.0)
    ledger.provision(product.variants[0].id, location.id, 10)
    return product


def _create_order(client, product, quantity=2, **overrides):
    payload = {
        "email": OWNER,
        "customer_id": "cust-001",
        "shipping_address": {
            "address1": "123 Main St",
            "city": "Springfield",
            "postal_code": "62701",
            "country": "US",
        },
        "items": [{"product_id": product.id, "variant_id": product.variants[0].id, "quantity": quantity}],
    }
    payload.update(overrides)
    return client.post("/orders", json=payload)


def _stock(client, product):
    return client.get(f"/inventory/variants/{product.variants[0].id}/stock").json()["available"]


class TestCreateOrderEndpoint:
    def test_create_order(self, client, tee):
        response = _create_order(client, tee)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["order_number"] > 1000
        assert data["subtotal"] == pytest.approx(40.00)
        assert data["total"] == pytest.approx(49.99)
        assert data["items"][0]["quantity"] == 2
        assert _stock(client, tee) == 8

    def test_out_of_stock(self, client, tee):
        response = _create_order(client, tee, quantity=11)

        assert response.status_code == 409
        assert response.json()["error"] == "OUT_OF_STOCK"
        assert _stock(client, tee) == 10

    def test_invalid_email(self, client, tee):
        response = _create_order(client, tee, email="nope")
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert "email" in response.json()["messages"]

    def test_zero_quantity(self, client, tee):
        response = _create_order(
            client,
            tee,
            items=[{"product_id": tee.id, "variant_id": tee.variants[0].id, "quantity": 0}],
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_no_items(self, client, tee):
        response = _create_order(client, tee, items=[])
        assert response.status_code == 400

    def test_single_variant_product_without_variant(self, client, tee):
        response = _create_order(client, tee, quantity=50, items=[{"product_id": tee.id, "quantity": 50}])
        assert response.status_code == 409
        assert response.json()["error"] == "OUT_OF_STOCK"
        assert _stock(client, tee) == 10


class TestReadEndpoints:
    def test_get_order(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.get(f"/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["id"] == order_id

    def test_get_missing_order(self, client):
        response = client.get("/orders/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_customer_orders(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.get("/customers/cust-001/orders")
        assert [order["id"] for order in response.json()] == [order_id]


class TestCancelEndpoint:
    def test_owner_cancels(self, client, tee, clock):
        order_id = _create_order(client, tee).json()["id"]
        clock.advance(hours=1)

        response = client.post(f"/orders/{order_id}/cancel", headers={"X-Requester-Email": "Jane@Example.com"})

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert _stock(client, tee) == 10

    def test_missing_requester(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.post(f"/orders/{order_id}/cancel")
        assert response.status_code == 403
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_window_expired(self, client, tee, clock):
        order_id = _create_order(client, tee).json()["id"]
        clock.advance(hours=25)

        response = client.post(f"/orders/{order_id}/cancel", headers={"X-Requester-Email": OWNER})

        assert response.status_code == 400
        assert response.json()["error"] == "WINDOW_EXPIRED"
        assert _stock(client, tee) == 8

    def test_shipped_order(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        client.put(f"/admin/orders/{order_id}/status", json={"status": "processing"})
        client.put(f"/admin/orders/{order_id}/status", json={"status": "shipped"})

        response = client.post(f"/orders/{order_id}/cancel", headers={"X-Requester-Email": OWNER})

        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_TRANSITION"
        assert _stock(client, tee) == 8


class TestAdminEndpoints:
    def test_update_status(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.put(
            f"/admin/orders/{order_id}/status",
            json={"status": "processing", "payment_status": "paid"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "processing"
        assert response.json()["payment_status"] == "paid"

    def test_status_is_optional(self, client, tee, email_channel):
        order_id = _create_order(client, tee).json()["id"]
        response = client.put(f"/admin/orders/{order_id}/status", json={"fulfillment_status": "partial"})
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert response.json()["fulfillment_status"] == "partial"

    def test_admin_message_is_emailed(self, client, tee, email_channel):
        order_id = _create_order(client, tee).json()["id"]

        response = client.put(
            f"/admin/orders/{order_id}/status",
            json={"status": "processing", "admin_message": "Gift wrapping added."},
        )

        assert response.status_code == 200
        assert response.json()["admin_message"] == "Gift wrapping added."
        assert "Gift wrapping added." in email_channel.sent_emails[-1]["body"]

    def test_empty_update(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.put(f"/admin/orders/{order_id}/status", json={})
        assert response.status_code == 400
        assert response.json()["messages"] == {"status": ["Nothing to update"]}

    def test_invalid_transition(self, client, tee):
        order_id = _create_order(client, tee).json()["id"]
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "delivered"})
        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_TRANSITION"

    def test_admin_cancel(self, client, tee, clock):
        order_id = _create_order(client, tee).json()["id"]
        clock.advance(days=3)
        response = client.post(f"/admin/orders/{order_id}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert _stock(client, tee) == 10

    def test_delete_order(self, client, tee):
        order_id = _create_order(client, tee, quantity=3).json()["id"]

        response = client.delete(f"/admin/orders/{order_id}")

        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}").status_code == 404
        assert _stock(client, tee) == 10


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "ok"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
