"""
Tests for the order API: catalog pricing, total checks, all-or-nothing
persistence and idempotent retries
"""

import json
import re

import pytest
from fastapi.testclient import TestClient

ORDER_ID_RE = re.compile(r"^ORD-\d{13}-[0-9A-F]{9}$")


def order_payload(customer, lines, total, **extra):
    """Build an order request body from (book, quantity) pairs"""
    payload = {
        "customer": customer,
        "items": [{"bookId": book.id, "quantity": qty} for book, qty in lines],
        "totalPrice": total,
    }
    payload.update(extra)
    return payload


class TestCreateOrder:
    """POST /api/orders"""

    def test_creates_order_priced_from_catalog(self, api, order_db, customer, gatsby):
        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 2)], 25.98))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order created successfully"

        order = body["data"]
        assert ORDER_ID_RE.match(order["orderId"])
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["totalPrice"] == pytest.approx(25.98)
        assert order["shippingAddress"] == customer["address"]
        assert order["customer"]["email"] == "jane@example.com"

        line = order["items"][0]
        assert line["book"] == gatsby.id
        assert line["quantity"] == 2
        assert line["price"] == pytest.approx(12.99)
        assert line["title"] == "The Great Gatsby"
        assert line["publisher"] == "Scribner"
        assert line["image"] == gatsby.image

        assert list(order_db.orders) == [order["orderId"]]

    def test_total_within_tolerance_is_accepted(self, api, customer, gatsby):
        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 2)], 25.985))

        assert response.status_code == 201
        assert response.json()["data"]["totalPrice"] == pytest.approx(25.98)

    def test_client_price_fields_are_ignored(self, api, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 2)], 25.98)
        payload["items"][0]["price"] = 0.01

        response = api.post("/api/orders", json=payload)

        assert response.status_code == 201
        assert response.json()["data"]["items"][0]["price"] == pytest.approx(12.99)

    def test_multiple_lines_keep_request_order(self, api, customer, gatsby, find_book):
        orwell = find_book("1984")
        response = api.post(
            "/api/orders",
            json=order_payload(customer, [(gatsby, 1), (orwell, 3)], 42.96),
        )

        assert response.status_code == 201
        items = response.json()["data"]["items"]
        assert [i["title"] for i in items] == ["The Great Gatsby", "1984"]
        assert [i["quantity"] for i in items] == [1, 3]

    def test_notes_are_stored(self, api, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 1)], 12.99, notes="Gift wrap please")

        response = api.post("/api/orders", json=payload)

        assert response.json()["data"]["notes"] == "Gift wrap please"


class TestRejectedOrders:
    """Rejections persist nothing"""

    def test_total_mismatch(self, api, order_db, customer, gatsby):
        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 2)], 20.00))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Total price mismatch"
        assert body["message"] == "Calculated total does not match provided total"
        assert body["calculatedTotal"] == pytest.approx(25.98)
        assert body["providedTotal"] == pytest.approx(20.00)
        assert order_db.orders == {}

    def test_unknown_book_rejects_whole_order(self, api, order_db, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 1)], 13.99)
        payload["items"].append({"bookId": "does-not-exist", "quantity": 1})

        response = api.post("/api/orders", json=payload)

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Book not found"
        assert body["bookId"] == "does-not-exist"
        assert order_db.orders == {}

    def test_inactive_book_is_not_orderable(self, api, order_db, customer, gatsby):
        gatsby.is_active = False

        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99))

        assert response.status_code == 404
        assert order_db.orders == {}

    def test_price_change_is_detected(self, api, book_db, order_db, customer, gatsby):
        book_db.set_price(gatsby.id, 15.00)

        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 2)], 25.98))

        assert response.status_code == 400
        assert response.json()["calculatedTotal"] == pytest.approx(30.00)
        assert order_db.orders == {}

    def test_empty_items(self, api, order_db, customer):
        response = api.post("/api/orders", json={"customer": customer, "items": [], "totalPrice": 10})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid order items"
        assert order_db.orders == {}

    @pytest.mark.parametrize("total", [0, -5])
    def test_non_positive_total(self, api, order_db, customer, gatsby, total):
        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], total))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid total price"
        assert order_db.orders == {}

    @pytest.mark.parametrize("item", [{"bookId": "", "quantity": 1}, {"quantity": 1}])
    def test_missing_book_id(self, api, customer, item):
        response = api.post("/api/orders", json={"customer": customer, "items": [item], "totalPrice": 10})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid item data"

    def test_zero_quantity(self, api, customer, gatsby):
        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 0)], 12.99))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid item data"

    def test_invalid_customer_fields(self, api, order_db, customer, gatsby):
        customer.update(phone="call me", email="not-an-email", name="J")

        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        fields = {d["field"] for d in body["details"]}
        assert {"customer.phone", "customer.email", "customer.name"} <= fields
        assert order_db.orders == {}

    def test_short_address(self, api, customer, gatsby):
        customer["address"] = "Main St"

        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99))

        assert response.status_code == 400
        assert "customer.address" in {d["field"] for d in response.json()["details"]}

    def test_notes_too_long(self, api, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 1)], 12.99, notes="x" * 1001)

        response = api.post("/api/orders", json=payload)

        assert response.status_code == 400
        assert "notes" in {d["field"] for d in response.json()["details"]}

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_total(self, api, order_db, customer, gatsby, literal):
        body = json.dumps(order_payload(customer, [(gatsby, 2)], 0)).replace(
            '"totalPrice": 0', f'"totalPrice": {literal}'
        )

        response = api.post("/api/orders", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
        assert "totalPrice" in {d["field"] for d in response.json()["details"]}
        assert order_db.orders == {}

    def test_missing_customer(self, api, gatsby):
        response = api.post("/api/orders", json={"items": [{"bookId": gatsby.id, "quantity": 1}], "totalPrice": 12.99})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


class TestIdempotentRetries:
    """Idempotency-Key header"""

    def test_replay_returns_existing_order(self, api, order_db, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 1)], 12.99)
        headers = {"Idempotency-Key": "retry-123"}

        first = api.post("/api/orders", json=payload, headers=headers)
        second = api.post("/api/orders", json=payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["message"] == "Order already created"
        assert second.json()["data"]["orderId"] == first.json()["data"]["orderId"]
        assert len(order_db.orders) == 1

    def test_distinct_keys_create_distinct_orders(self, api, order_db, customer, gatsby):
        payload = order_payload(customer, [(gatsby, 1)], 12.99)

        api.post("/api/orders", json=payload, headers={"Idempotency-Key": "a"})
        api.post("/api/orders", json=payload, headers={"Idempotency-Key": "b"})

        assert len(order_db.orders) == 2

    def test_rejected_request_does_not_claim_key(self, api, order_db, customer, gatsby):
        headers = {"Idempotency-Key": "fix-and-retry"}

        rejected = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 1.00), headers=headers)
        accepted = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99), headers=headers)

        assert rejected.status_code == 400
        assert accepted.status_code == 201
        assert len(order_db.orders) == 1


class TestPostCommitHooks:
    """Side effects after the order is persisted"""

    def test_failing_hook_does_not_fail_order(self, app, api, order_db, customer, gatsby):
        calls = []

        async def broken(order):
            raise RuntimeError("smtp down")

        async def record(order):
            calls.append(order.order_id)

        service = app.state.order_service
        service.post_commit_hooks = [broken, record]

        response = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99))

        assert response.status_code == 201
        order_id = response.json()["data"]["orderId"]
        assert calls == [order_id]
        assert order_id in order_db.orders


class TestGetOrders:
    """GET /api/orders/{id} and /api/orders/customer/{email}"""

    def test_get_order(self, api, customer, gatsby):
        created = api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99)).json()["data"]

        response = api.get(f"/api/orders/{created['orderId']}")

        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_unknown_order(self, api):
        response = api.get("/api/orders/ORD-0-000000000")

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"

    def test_customer_orders(self, api, customer, gatsby, find_book):
        api.post("/api/orders", json=order_payload(customer, [(gatsby, 1)], 12.99))
        api.post("/api/orders", json=order_payload(customer, [(find_book("1984"), 1)], 9.99))

        response = api.get("/api/orders/customer/JANE@example.com")

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"]["totalItems"] == 2
        assert body["pagination"]["hasNextPage"] is False

    def test_customer_without_orders(self, api):
        response = api.get("/api/orders/customer/nobody@example.com")

        assert response.json()["data"] == []
        assert response.json()["pagination"]["totalPages"] == 0


class TestUnexpectedErrors:

    def test_unhandled_exception_uses_envelope(self, app):
        def explode(order_id):
            raise RuntimeError("store offline")

        app.state.order_service.get_order = explode
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/orders/ORD-1")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to process request"
