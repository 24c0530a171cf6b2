"""Tests for the HTTP layer."""

import httpx


def _cart_item(client_details, **overrides):
    item = dict(
        client_details.model_dump(),
        cart_item_id="cart-1",
        product_type="cartonBox",
        product_name="Carton Box",
        width=15,
        height=10,
        depth=5,
        quantity=75,
        unit_price=1.2,
        item_weight=50,
    )
    item.update(overrides)
    return item


def _create(api_client, client_details, **overrides):
    response = api_client.post(
        "/api/orders",
        json={
            "client_details": client_details.model_dump(),
            "cart_items": [_cart_item(client_details, **overrides)],
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCatalog:
    def test_sizes(self, api_client):
        response = api_client.get("/api/catalog/sizes")
        assert response.status_code == 200
        assert response.json()["cartonBox"][0]["pricing"][0]["min_quantity"] == 50

    def test_products(self, api_client):
        assert api_client.get("/api/catalog/products").json()[0]["id"] == "cartonBox"


class TestPricing:
    def test_quote(self, api_client):
        response = api_client.post(
            "/api/pricing/quote",
            json={"product_type": "cartonBox", "width": 15, "height": 10, "depth": 5, "quantity": 250},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price_per_item"] == 1.0
        assert data["discount_applied"] is True

    def test_quote_custom_size(self, api_client):
        data = api_client.post(
            "/api/pricing/quote",
            json={"product_type": "cartonBox", "width": 99, "height": 99, "depth": 99, "quantity": 100},
        ).json()
        assert data["is_custom_size"] is True
        assert data["price_per_item"] is None

    def test_quote_rejects_zero_quantity(self, api_client):
        response = api_client.post(
            "/api/pricing/quote",
            json={"product_type": "cartonBox", "width": 15, "height": 10, "depth": 5, "quantity": 0},
        )
        assert response.status_code == 422

    def test_cart_item_custom_size(self, api_client, client_details):
        payload = dict(client_details.model_dump(), product_type="cartonBox", width=99, height=1, quantity=10)
        assert api_client.post("/api/cart/items", json=payload).status_code == 400

    def test_cart_item_priced(self, api_client, client_details):
        payload = dict(client_details.model_dump(), product_type="cartonBox", width=15, height=10, depth=5, quantity=60)
        response = api_client.post("/api/cart/items", json=payload)
        assert response.status_code == 201
        assert response.json()["unit_price"] == 1.2
        assert response.json()["cart_item_id"]


class TestOrders:
    def test_create_and_read(self, api_client, client_details):
        order = _create(api_client, client_details)
        assert order["status"] == "Pending"
        assert order["total_price"] == 90.0
        response = api_client.get(f"/api/orders/{order['id']}")
        assert response.status_code == 200
        assert "client_name" not in response.json()["line_items"][0]

    def test_empty_order(self, api_client, client_details):
        response = api_client.post(
            "/api/orders", json={"client_details": client_details.model_dump(), "cart_items": []}
        )
        assert response.status_code == 400
        assert api_client.get("/api/orders").json()["items"] == []

    def test_not_found(self, api_client):
        assert api_client.get("/api/orders/PKM-000000").status_code == 404

    def test_replace_line_items(self, api_client, client_details):
        order = _create(api_client, client_details)
        item = dict(order["line_items"][0], quantity=200, unit_price=1.0)
        response = api_client.put(f"/api/orders/{order['id']}/line-items", json={"line_items": [item]})
        assert response.status_code == 200
        assert response.json()["total_price"] == 200.0
        assert response.json()["total_weight"] == 10000.0

        empty = api_client.put(f"/api/orders/{order['id']}/line-items", json={"line_items": []})
        assert empty.status_code == 400

    def test_status_missing_tracking(self, api_client, client_details):
        order = _create(api_client, client_details)
        response = api_client.patch(
            f"/api/orders/{order['id']}/status",
            json={"status": "Shipped", "shipping_info": {"carrier": "Yalidine", "tracking_number": ""}},
        )
        assert response.status_code == 400
        assert api_client.get(f"/api/orders/{order['id']}").json()["status"] == "Pending"

    def test_status_shipped_via_integrated_carrier(self, api_client, client_details, carrier_requests):
        order = _create(api_client, client_details)
        response = api_client.patch(
            f"/api/orders/{order['id']}/status",
            json={"status": "Shipped", "shipping_info": {"carrier": "ZR Express"}},
        )
        assert response.status_code == 200
        assert response.json()["shipping_info"]["tracking_number"] == "ZR-12345"
        assert len(carrier_requests) == 1

    def test_timeline(self, api_client, client_details):
        order = _create(api_client, client_details)
        timeline = api_client.get(f"/api/orders/{order['id']}/timeline").json()
        assert timeline["position"] == 0
        assert timeline["steps"][0] == "Pending"
        assert timeline["steps"][-1] == "Completed"
        assert timeline["closed"] is False

        api_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Cancelled"})
        timeline = api_client.get(f"/api/orders/{order['id']}/timeline").json()
        assert timeline["status"] == "Cancelled"
        assert timeline["position"] == -1
        assert timeline["closed"] is True

        assert api_client.get("/api/orders/PKM-000000/timeline").status_code == 404

    def test_status_invalid_value(self, api_client, client_details):
        order = _create(api_client, client_details)
        response = api_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Lost"})
        assert response.status_code == 422

    def test_ship_and_refresh(self, api_client, client_details, set_carrier, sender):
        order = _create(api_client, client_details)
        response = api_client.post(f"/api/orders/{order['id']}/ship", json={"carrier_id": "zr-express"})
        assert response.status_code == 200
        assert response.json()["shipping_info"]["tracking_number"] == "ZR-12345"
        assert any("Has Shipped" in message["subject"] for message in sender.sent)

        set_carrier(lambda request: httpx.Response(200, json={"status": "delivered"}))
        refreshed = api_client.post(f"/api/orders/{order['id']}/tracking/refresh")
        assert refreshed.json()["status"] == "Completed"

    def test_ship_integration_failure(self, api_client, client_details, set_carrier):
        order = _create(api_client, client_details)
        set_carrier(lambda request: httpx.Response(500))
        response = api_client.post(f"/api/orders/{order['id']}/ship", json={"carrier_id": "zr-express"})
        assert response.status_code == 502

    def test_ship_unknown_carrier(self, api_client, client_details):
        order = _create(api_client, client_details)
        response = api_client.post(f"/api/orders/{order['id']}/ship", json={"carrier_id": "nope"})
        assert response.status_code == 404

    def test_refresh_without_tracking(self, api_client, client_details):
        order = _create(api_client, client_details)
        assert api_client.post(f"/api/orders/{order['id']}/tracking/refresh").status_code == 409

    def test_bulk_status(self, api_client, client_details):
        first = _create(api_client, client_details)
        second = _create(api_client, client_details)
        response = api_client.post(
            "/api/orders/bulk-status",
            json={"order_ids": [first["id"], second["id"], "PKM-GHOST0"], "status": "Printing"},
        )
        assert response.status_code == 204
        for order in (first, second):
            assert api_client.get(f"/api/orders/{order['id']}").json()["status"] == "Printing"

    def test_list_by_user(self, api_client, client_details):
        response = api_client.post(
            "/api/orders",
            json={
                "client_details": client_details.model_dump(),
                "cart_items": [_cart_item(client_details)],
                "user_id": "u-9",
            },
        )
        order_id = response.json()["id"]
        _create(api_client, client_details)
        items = api_client.get("/api/orders", params={"user_id": "u-9"}).json()["items"]
        assert [item["id"] for item in items] == [order_id]


class TestShippingAndHealth:
    def test_carriers(self, api_client):
        carriers = {item["id"]: item for item in api_client.get("/api/shipping/carriers").json()}
        assert carriers["zr-express"]["requires_manual_tracking"] is False
        assert carriers["yalidine"]["requires_manual_tracking"] is True
        assert "api" not in carriers["zr-express"]

    def test_health(self, api_client):
        assert api_client.get("/api/health").json()["status"] == "ok"
