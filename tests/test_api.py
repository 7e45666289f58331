"""
API tests for the cart, checkout and admin endpoints
"""
from unittest.mock import AsyncMock, MagicMock
import pytest
from urllib.parse import unquote

from fastapi import WebSocketDisconnect
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.api.deps import get_cart_store
from storefront.config import settings
from storefront.main import app
from storefront.services.cart_service import CartStore

PREFIX = "/api/v1"


def add(client, headers, product_id, quantity=1, variant_key=None):
    return client.post(
        f"{PREFIX}/cart/items",
        json={"product_id": product_id, "quantity": quantity, "variant_key": variant_key},
        headers=headers,
    )


class TestCartAPI:

    def test_requires_session_header(self, client):
        response = client.get(f"{PREFIX}/cart")
        assert response.status_code == 422

    def test_empty_cart(self, client, cart_headers):
        response = client.get(f"{PREFIX}/cart", headers=cart_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["breakdown"] == {
            "subtotal": 0, "shipping_total": 0, "shipping_line_items": [], "grand_total": 0
        }
        assert data["tax_disclaimer"] == "GST not included"

    def test_add_and_price(self, client, cart_headers):
        assert add(client, cart_headers, "ring", 3).status_code == 200

        data = client.get(f"{PREFIX}/cart", headers=cart_headers).json()

        assert data["total_items"] == 3
        assert data["breakdown"]["subtotal"] == 1500
        assert data["breakdown"]["shipping_total"] == 300
        assert data["breakdown"]["grand_total"] == 1800

    def test_add_clamps_with_warning(self, client, cart_headers):
        response = add(client, cart_headers, "bangle", 8)

        assert response.status_code == 200
        assert response.json()["item"]["quantity"] == 5
        assert response.json()["warning"] == "Only 5 left in stock"

    def test_out_of_stock_rejected(self, client, cart_headers):
        response = add(client, cart_headers, "sold-out")

        assert response.status_code == 400
        assert response.json()["detail"] == "Product is out of stock"

    def test_unknown_product_and_variant(self, client, cart_headers):
        assert add(client, cart_headers, "missing").status_code == 404
        assert add(client, cart_headers, "anklet", variant_key="XL").status_code == 400

    def test_quantity_validation(self, client, cart_headers):
        assert add(client, cart_headers, "ring", 0).status_code == 422

    def test_large_quantity_clamped_not_rejected(self, client, cart_headers):
        response = add(client, cart_headers, "beads", 120)

        assert response.status_code == 200
        assert response.json()["item"]["quantity"] == 120
        assert response.json()["warning"] is None

    def test_quantity_above_stock_and_hundred_clamped(self, client, cart_headers):
        response = add(client, cart_headers, "beads", 500)

        assert response.status_code == 200
        assert response.json()["item"]["quantity"] == 150
        assert response.json()["warning"] == "Only 150 left in stock"

    def test_large_update_clamped(self, client, cart_headers):
        add(client, cart_headers, "ring", 1)

        response = client.patch(
            f"{PREFIX}/cart/items", json={"product_id": "ring", "quantity": 250}, headers=cart_headers
        )

        assert response.status_code == 200
        assert response.json()["item"]["quantity"] == 10
        assert response.json()["warning"] == "Only 10 left in stock"

    def test_storage_outage_returns_503(self, client, cart_headers):
        storage = MagicMock()
        storage.get_blob = AsyncMock(side_effect=RedisConnectionError("redis down"))
        app.dependency_overrides[get_cart_store] = lambda: CartStore(storage=storage)

        response = client.get(f"{PREFIX}/cart", headers=cart_headers)

        assert response.status_code == 503
        assert response.json()["detail"] == "Cart storage is temporarily unavailable"

    def test_update_and_remove(self, client, cart_headers):
        add(client, cart_headers, "anklet", 1, "S")

        updated = client.patch(
            f"{PREFIX}/cart/items",
            json={"product_id": "anklet", "variant_key": "S", "quantity": 2},
            headers=cart_headers,
        )
        assert updated.json()["item"]["quantity"] == 2

        removed = client.patch(
            f"{PREFIX}/cart/items",
            json={"product_id": "anklet", "variant_key": "S", "quantity": 0},
            headers=cart_headers,
        )
        assert removed.json()["item"] is None
        assert client.get(f"{PREFIX}/cart", headers=cart_headers).json()["items"] == []

    def test_update_missing_line(self, client, cart_headers):
        response = client.patch(
            f"{PREFIX}/cart/items", json={"product_id": "ring", "quantity": 2}, headers=cart_headers
        )
        assert response.status_code == 404

    def test_delete_variant_line(self, client, cart_headers):
        add(client, cart_headers, "anklet", 1, "S")
        add(client, cart_headers, "anklet", 1, "M")

        client.delete(f"{PREFIX}/cart/items/anklet", params={"variant_key": "S"}, headers=cart_headers)
        items = client.get(f"{PREFIX}/cart", headers=cart_headers).json()["items"]

        assert [i["variant_key"] for i in items] == ["M"]

    def test_sessions_are_isolated(self, client, cart_headers):
        add(client, cart_headers, "ring")

        other = client.get(f"{PREFIX}/cart", headers={"X-Cart-Session": "session-0002"})

        assert other.json()["items"] == []


class TestCheckoutAPI:

    def test_checkout_flow(self, client, cart_headers):
        add(client, cart_headers, "ring", 3)

        response = client.post(f"{PREFIX}/orders/checkout", headers=cart_headers)

        assert response.status_code == 200
        data = response.json()
        order_id = data["order"]["order_id"]
        assert order_id.startswith("ORD-")
        assert data["order"]["grand_total"] == 1800
        assert data["order"]["status"] == "pending"
        assert "admin_notes" not in data["order"]
        assert data["whatsapp_url"].startswith("https://wa.me/919876543210?text=")
        assert unquote(data["whatsapp_url"].split("text=", 1)[1]) == data["message"]
        assert client.get(f"{PREFIX}/cart", headers=cart_headers).json()["items"] == []

        order = client.get(f"{PREFIX}/orders/{order_id}").json()
        assert order["items"][0]["quantity"] == 3

        invoice = client.get(f"{PREFIX}/orders/{order_id}/invoice").json()
        assert invoice["shipping_label"] == "₹300"
        assert invoice["grand_total"] == 1800

        help_data = client.get(f"{PREFIX}/orders/{order_id}/help").json()
        assert "Total: ₹1,800" in help_data["message"]

    def test_empty_cart_checkout(self, client, cart_headers):
        response = client.post(f"{PREFIX}/orders/checkout", headers=cart_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Your cart is empty"

    def test_unknown_order(self, client):
        assert client.get(f"{PREFIX}/orders/ORD-0").status_code == 404


class TestAdminAPI:

    def _checkout(self, client, cart_headers):
        add(client, cart_headers, "ring", 1)
        return client.post(f"{PREFIX}/orders/checkout", headers=cart_headers).json()["order"]["order_id"]

    def test_admin_key_required(self, client):
        assert client.get(f"{PREFIX}/orders").status_code == 401
        assert client.get(f"{PREFIX}/orders", headers={"X-Admin-Key": "wrong"}).status_code == 401

    def test_admin_disabled_without_key(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_API_KEY", "")

        assert client.get(f"{PREFIX}/orders", headers=admin_headers).status_code == 403

    def test_order_management(self, client, cart_headers, admin_headers):
        order_id = self._checkout(client, cart_headers)

        listed = client.get(f"{PREFIX}/orders", headers=admin_headers).json()
        assert listed["total"] == 1

        status = client.patch(
            f"{PREFIX}/orders/{order_id}/status", json={"status": "contacted"}, headers=admin_headers
        )
        assert status.json()["status"] == "contacted"

        noted = client.post(
            f"{PREFIX}/orders/{order_id}/notes", json={"note": "Called"}, headers=admin_headers
        )
        assert noted.json()["admin_notes"].endswith("]\nCalled")

        record = client.post(f"{PREFIX}/orders/{order_id}/invoice", headers=admin_headers)
        assert record.status_code == 200
        assert record.json()["order_total"] == 600
        assert client.get(f"{PREFIX}/orders/{order_id}").json()["invoice_generated"] is True

        invoices = client.get(f"{PREFIX}/orders/invoices", headers=admin_headers).json()
        assert [i["order_id"] for i in invoices] == [order_id]

        stats = client.get(f"{PREFIX}/orders/stats", headers=admin_headers).json()
        assert stats == {"total": 1, "pending": 0, "completed": 0, "revenue": 0}

    def test_invalid_status(self, client, cart_headers, admin_headers):
        order_id = self._checkout(client, cart_headers)

        response = client.patch(
            f"{PREFIX}/orders/{order_id}/status", json={"status": "shipped"}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_reduce_stock(self, client, admin_headers):
        response = client.post(
            f"{PREFIX}/products/bangle/reduce-stock", json={"quantity": 9}, headers=admin_headers
        )

        assert response.json() == {"product_id": "bangle", "stock_count": 0, "in_stock": False}
        assert client.get(f"{PREFIX}/products/bangle").json()["in_stock"] is False

    def test_reduce_stock_missing_product(self, client, admin_headers):
        response = client.post(
            f"{PREFIX}/products/deleted/reduce-stock", json={"quantity": 1}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_settings_update_changes_pricing(self, client, cart_headers, admin_headers):
        assert client.put(
            f"{PREFIX}/settings/store", json={"free_shipping_threshold": 1000}, headers=admin_headers
        ).status_code == 200

        add(client, cart_headers, "ring", 2)
        breakdown = client.get(f"{PREFIX}/cart/totals", headers=cart_headers).json()

        assert breakdown["shipping_total"] == 0
        assert breakdown["grand_total"] == 1000

    def test_settings_update_requires_admin(self, client):
        response = client.put(f"{PREFIX}/settings/store", json={"courier_charges": 0})
        assert response.status_code == 401


def test_health(client):
    data = client.get("/health").json()

    assert data["service"] == settings.APP_NAME
    assert data["websocket_connections"]["total"] == 0


class TestAdminWebSocket:

    def test_wrong_key_closed(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws/admin?key=wrong-key") as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 1008

    def test_valid_key_joins_admin_room(self, client):
        with client.websocket_connect(f"/ws/admin?key={settings.ADMIN_API_KEY}") as websocket:
            assert websocket.receive_json()["room"] == "admin"
            websocket.send_json({"type": "ping", "timestamp": 1})
            assert websocket.receive_json() == {"type": "pong", "timestamp": 1}
