"""HTTP surface: status codes, error bodies, tenant routes."""

import uuid

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from helpers import force_status, ok, place_order, seed_store
from storefront.api import create_app
from storefront.orders import MAX_QUANTITY


@pytest.fixture
async def client(sf, settings):
    app = create_app(sf, settings)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


def order_body(*lines) -> dict:
    return {"items": [{"product_id": str(pid), "quantity": qty} for pid, qty in lines]}


class TestHealth:
    async def test_ok(self, client):
        r = await client.get("/api/health")
        assert r.status_code == 200
        assert r.json()["db"] == "ok"

    async def test_db_down(self, client, sf, monkeypatch):
        async def down() -> bool:
            return False

        monkeypatch.setattr(sf.db, "ping", down)
        r = await client.get("/api/health")
        assert r.status_code == 503
        assert r.json()["db"] == "fail"


class TestStoresApi:
    async def test_create_store(self, client):
        r = await client.post("/api/stores", json={"slug": "new-shop", "name": "New Shop"})
        assert r.status_code == 201
        store = r.json()["store"]
        assert store["slug"] == "new-shop"
        assert store["is_enabled"] is False

    async def test_reserved_slug(self, client):
        r = await client.post("/api/stores", json={"slug": "admin", "name": "Admin"})
        assert r.status_code == 400
        assert r.json()["message"] == "slug is reserved"

    async def test_duplicate_slug(self, client, seeded):
        r = await client.post("/api/stores", json={"slug": "demo", "name": "Again"})
        assert r.status_code == 409
        assert r.json()["code"] == "CONFLICT"

    async def test_invalid_body(self, client):
        r = await client.post("/api/stores", json={"slug": "ok-slug", "name": "x"})
        body = r.json()
        assert r.status_code == 400
        assert body["error"] is True
        assert body["code"] == "BAD_REQUEST"
        assert body["path"] == "/api/stores"
        assert body["issues"]

    async def test_enable(self, client, sf):
        store = ok(await sf.admin.create_store("later", "Later"))
        r = await client.patch(f"/api/stores/{store.id}/enable")
        assert r.status_code == 200
        assert r.json()["store"]["is_enabled"] is True

    async def test_enable_missing(self, client):
        r = await client.patch(f"/api/stores/{uuid.uuid4()}/enable")
        assert r.status_code == 404

    async def test_invalid_store_id(self, client):
        r = await client.patch("/api/stores/not-a-uuid/enable")
        assert r.status_code == 400

    async def test_settings_round(self, client, seeded):
        url = f"/api/stores/{seeded.store.id}/settings"
        r = await client.patch(url, json={"primary_color": "#AABBCC"})
        assert r.status_code == 200
        assert (await client.get(url)).json()["store"]["primary_color"] == "#AABBCC"

    async def test_bad_color(self, client, seeded):
        r = await client.patch(
            f"/api/stores/{seeded.store.id}/settings", json={"primary_color": "red"}
        )
        assert r.status_code == 400

    async def test_currency_locked(self, client, seeded):
        r = await client.patch(f"/api/stores/{seeded.store.id}/settings", json={"currency": "eur"})
        assert r.status_code == 409


class TestProductsApi:
    async def test_create_and_list(self, client, seeded):
        url = f"/api/stores/{seeded.store.id}/products"
        r = await client.post(url, json={"title": "Sticker", "price_cents": 300})
        assert r.status_code == 201
        assert r.json()["product"]["currency"] == "usd"

        listed = (await client.get(url)).json()["products"]
        assert len(listed) == 3
        assert any(p["delivery_url"] for p in listed)

    async def test_negative_price(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/products", json={"title": "Bad", "price_cents": -1}
        )
        assert r.status_code == 400

    async def test_price_too_large(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/products",
            json={"title": "Bad", "price_cents": 10**19},
        )
        assert r.status_code == 400

    async def test_currency_mismatch(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/products",
            json={"title": "Euro thing", "price_cents": 100, "currency": "eur"},
        )
        assert r.status_code == 400


class TestCheckoutApi:
    async def test_by_store_id(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/orders",
            json=order_body((seeded.a.id, 2), (seeded.b.id, 1)),
        )
        assert r.status_code == 201
        assert r.json()["order"]["total_cents"] == 4500

    async def test_by_slug(self, client, seeded):
        r = await client.post("/api/store/DEMO/orders", json=order_body((seeded.a.id, 1)))
        assert r.status_code == 201

    async def test_by_bad_slug(self, client, seeded):
        r = await client.post("/api/store/x/orders", json=order_body((seeded.a.id, 1)))
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid store slug"

    async def test_by_host(self, client, seeded):
        r = await client.post(
            "/api/storefront/orders",
            json=order_body((seeded.a.id, 1)),
            headers={"host": "demo.example.com"},
        )
        assert r.status_code == 201
        assert r.json()["order"]["store_id"] == str(seeded.store.id)

    async def test_host_without_tenant(self, client, seeded):
        r = await client.post("/api/storefront/orders", json=order_body((seeded.a.id, 1)))
        assert r.status_code == 400
        assert r.json()["message"] == "Missing tenant Host subdomain"

    async def test_reserved_host(self, client, seeded):
        r = await client.post(
            "/api/storefront/orders",
            json=order_body((seeded.a.id, 1)),
            headers={"host": "www.example.com"},
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid tenant Host subdomain"

    async def test_disabled_store_is_404(self, client, sf):
        hidden = await seed_store(sf, "hidden", enabled=False)
        by_id = await client.post(
            f"/api/stores/{hidden.store.id}/orders", json=order_body((hidden.a.id, 1))
        )
        by_slug = await client.post("/api/store/hidden/orders", json=order_body((hidden.a.id, 1)))
        missing = await client.post(
            f"/api/stores/{uuid.uuid4()}/orders", json=order_body((hidden.a.id, 1))
        )

        assert by_id.status_code == by_slug.status_code == missing.status_code == 404
        assert by_id.json()["message"] == missing.json()["message"]

    async def test_unknown_product(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/orders", json=order_body((uuid.uuid4(), 1))
        )
        assert r.status_code == 400

    async def test_huge_quantity(self, client, seeded):
        r = await client.post(
            f"/api/stores/{seeded.store.id}/orders", json=order_body((seeded.a.id, 10**19))
        )
        assert r.status_code == 400
        assert r.json()["code"] == "BAD_REQUEST"

    async def test_merged_quantity_over_cap(self, client, seeded):
        half = MAX_QUANTITY // 2 + 1
        r = await client.post(
            f"/api/stores/{seeded.store.id}/orders",
            json=order_body((seeded.a.id, half), (seeded.a.id, half)),
        )
        assert r.status_code == 400
        assert r.json()["message"] == f"quantity must not exceed {MAX_QUANTITY}"

    @pytest.mark.parametrize(
        "body",
        [
            {"items": []},
            {"items": [{"product_id": "nope", "quantity": 1}]},
            {"items": [{"product_id": str(uuid.uuid4()), "quantity": 0}]},
            {},
        ],
    )
    async def test_invalid_body(self, client, seeded, body):
        r = await client.post(f"/api/stores/{seeded.store.id}/orders", json=body)
        assert r.status_code == 400
        assert r.json()["code"] == "BAD_REQUEST"


class TestCatalogApi:
    async def test_meta_by_slug(self, client, seeded):
        r = await client.get("/api/store/demo/meta")
        assert r.status_code == 200
        assert r.json()["store"]["slug"] == "demo"
        assert "is_enabled" not in r.json()["store"]

    async def test_meta_of_disabled_store(self, client, sf):
        await seed_store(sf, "hidden", enabled=False)
        assert (await client.get("/api/store/hidden/meta")).status_code == 404

    async def test_products_hide_delivery_url(self, client, seeded):
        products = (await client.get("/api/store/demo/products")).json()["products"]
        assert len(products) == 2
        assert all("delivery_url" not in p for p in products)

    async def test_single_product(self, client, seeded):
        r = await client.get(f"/api/store/demo/products/{seeded.b.id}")
        assert r.status_code == 200
        assert "delivery_url" not in r.json()["product"]

    async def test_missing_product(self, client, seeded):
        r = await client.get(f"/api/store/demo/products/{uuid.uuid4()}")
        assert r.status_code == 404

    async def test_host_routes(self, client, seeded):
        headers = {"host": "demo.example.com:8443"}
        meta = await client.get("/api/storefront/meta", headers=headers)
        products = await client.get("/api/storefront/products", headers=headers)
        product = await client.get(f"/api/storefront/products/{seeded.a.id}", headers=headers)

        assert meta.json()["store"]["id"] == str(seeded.store.id)
        assert len(products.json()["products"]) == 2
        assert product.json()["product"]["price_cents"] == 1000

    async def test_host_route_unknown_store(self, client, seeded):
        r = await client.get("/api/storefront/meta", headers={"host": "nope.example.com"})
        assert r.status_code == 404


class TestOrdersApi:
    async def test_list(self, client, sf, seeded):
        await place_order(sf, seeded)
        r = await client.get(f"/api/stores/{seeded.store.id}/orders")
        assert r.status_code == 200
        assert len(r.json()["orders"]) == 1

    @pytest.mark.parametrize("limit", ["0", "-1", "abc", "1.5"])
    async def test_list_bad_limit(self, client, seeded, limit):
        r = await client.get(f"/api/stores/{seeded.store.id}/orders", params={"limit": limit})
        assert r.status_code == 400

    async def test_detail(self, client, sf, seeded):
        order = await place_order(sf, seeded, qty=2)
        r = await client.get(f"/api/stores/{seeded.store.id}/orders/{order.id}")
        body = r.json()
        assert r.status_code == 200
        assert body["order"]["id"] == str(order.id)
        assert body["items"][0]["title"] == "Poster"

    async def test_detail_missing(self, client, seeded):
        r = await client.get(f"/api/stores/{seeded.store.id}/orders/{uuid.uuid4()}")
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    async def test_mark_paid_twice(self, client, sf, seeded):
        order = await place_order(sf, seeded)
        url = f"/api/stores/{seeded.store.id}/orders/{order.id}/mark-paid"

        first = await client.patch(url)
        second = await client.patch(url)

        assert (first.status_code, second.status_code) == (200, 200)
        assert (first.json()["changed"], second.json()["changed"]) == (True, False)
        assert second.json()["order"]["status"] == "paid"

    async def test_mark_paid_invalid_state(self, client, sf, db, seeded):
        order = await place_order(sf, seeded)
        await force_status(db, order.id, "failed")

        r = await client.patch(f"/api/stores/{seeded.store.id}/orders/{order.id}/mark-paid")

        assert r.status_code == 409
        assert r.json()["code"] == "INVALID_STATE"
        assert r.json()["status"] == "failed"

    async def test_payment_intent_flow(self, client, sf, seeded):
        first = await place_order(sf, seeded)
        second = await place_order(sf, seeded)
        base = f"/api/stores/{seeded.store.id}/orders"
        pi = {"stripe_payment_intent_id": "pi_12345"}

        bound = await client.patch(f"{base}/{first.id}/attach-payment-intent", json=pi)
        again = await client.patch(f"{base}/{first.id}/attach-payment-intent", json=pi)
        other = await client.patch(
            f"{base}/{first.id}/attach-payment-intent",
            json={"stripe_payment_intent_id": "pi_67890"},
        )
        in_use = await client.patch(f"{base}/{second.id}/attach-payment-intent", json=pi)

        assert bound.status_code == again.status_code == 200
        assert bound.json()["ok"] is True
        assert (bound.json()["changed"], again.json()["changed"]) == (True, False)
        assert other.status_code == 409
        assert other.json()["code"] == "CONFLICT"
        assert in_use.status_code == 409
        assert in_use.json()["code"] == "CONFLICT_PI_IN_USE"

        paid = await client.patch(f"{base}/mark-paid-by-payment-intent", json=pi)
        assert paid.status_code == 200
        assert paid.json()["order"]["id"] == str(first.id)
        assert paid.json()["changed"] is True

    async def test_short_intent(self, client, sf, seeded):
        order = await place_order(sf, seeded)
        r = await client.patch(
            f"/api/stores/{seeded.store.id}/orders/{order.id}/attach-payment-intent",
            json={"stripe_payment_intent_id": "pi"},
        )
        assert r.status_code == 400

    async def test_mark_paid_by_unknown_intent(self, client, seeded):
        r = await client.patch(
            f"/api/stores/{seeded.store.id}/orders/mark-paid-by-payment-intent",
            json={"stripe_payment_intent_id": "pi_unknown"},
        )
        assert r.status_code == 404
        assert r.json()["message"] == "Order not found for that payment intent"


class TestStorageUnavailable:
    async def test_operational_error_is_503(self, client, sf, seeded, monkeypatch):
        async def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(sf.queries, "list_orders", broken)
        r = await client.get(f"/api/stores/{seeded.store.id}/orders")

        assert r.status_code == 503
        assert r.json()["code"] == "UNAVAILABLE"
