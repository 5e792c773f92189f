"""Tests for order listing and detail reads."""

import uuid
from datetime import datetime, timedelta

import pytest

from helpers import err, ok, place_order, seed_store
from storefront import ErrorKind
from storefront.db import OrderTable
from storefront.orders import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT, clamp_limit


async def insert_orders(db, store_id, count: int) -> list[uuid.UUID]:
    """Orders one minute apart, oldest first."""
    start = datetime(2024, 1, 1, 12, 0, 0)
    ids = [uuid.uuid4() for _ in range(count)]
    async with db.session() as session:
        session.add_all(
            OrderTable(
                id=order_id,
                store_id=store_id,
                status="pending",
                total_cents=100,
                currency="usd",
                created_at=start + timedelta(minutes=i),
                updated_at=start + timedelta(minutes=i),
            )
            for i, order_id in enumerate(ids)
        )
        await session.commit()
    return ids


class TestClampLimit:
    def test_default(self):
        assert ok(clamp_limit(None)) == DEFAULT_LIST_LIMIT == 50

    def test_clamped(self):
        assert ok(clamp_limit(500)) == MAX_LIST_LIMIT == 100

    def test_within_range(self):
        assert ok(clamp_limit(7)) == 7

    @pytest.mark.parametrize("limit", [0, -5, True, 2.5, "10"])
    def test_invalid(self, limit):
        assert err(clamp_limit(limit)).kind is ErrorKind.BAD_REQUEST


class TestListOrders:
    async def test_newest_first(self, sf, db, seeded):
        ids = await insert_orders(db, seeded.store.id, 3)
        orders = ok(await sf.queries.list_orders(seeded.store.id))
        assert [o.id for o in orders] == list(reversed(ids))

    async def test_limit(self, sf, db, seeded):
        ids = await insert_orders(db, seeded.store.id, 5)
        orders = ok(await sf.queries.list_orders(seeded.store.id, 2))
        assert [o.id for o in orders] == [ids[4], ids[3]]

    async def test_default_limit(self, sf, db, seeded):
        await insert_orders(db, seeded.store.id, DEFAULT_LIST_LIMIT + 5)
        orders = ok(await sf.queries.list_orders(seeded.store.id))
        assert len(orders) == DEFAULT_LIST_LIMIT

    async def test_limit_is_clamped(self, sf, db, seeded):
        await insert_orders(db, seeded.store.id, MAX_LIST_LIMIT + 5)
        orders = ok(await sf.queries.list_orders(seeded.store.id, 1000))
        assert len(orders) == MAX_LIST_LIMIT

    async def test_invalid_limit(self, sf, seeded):
        e = err(await sf.queries.list_orders(seeded.store.id, 0))
        assert e.kind is ErrorKind.BAD_REQUEST

    async def test_scoped_to_store(self, sf, seeded):
        other = await seed_store(sf, "other")
        await place_order(sf, other)
        assert ok(await sf.queries.list_orders(seeded.store.id)) == []


class TestOrderDetail:
    async def test_items_carry_titles(self, sf, seeded):
        order = await place_order(sf, seeded, qty=3)
        detail = ok(await sf.queries.get_order_detail(seeded.store.id, order.id))

        assert detail.order.id == order.id
        assert detail.order.total_cents == 3000
        assert len(detail.items) == 1
        item = detail.items[0]
        assert item.title == "Poster"
        assert item.quantity == 3
        assert item.line_total_cents == 3000

    async def test_missing_order(self, sf, seeded):
        e = err(await sf.queries.get_order_detail(seeded.store.id, uuid.uuid4()))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_order_of_another_store(self, sf, seeded):
        other = await seed_store(sf, "other")
        order = await place_order(sf, other)
        e = err(await sf.queries.get_order_detail(seeded.store.id, order.id))
        assert e.kind is ErrorKind.NOT_FOUND
