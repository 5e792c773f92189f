"""Tests for pending → paid transitions."""

import asyncio
import uuid

import pytest

from helpers import err, force_status, ok, place_order
from storefront import ErrorKind
from storefront.orders import _state as state_module


class TestMarkPaid:
    async def test_pending_to_paid(self, sf, seeded):
        order = await place_order(sf, seeded)
        t = ok(await sf.state_machine.mark_paid(seeded.store.id, order.id))
        assert t.changed is True
        assert t.order.status == "paid"
        assert t.order.is_paid

    async def test_winner_does_not_reread(self, sf, seeded, monkeypatch):
        order = await place_order(sf, seeded)

        async def no_reread(*args, **kwargs):
            pytest.fail("winning transition must come from the UPDATE itself")

        monkeypatch.setattr(state_module, "load_order", no_reread)

        t = ok(await sf.state_machine.mark_paid(seeded.store.id, order.id))

        assert t.changed is True
        assert t.order.id == order.id
        assert t.order.status == "paid"
        assert t.order.total_cents == order.total_cents

    async def test_second_call_is_idempotent(self, sf, seeded):
        order = await place_order(sf, seeded)
        first = ok(await sf.state_machine.mark_paid(seeded.store.id, order.id))
        second = ok(await sf.state_machine.mark_paid(seeded.store.id, order.id))

        assert first.changed is True
        assert second.changed is False
        assert second.order.status == "paid"
        assert second.order.total_cents == first.order.total_cents

    async def test_missing_order(self, sf, seeded):
        e = err(await sf.state_machine.mark_paid(seeded.store.id, uuid.uuid4()))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_order_of_another_store(self, sf, seeded):
        order = await place_order(sf, seeded)
        e = err(await sf.state_machine.mark_paid(uuid.uuid4(), order.id))
        assert e.kind is ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("status", ["failed", "refunded", "mystery"])
    async def test_other_status_is_invalid_state(self, sf, db, seeded, status):
        order = await place_order(sf, seeded)
        await force_status(db, order.id, status)

        e = err(await sf.state_machine.mark_paid(seeded.store.id, order.id))

        assert e.kind is ErrorKind.INVALID_STATE
        assert e.status == status
        assert e.message == f"Cannot mark paid from status '{status}'"

    async def test_concurrent_callers_change_exactly_once(self, sf, seeded):
        order = await place_order(sf, seeded)

        results = await asyncio.gather(
            *(sf.state_machine.mark_paid(seeded.store.id, order.id) for _ in range(5))
        )
        transitions = [ok(r) for r in results]

        assert sum(t.changed for t in transitions) == 1
        assert all(t.order.status == "paid" for t in transitions)
