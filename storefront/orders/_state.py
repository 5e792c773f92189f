"""
OrderStateMachine — pending → paid.

The transition is a compare-and-set:

    UPDATE orders SET status = 'paid'
     WHERE store_id = :store AND id = :order AND status = 'pending'

    1 row  → Transition(order, changed=True), order taken from RETURNING
    0 rows → re-read and classify:
               missing → NOT_FOUND
               paid    → Transition(order, changed=False)
               other   → INVALID_STATE(status)

Note: there is no "read status, decide, write" path. Concurrent callers
racing on the same pending order get exactly one changed=True; everybody
else sees changed=False.
"""

from __future__ import annotations

from uuid import UUID

import structlog
from kungfu import Error, Ok
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront._types import Errors, Outcome, utcnow
from storefront.db import Database, OrderTable
from storefront.orders._types import Order, OrderStatus, Transition

logger = structlog.get_logger(__name__)


async def load_order(session: AsyncSession, store_id: UUID, order_id: UUID) -> Order | None:
    """Fresh read of one order scoped to its store."""
    stmt = (
        select(OrderTable)
        .where(OrderTable.store_id == store_id, OrderTable.id == order_id)
        .limit(1)
        .execution_options(populate_existing=True)
    )
    row = (await session.execute(stmt)).scalar_one_or_none()
    return None if row is None else Order.from_row(row)


class OrderStateMachine:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def mark_paid(self, store_id: UUID, order_id: UUID) -> Outcome[Transition]:
        stmt = (
            update(OrderTable)
            .where(
                OrderTable.store_id == store_id,
                OrderTable.id == order_id,
                OrderTable.status == OrderStatus.PENDING.value,
            )
            .values(status=OrderStatus.PAID.value, updated_at=utcnow())
            .returning(OrderTable)
            .execution_options(synchronize_session=False)
        )

        async with self._db.session() as session:
            written = (await session.execute(stmt)).scalar_one_or_none()
            # The row as we wrote it, not as a later writer left it.
            paid = None if written is None else Order.from_row(written)
            await session.commit()
            if paid is not None:
                logger.info("order_paid", store_id=str(store_id), order_id=str(order_id), changed=True)
                return Ok(Transition(paid, changed=True))

            order = await load_order(session, store_id, order_id)

        if order is None:
            return Error(Errors.not_found("Order not found"))

        if order.is_paid:
            logger.info("order_paid", store_id=str(store_id), order_id=str(order_id), changed=False)
            return Ok(Transition(order, changed=False))

        logger.warning(
            "order_invalid_state",
            store_id=str(store_id),
            order_id=str(order_id),
            status=order.status,
        )
        return Error(Errors.invalid_state(order.status))


__all__ = (
    "OrderStateMachine",
    "load_order",
)
