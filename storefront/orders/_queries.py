"""Order reads — admin listing and detail."""

from __future__ import annotations

from uuid import UUID

from kungfu import Error, Ok
from sqlalchemy import select

from storefront._types import Errors, Outcome
from storefront.db import Database, OrderItemTable, OrderTable, ProductTable
from storefront.orders._state import load_order
from storefront.orders._types import Order, OrderDetail, OrderItem

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100


def clamp_limit(limit: int | None) -> Outcome[int]:
    """None → default. Must be a positive integer; capped at MAX_LIST_LIMIT."""
    if limit is None:
        return Ok(DEFAULT_LIST_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        return Error(Errors.bad_request("limit must be a positive integer"))
    return Ok(min(limit, MAX_LIST_LIMIT))


class OrderQueries:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_orders(self, store_id: UUID, limit: int | None = None) -> Outcome[list[Order]]:
        """Orders of a store, newest first."""
        match clamp_limit(limit):
            case Error(err):
                return Error(err)
            case Ok(safe_limit):
                stmt = (
                    select(OrderTable)
                    .where(OrderTable.store_id == store_id)
                    .order_by(OrderTable.created_at.desc(), OrderTable.id.desc())
                    .limit(safe_limit)
                )
                async with self._db.session() as session:
                    rows = (await session.execute(stmt)).scalars().all()
                return Ok([Order.from_row(row) for row in rows])

    async def get_order_detail(self, store_id: UUID, order_id: UUID) -> Outcome[OrderDetail]:
        async with self._db.session() as session:
            order = await load_order(session, store_id, order_id)
            if order is None:
                return Error(Errors.not_found("Order not found"))

            stmt = (
                select(OrderItemTable, ProductTable.title)
                .join(
                    ProductTable,
                    (ProductTable.id == OrderItemTable.product_id)
                    & (ProductTable.store_id == store_id),
                    isouter=True,
                )
                .where(OrderItemTable.order_id == order.id)
                .order_by(OrderItemTable.line_no.asc())
            )
            rows = (await session.execute(stmt)).all()

        items = tuple(
            OrderItem(
                id=item.id,
                order_id=item.order_id,
                product_id=item.product_id,
                line_no=item.line_no,
                quantity=item.quantity,
                unit_price_cents=item.unit_price_cents,
                title=title,
                created_at=item.created_at,
            )
            for item, title in rows
        )
        return Ok(OrderDetail(order=order, items=items))


__all__ = (
    "OrderQueries",
    "clamp_limit",
    "DEFAULT_LIST_LIMIT",
    "MAX_LIST_LIMIT",
)
