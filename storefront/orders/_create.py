"""
OrderCreation — the atomic checkout.

    1. normalize line items (merge duplicate product ids, keep first-seen order)
       quantity per product is 1..MAX_QUANTITY
    2. in ONE transaction:
         store exists and is enabled        else NOT_FOUND
         every product belongs to the store  else BAD_REQUEST
         product currency == store currency  else CONFLICT
         total = Σ catalog price × quantity   fits MAX_CENTS else BAD_REQUEST
         insert order (pending) + one item per line (price snapshot)
    3. commit on Ok, roll back otherwise

Note: a missing store and a disabled store are the same NOT_FOUND, so a
public caller cannot tell them apart.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from uuid import UUID

import structlog
from kungfu import Error, Ok
from sqlalchemy.ext.asyncio import AsyncSession

from storefront._types import MAX_CENTS, Errors, Outcome, utcnow
from storefront.catalog import StoreCatalog
from storefront.db import Database, OrderItemTable, OrderTable
from storefront.orders._types import MAX_QUANTITY, LineItem, Order, OrderStatus

logger = structlog.get_logger(__name__)


def normalize_items(items: Iterable[LineItem]) -> list[LineItem]:
    """Merge lines with the same product id by summing quantity."""
    merged: dict[UUID, int] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    # dicts keep insertion order: first-seen product order is preserved
    return [LineItem(product_id=pid, quantity=qty) for pid, qty in merged.items()]


def _validate_items(items: list[LineItem]) -> str | None:
    if not items:
        return "items must have at least 1 item"
    for item in items:
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
            return "quantity must be a positive integer"
        if item.quantity <= 0:
            return "quantity must be a positive integer"
        if item.quantity > MAX_QUANTITY:
            return _too_many()
    return None


def _too_many() -> str:
    return f"quantity must not exceed {MAX_QUANTITY}"


class OrderCreation:
    def __init__(self, db: Database, catalog: StoreCatalog) -> None:
        self._db = db
        self._catalog = catalog

    async def create_order(
        self,
        store_id: UUID,
        items: Iterable[LineItem],
        customer_user_id: UUID | None = None,
    ) -> Outcome[Order]:
        requested = list(items)
        if problem := _validate_items(requested):
            return Error(Errors.bad_request(problem))

        lines = normalize_items(requested)
        # Merged quantities are bounded too.
        if any(line.quantity > MAX_QUANTITY for line in lines):
            return Error(Errors.bad_request(_too_many()))

        async def checkout(session: AsyncSession) -> Outcome[Order]:
            return await self._checkout(session, store_id, lines, customer_user_id)

        result = await self._db.transaction(checkout)

        match result:
            case Ok(order):
                logger.info(
                    "order_created",
                    store_id=str(store_id),
                    order_id=str(order.id),
                    total_cents=order.total_cents,
                    currency=order.currency,
                    lines=len(lines),
                )
            case Error(err):
                logger.info(
                    "order_rejected",
                    store_id=str(store_id),
                    kind=err.kind.value,
                    reason=err.message,
                )
        return result

    async def create_order_for_slug(
        self,
        slug: str,
        items: Iterable[LineItem],
        customer_user_id: UUID | None = None,
    ) -> Outcome[Order]:
        """Checkout against an enabled store resolved by slug."""
        store_id = await self._catalog.resolve_enabled_store_id(slug)
        if store_id is None:
            return Error(Errors.not_found("Store not found"))
        return await self.create_order(store_id, items, customer_user_id)

    async def _checkout(
        self,
        session: AsyncSession,
        store_id: UUID,
        lines: list[LineItem],
        customer_user_id: UUID | None,
    ) -> Outcome[Order]:
        store = await self._catalog.store_pricing(session, store_id)
        if store is None or not store.is_enabled:
            return Error(Errors.not_found("Store not found"))

        prices = await self._catalog.product_prices(
            session, store_id, (line.product_id for line in lines)
        )

        for line in lines:
            price = prices.get(line.product_id)
            if price is None:
                return Error(Errors.bad_request("One or more products not found for this store"))
            if price.currency and price.currency != store.currency:
                return Error(Errors.conflict("Product currency mismatch for this store"))

        total_cents = sum(prices[line.product_id].price_cents * line.quantity for line in lines)
        if total_cents > MAX_CENTS:
            return Error(Errors.bad_request("Order total is too large"))

        now = utcnow()
        order_row = OrderTable(
            id=uuid.uuid4(),
            store_id=store_id,
            customer_user_id=customer_user_id,
            status=OrderStatus.PENDING.value,
            total_cents=total_cents,
            currency=store.currency,
            stripe_payment_intent_id=None,
            created_at=now,
            updated_at=now,
        )
        session.add(order_row)
        # Order row first: items reference it.
        await session.flush()
        session.add_all(
            OrderItemTable(
                id=uuid.uuid4(),
                order_id=order_row.id,
                product_id=line.product_id,
                line_no=line_no,
                quantity=line.quantity,
                unit_price_cents=prices[line.product_id].price_cents,
                created_at=now,
            )
            for line_no, line in enumerate(lines, start=1)
        )
        await session.flush()

        return Ok(Order.from_row(order_row))


__all__ = (
    "OrderCreation",
    "normalize_items",
)
