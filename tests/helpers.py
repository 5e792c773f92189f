"""Shared test helpers: Result unwrapping and seed data."""

import uuid
from dataclasses import dataclass

import pytest
from kungfu import Error, Ok
from sqlalchemy import update

from storefront import DomainError, Storefront
from storefront.catalog import Product, Store
from storefront.db import Database, OrderTable, ProductTable
from storefront.orders import LineItem, Order


def ok(result):
    """Value of an Ok; fails the test on Error."""
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"expected Ok, got {e!r}")


def err(result) -> DomainError:
    """Error of an Error; fails the test on Ok."""
    match result:
        case Error(e):
            return e
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")


@dataclass
class Seeded:
    store: Store
    a: Product  # 1000 cents
    b: Product  # 2500 cents, has a delivery_url


async def seed_store(
    sf: Storefront,
    slug: str = "demo",
    *,
    currency: str = "usd",
    enabled: bool = True,
) -> Seeded:
    store = ok(await sf.admin.create_store(slug, f"{slug} shop", currency))
    a = ok(await sf.admin.create_product(store.id, title="Poster", price_cents=1000))
    b = ok(
        await sf.admin.create_product(
            store.id,
            title="Ebook",
            price_cents=2500,
            delivery_url="https://files.example.com/ebook.pdf",
        )
    )
    if enabled:
        store = ok(await sf.admin.enable_store(store.id))
    return Seeded(store=store, a=a, b=b)


async def insert_product(
    db: Database,
    store_id: uuid.UUID,
    *,
    currency: str,
    price_cents: int = 500,
) -> uuid.UUID:
    """Write a product row directly, bypassing admin rules."""
    async with db.session() as session:
        row = ProductTable(
            id=uuid.uuid4(),
            store_id=store_id,
            title="Imported",
            price_cents=price_cents,
            currency=currency,
        )
        session.add(row)
        await session.commit()
        return row.id


async def place_order(sf: Storefront, seeded: Seeded, qty: int = 1) -> Order:
    return ok(await sf.orders.create_order(seeded.store.id, [LineItem(seeded.a.id, qty)]))


async def force_status(db: Database, order_id: uuid.UUID, status: str) -> None:
    """Overwrite an order's status directly."""
    async with db.session() as session:
        await session.execute(
            update(OrderTable).where(OrderTable.id == order_id).values(status=status)
        )
        await session.commit()
