"""
StoreCatalog — source of truth for store currency and product prices.

Public lookups hide disabled stores and inactive products: a disabled store
and a missing store both come back as None.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlalchemy import Row, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog._types import (
    ProductPrice,
    ProductPublic,
    StorePricing,
    StorePublic,
    normalize_currency,
)
from storefront.db import Database, ProductTable, StoreTable
from storefront.tenancy import normalize_slug


_PUBLIC_STORE_COLUMNS = (
    StoreTable.id,
    StoreTable.slug,
    StoreTable.name,
    StoreTable.currency,
    StoreTable.primary_color,
    StoreTable.logo_url,
)

_PUBLIC_PRODUCT_COLUMNS = (
    ProductTable.id,
    ProductTable.title,
    ProductTable.description,
    ProductTable.price_cents,
    ProductTable.currency,
)


def _public_product(row: Row[Any]) -> ProductPublic:
    return ProductPublic(
        id=row.id,
        title=row.title,
        description=row.description,
        price_cents=row.price_cents,
        currency=normalize_currency(row.currency),
    )


class StoreCatalog:
    def __init__(self, db: Database) -> None:
        self._db = db

    # ───────────────────────────────────────────────────────────────────────────
    # Public reads
    # ───────────────────────────────────────────────────────────────────────────

    async def get_enabled_store(self, slug: str) -> StorePublic | None:
        """Public store meta by slug, only if enabled."""
        stmt = (
            select(*_PUBLIC_STORE_COLUMNS)
            .where(StoreTable.slug == normalize_slug(slug), StoreTable.is_enabled.is_(True))
            .limit(1)
        )
        async with self._db.session() as session:
            row = (await session.execute(stmt)).one_or_none()

        if row is None:
            return None
        return StorePublic(
            id=row.id,
            slug=row.slug,
            name=row.name,
            currency=normalize_currency(row.currency),
            primary_color=row.primary_color,
            logo_url=row.logo_url,
        )

    async def resolve_enabled_store_id(self, slug: str | None) -> UUID | None:
        s = normalize_slug(slug)
        if not s:
            return None

        stmt = (
            select(StoreTable.id)
            .where(StoreTable.slug == s, StoreTable.is_enabled.is_(True))
            .limit(1)
        )
        async with self._db.session() as session:
            return (await session.execute(stmt)).scalar_one_or_none()

    async def list_public_products(self, slug: str) -> list[ProductPublic]:
        """Active products of an enabled store, newest first."""
        stmt = (
            select(*_PUBLIC_PRODUCT_COLUMNS)
            .join(StoreTable, StoreTable.id == ProductTable.store_id)
            .where(
                StoreTable.slug == normalize_slug(slug),
                StoreTable.is_enabled.is_(True),
                ProductTable.is_active.is_(True),
            )
            .order_by(ProductTable.created_at.desc())
        )
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).all()
        return [_public_product(row) for row in rows]

    async def get_public_product(self, slug: str, product_id: UUID) -> ProductPublic | None:
        """None if the store is disabled, or the product is missing or inactive."""
        stmt = (
            select(*_PUBLIC_PRODUCT_COLUMNS)
            .join(StoreTable, StoreTable.id == ProductTable.store_id)
            .where(
                StoreTable.slug == normalize_slug(slug),
                StoreTable.is_enabled.is_(True),
                ProductTable.is_active.is_(True),
                ProductTable.id == product_id,
            )
            .limit(1)
        )
        async with self._db.session() as session:
            row = (await session.execute(stmt)).one_or_none()
        return None if row is None else _public_product(row)

    # ───────────────────────────────────────────────────────────────────────────
    # Checkout reads (caller's transaction)
    # ───────────────────────────────────────────────────────────────────────────

    async def store_pricing(self, session: AsyncSession, store_id: UUID) -> StorePricing | None:
        stmt = (
            select(StoreTable.currency, StoreTable.is_enabled)
            .where(StoreTable.id == store_id)
            .limit(1)
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return StorePricing(
            currency=normalize_currency(row.currency),
            is_enabled=row.is_enabled is True,
        )

    async def product_prices(
        self,
        session: AsyncSession,
        store_id: UUID,
        product_ids: Iterable[UUID],
    ) -> dict[UUID, ProductPrice]:
        """Prices for the given ids that belong to the store. Misses are absent."""
        ids = list(product_ids)
        if not ids:
            return {}

        stmt = select(
            ProductTable.id, ProductTable.price_cents, ProductTable.currency
        ).where(ProductTable.store_id == store_id, ProductTable.id.in_(ids))
        rows = (await session.execute(stmt)).all()

        return {
            row.id: ProductPrice(
                id=row.id,
                price_cents=row.price_cents,
                currency=(row.currency or "").strip().lower(),
            )
            for row in rows
        }


__all__ = ("StoreCatalog",)
