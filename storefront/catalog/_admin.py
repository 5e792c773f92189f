"""
StoreAdmin — administrative writes for stores and products.

Currency freeze: once any product exists for a store, its currency can no
longer change. The check is part of the UPDATE itself. Both the settings
update and product creation first lock the store row (SELECT ... FOR UPDATE),
so a product never takes a currency that is being changed under it.
"""

from __future__ import annotations

import uuid
from uuid import UUID

import structlog
from kungfu import Error, Ok
from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront._types import MAX_CENTS, DomainError, Errors, Outcome, utcnow
from storefront.catalog._types import (
    DEFAULT_CURRENCY,
    Product,
    Store,
    StoreSettings,
    normalize_currency,
)
from storefront.db import Database, ProductTable, StoreTable, is_unique_violation, rowcount
from storefront.tenancy import is_reserved_slug, is_valid_slug, normalize_slug

logger = structlog.get_logger(__name__)


class StoreAdmin:
    def __init__(self, db: Database) -> None:
        self._db = db

    # ───────────────────────────────────────────────────────────────────────────
    # Stores
    # ───────────────────────────────────────────────────────────────────────────

    async def create_store(
        self,
        slug: str,
        name: str,
        currency: str | None = None,
    ) -> Outcome[Store]:
        """Create a store. New stores start disabled."""
        s = normalize_slug(slug)
        if not is_valid_slug(s):
            return Error(
                Errors.bad_request("slug must be 2-63 lowercase letters, numbers, or hyphens")
            )
        if is_reserved_slug(s):
            return Error(Errors.bad_request("slug is reserved"))

        now = utcnow()
        row = StoreTable(
            id=uuid.uuid4(),
            slug=s,
            name=name.strip(),
            currency=normalize_currency(currency, DEFAULT_CURRENCY),
            is_enabled=False,
            created_at=now,
            updated_at=now,
        )

        async with self._db.session() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if is_unique_violation(e):
                    logger.info("store_slug_taken", slug=s)
                    return Error(Errors.conflict("Store slug already exists"))
                raise

        logger.info("store_created", store_id=str(row.id), slug=s)
        return Ok(Store.from_row(row))

    async def enable_store(self, store_id: UUID) -> Outcome[Store]:
        return await self._set_enabled(store_id, True)

    async def disable_store(self, store_id: UUID) -> Outcome[Store]:
        return await self._set_enabled(store_id, False)

    async def _set_enabled(self, store_id: UUID, enabled: bool) -> Outcome[Store]:
        stmt = (
            update(StoreTable)
            .where(StoreTable.id == store_id)
            .values(is_enabled=enabled, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        async with self._db.session() as session:
            if rowcount(await session.execute(stmt)) == 0:
                return Error(Errors.not_found("Store not found"))
            await session.commit()
            row = await session.get(StoreTable, store_id, populate_existing=True)

        if row is None:
            return Error(Errors.not_found("Store not found"))
        logger.info("store_enabled_changed", store_id=str(store_id), is_enabled=enabled)
        return Ok(Store.from_row(row))

    async def get_store_settings(self, store_id: UUID) -> Outcome[StoreSettings]:
        async with self._db.session() as session:
            row = await session.get(StoreTable, store_id)
        if row is None:
            return Error(Errors.not_found("Store not found"))
        return Ok(StoreSettings.from_row(row))

    async def update_store_settings(
        self,
        store_id: UUID,
        *,
        name: str | None = None,
        currency: str | None = None,
        primary_color: str | None = None,
        logo_url: str | None = None,
    ) -> Outcome[StoreSettings]:
        """
        Update branding and currency.

        A currency change is only written while the store has no products.
        """
        values: dict[str, object] = {}
        if name is not None:
            values["name"] = name.strip()
        if primary_color is not None:
            values["primary_color"] = primary_color
        if logo_url is not None:
            values["logo_url"] = logo_url

        async with self._db.session() as session:
            # Row lock on the store: product creation takes the same lock.
            current = await session.get(StoreTable, store_id, with_for_update=True)
            if current is None:
                return Error(Errors.not_found("Store not found"))

            stmt = update(StoreTable).where(StoreTable.id == store_id)

            new_currency = normalize_currency(currency) if currency is not None else None
            if new_currency is not None and new_currency != normalize_currency(current.currency):
                values["currency"] = new_currency
                stmt = stmt.where(
                    StoreTable.currency == current.currency,
                    ~exists().where(ProductTable.store_id == store_id),
                )

            if values:
                values["updated_at"] = utcnow()
                result = await session.execute(
                    stmt.values(**values).execution_options(synchronize_session=False)
                )
                if rowcount(result) == 0:
                    await session.rollback()
                    return Error(await self._classify_settings_miss(session, store_id))
                await session.commit()

            row = await session.get(StoreTable, store_id, populate_existing=True)

        if row is None:
            return Error(Errors.not_found("Store not found"))
        return Ok(StoreSettings.from_row(row))

    async def _classify_settings_miss(self, session: AsyncSession, store_id: UUID) -> DomainError:
        """Re-read after a settings UPDATE that matched no row."""
        row = await session.get(StoreTable, store_id, populate_existing=True)
        if row is None:
            return Errors.not_found("Store not found")
        has_products = (
            await session.execute(select(exists().where(ProductTable.store_id == store_id)))
        ).scalar_one()
        if has_products:
            logger.warning("store_currency_locked", store_id=str(store_id))
            return Errors.conflict("Store currency is locked once products exist")
        logger.warning("store_settings_raced", store_id=str(store_id), currency=row.currency)
        return Errors.conflict("Store currency changed concurrently")

    # ───────────────────────────────────────────────────────────────────────────
    # Products
    # ───────────────────────────────────────────────────────────────────────────

    async def create_product(
        self,
        store_id: UUID,
        *,
        title: str,
        price_cents: int,
        currency: str | None = None,
        description: str | None = None,
        is_active: bool = True,
        delivery_url: str | None = None,
    ) -> Outcome[Product]:
        """
        Create a product for a store.

        The product always takes the store's currency; a different explicit
        currency is rejected.
        """
        if price_cents < 0:
            return Error(Errors.bad_request("price_cents must be a non-negative integer"))
        if price_cents > MAX_CENTS:
            return Error(Errors.bad_request(f"price_cents must not exceed {MAX_CENTS}"))

        async with self._db.session() as session:
            store_currency = (
                await session.execute(
                    select(StoreTable.currency)
                    .where(StoreTable.id == store_id)
                    .with_for_update()
                )
            ).scalar_one_or_none()
            if store_currency is None:
                return Error(Errors.not_found("Store not found"))

            final_currency = normalize_currency(store_currency)
            if currency and normalize_currency(currency) != final_currency:
                return Error(Errors.bad_request("Product currency must match store currency"))

            now = utcnow()
            row = ProductTable(
                id=uuid.uuid4(),
                store_id=store_id,
                title=title.strip(),
                description=description,
                price_cents=price_cents,
                currency=final_currency,
                is_active=is_active,
                delivery_url=delivery_url,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            await session.commit()

        logger.info("product_created", store_id=str(store_id), product_id=str(row.id))
        return Ok(Product.from_row(row))

    async def list_products(self, store_id: UUID) -> list[Product]:
        """All products of a store (admin view), newest first."""
        stmt = (
            select(ProductTable)
            .where(ProductTable.store_id == store_id)
            .order_by(ProductTable.created_at.desc())
        )
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [Product.from_row(row) for row in rows]


__all__ = ("StoreAdmin",)
