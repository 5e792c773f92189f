"""
Catalog records — stores and products at the storage boundary.

Public projections (StorePublic, ProductPublic) carry only public-safe
fields. Admin projections (Store, StoreSettings, Product) carry the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from storefront.db import ProductTable, StoreTable

DEFAULT_CURRENCY = "usd"


def normalize_currency(value: str | None, default: str = DEFAULT_CURRENCY) -> str:
    return (value or default).strip().lower()


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Store:
    id: UUID
    slug: str
    name: str
    currency: str
    is_enabled: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: StoreTable) -> Store:
        return cls(
            id=row.id,
            slug=row.slug,
            name=row.name,
            currency=normalize_currency(row.currency),
            is_enabled=row.is_enabled,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True, slots=True)
class StoreSettings:
    id: UUID
    slug: str
    name: str
    currency: str
    primary_color: str | None
    logo_url: str | None
    is_enabled: bool
    updated_at: datetime

    @classmethod
    def from_row(cls, row: StoreTable) -> StoreSettings:
        return cls(
            id=row.id,
            slug=row.slug,
            name=row.name,
            currency=normalize_currency(row.currency),
            primary_color=row.primary_color,
            logo_url=row.logo_url,
            is_enabled=row.is_enabled,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True, slots=True)
class StorePublic:
    """Public store meta. No internal flags."""

    id: UUID
    slug: str
    name: str
    currency: str
    primary_color: str | None
    logo_url: str | None


@dataclass(frozen=True, slots=True)
class StorePricing:
    """What checkout needs to know about a store."""

    currency: str
    is_enabled: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Product
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Product:
    id: UUID
    store_id: UUID
    title: str
    description: str | None
    price_cents: int
    currency: str
    is_active: bool
    delivery_url: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: ProductTable) -> Product:
        return cls(
            id=row.id,
            store_id=row.store_id,
            title=row.title,
            description=row.description,
            price_cents=row.price_cents,
            currency=normalize_currency(row.currency),
            is_active=row.is_active,
            delivery_url=row.delivery_url,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True, slots=True)
class ProductPublic:
    """Public product view. Never exposes delivery_url."""

    id: UUID
    title: str
    description: str | None
    price_cents: int
    currency: str


@dataclass(frozen=True, slots=True)
class ProductPrice:
    """Authoritative price of a product, as read inside checkout."""

    id: UUID
    price_cents: int
    # Empty when the row carries no currency.
    currency: str


__all__ = (
    "DEFAULT_CURRENCY",
    "normalize_currency",
    "Store",
    "StoreSettings",
    "StorePublic",
    "StorePricing",
    "Product",
    "ProductPublic",
    "ProductPrice",
)
