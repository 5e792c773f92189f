"""Tenant slug rules. Single source of truth for store slugs."""

from __future__ import annotations

import re

# Names that must never map to a tenant store.
RESERVED_TENANT_SLUGS: frozenset[str] = frozenset(
    {"api", "www", "admin", "static", "assets", "cdn"}
)

# 2-63 chars, lowercase letters / digits / hyphen.
SLUG_PATTERN = re.compile(r"^[a-z0-9-]{2,63}$")


def is_valid_slug(slug: str | None) -> bool:
    return bool(slug) and SLUG_PATTERN.fullmatch(slug or "") is not None


def is_reserved_slug(slug: str | None) -> bool:
    return (slug or "").strip().lower() in RESERVED_TENANT_SLUGS


def normalize_slug(slug: str | None) -> str:
    return (slug or "").strip().lower()


__all__ = (
    "RESERVED_TENANT_SLUGS",
    "SLUG_PATTERN",
    "is_valid_slug",
    "is_reserved_slug",
    "normalize_slug",
)
