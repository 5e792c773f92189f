"""
Tenancy — host header to store slug.

    from storefront import tenancy as T

    match T.resolve_tenant("demo.example.com", base_domain="example.com"):
        case T.TenantSlug(slug):
            ...
        case T.ReservedTenant(label):
            ...
        case T.NoTenant():
            ...
"""

from storefront.tenancy._constants import (
    RESERVED_TENANT_SLUGS,
    SLUG_PATTERN,
    is_valid_slug,
    is_reserved_slug,
    normalize_slug,
)
from storefront.tenancy._resolve import (
    NoTenant,
    ReservedTenant,
    TenantSlug,
    TenantResolution,
    TenantResolver,
    resolve_tenant,
)

__all__ = (
    # Slug rules
    "RESERVED_TENANT_SLUGS",
    "SLUG_PATTERN",
    "is_valid_slug",
    "is_reserved_slug",
    "normalize_slug",
    # Resolution
    "NoTenant",
    "ReservedTenant",
    "TenantSlug",
    "TenantResolution",
    "TenantResolver",
    "resolve_tenant",
)
