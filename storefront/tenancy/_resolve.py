"""
Tenant resolution — host header to tenant slug.

Pure: no I/O, depends only on the host string and static configuration.

Examples (base domain "example.com"):
    demo.example.com       → TenantSlug("demo")
    example.com            → NoTenant()
    foo.bar.example.com    → NoTenant()        (nested subdomains rejected)
    www.example.com        → ReservedTenant("www")

Without a base domain at least three labels are required, so a bare apex
such as "example.com" never becomes a tenant.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field

from storefront.tenancy._constants import (
    RESERVED_TENANT_SLUGS,
    is_valid_slug,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Resolution — tagged outcome
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class NoTenant:
    """Host carries no qualifying subdomain label."""


@dataclass(frozen=True, slots=True)
class ReservedTenant:
    """Subdomain is a reserved name and can never be a store."""

    label: str


@dataclass(frozen=True, slots=True)
class TenantSlug:
    """Candidate store slug. Existence is not checked here."""

    slug: str


type TenantResolution = NoTenant | ReservedTenant | TenantSlug


# ═══════════════════════════════════════════════════════════════════════════════
# Host parsing
# ═══════════════════════════════════════════════════════════════════════════════


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _hostname(raw: str) -> str | None:
    """Lower-cased host without port. None for IP literals."""
    host = raw.strip().lower()
    if not host:
        return None

    # [::1]:8080 and friends
    if host.startswith("[") or "]" in host:
        return None
    # Unbracketed IPv6
    if host.count(":") > 1:
        return None

    host = host.split(":", 1)[0].rstrip(".")
    if not host or _is_ip_literal(host):
        return None
    return host


def _subdomain_label(host: str, base_domain: str) -> str | None:
    if base_domain:
        if host == base_domain:
            return None
        suffix = f".{base_domain}"
        if not host.endswith(suffix):
            return None
        prefix = host[: -len(suffix)]
        # Strict: exactly one label before the base domain
        if not prefix or "." in prefix:
            return None
        return prefix

    labels = [part for part in host.split(".") if part]
    if len(labels) < 3:
        return None
    return labels[0]


def resolve_tenant(
    host: str | None,
    base_domain: str | None = None,
    reserved: frozenset[str] = RESERVED_TENANT_SLUGS,
) -> TenantResolution:
    """Derive the tenant from a Host header value."""
    if not host:
        return NoTenant()

    hostname = _hostname(host)
    if hostname is None:
        return NoTenant()

    base = (base_domain or "").strip().strip(".").lower()
    label = _subdomain_label(hostname, base)
    if label is None:
        return NoTenant()

    if label in reserved:
        return ReservedTenant(label)

    if not is_valid_slug(label):
        return NoTenant()

    return TenantSlug(label)


# ═══════════════════════════════════════════════════════════════════════════════
# Resolver — configured instance
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TenantResolver:
    base_domain: str = ""
    reserved: frozenset[str] = field(default_factory=lambda: RESERVED_TENANT_SLUGS)

    def resolve(self, host: str | None) -> TenantResolution:
        return resolve_tenant(host, self.base_domain, self.reserved)


__all__ = (
    "NoTenant",
    "ReservedTenant",
    "TenantSlug",
    "TenantResolution",
    "TenantResolver",
    "resolve_tenant",
)
