"""Tests for Host header → tenant slug resolution."""

import pytest

from storefront.tenancy import (
    NoTenant,
    ReservedTenant,
    TenantResolver,
    TenantSlug,
    is_reserved_slug,
    is_valid_slug,
    resolve_tenant,
)


class TestWithBaseDomain:
    @pytest.mark.parametrize(
        "host, expected",
        [
            ("demo.example.com", TenantSlug("demo")),
            ("Demo.Example.COM", TenantSlug("demo")),
            ("demo.example.com:8080", TenantSlug("demo")),
            ("demo.example.com.", TenantSlug("demo")),
            ("my-shop-2.example.com", TenantSlug("my-shop-2")),
            ("example.com", NoTenant()),
            ("foo.bar.example.com", NoTenant()),
            ("demo.other.com", NoTenant()),
            ("demoexample.com", NoTenant()),
            ("www.example.com", ReservedTenant("www")),
            ("API.example.com", ReservedTenant("api")),
            ("x.example.com", NoTenant()),
            ("shop_1.example.com", NoTenant()),
        ],
    )
    def test_resolution(self, host, expected):
        assert resolve_tenant(host, base_domain="example.com") == expected

    def test_base_domain_is_normalized(self):
        assert resolve_tenant("demo.example.com", base_domain=".Example.com.") == TenantSlug("demo")


class TestWithoutBaseDomain:
    @pytest.mark.parametrize(
        "host, expected",
        [
            ("demo.example.com", TenantSlug("demo")),
            ("demo.shop.example.com", TenantSlug("demo")),
            ("example.com", NoTenant()),
            ("localhost", NoTenant()),
            ("localhost:3000", NoTenant()),
            ("cdn.example.com", ReservedTenant("cdn")),
        ],
    )
    def test_resolution(self, host, expected):
        assert resolve_tenant(host) == expected


class TestHostsWithoutTenant:
    @pytest.mark.parametrize(
        "host",
        [None, "", "   ", "127.0.0.1", "127.0.0.1:8080", "[::1]:8080", "[::1]", "::1", "fe80::1"],
    )
    def test_no_tenant(self, host):
        assert resolve_tenant(host, base_domain="example.com") == NoTenant()
        assert resolve_tenant(host) == NoTenant()


class TestResolver:
    def test_uses_configured_base_domain(self):
        resolver = TenantResolver(base_domain="shop.test")
        assert resolver.resolve("demo.shop.test") == TenantSlug("demo")
        assert resolver.resolve("demo.example.com") == NoTenant()

    def test_custom_reserved_names(self):
        resolver = TenantResolver(base_domain="example.com", reserved=frozenset({"status"}))
        assert resolver.resolve("status.example.com") == ReservedTenant("status")
        assert resolver.resolve("www.example.com") == TenantSlug("www")

    def test_pattern_match(self):
        match TenantResolver().resolve("demo.example.com"):
            case TenantSlug(slug):
                assert slug == "demo"
            case other:
                pytest.fail(f"unexpected {other!r}")


class TestSlugRules:
    @pytest.mark.parametrize("slug", ["ab", "demo", "my-shop", "a" * 63, "123"])
    def test_valid(self, slug):
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", [None, "", "a", "a" * 64, "Demo", "my_shop", "my.shop"])
    def test_invalid(self, slug):
        assert not is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["api", "WWW", " admin ", "static", "assets", "cdn"])
    def test_reserved(self, slug):
        assert is_reserved_slug(slug)

    def test_not_reserved(self):
        assert not is_reserved_slug("demo")
        assert not is_reserved_slug(None)
