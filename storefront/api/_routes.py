"""
Routes — thin adapters from HTTP to storefront components.

Handlers parse, call one component, and turn its Result into a response.
Business rules stay in the components.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from kungfu import Error, Ok

from storefront._engine import Storefront
from storefront._types import Errors, Outcome
from storefront.orders import Order
from storefront.api import _schemas as S
from storefront.api._errors import DomainErrorResponse
from storefront.tenancy import (
    NoTenant,
    ReservedTenant,
    TenantSlug,
    is_valid_slug,
    normalize_slug,
)

router = APIRouter()


def unwrap[T](result: Outcome[T]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(err):
            raise DomainErrorResponse(err)


# ═══════════════════════════════════════════════════════════════════════════════
# Dependencies
# ═══════════════════════════════════════════════════════════════════════════════


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


SF = Annotated[Storefront, Depends(get_storefront)]


def path_slug(slug: str) -> str:
    s = normalize_slug(slug)
    if not is_valid_slug(s):
        raise DomainErrorResponse(Errors.bad_request("Invalid store slug"))
    return s


def host_slug(request: Request, sf: SF) -> str:
    """Tenant slug from the Host header."""
    match sf.resolver.resolve(request.headers.get("host")):
        case TenantSlug(slug):
            return slug
        case ReservedTenant(_):
            raise DomainErrorResponse(Errors.bad_request("Invalid tenant Host subdomain"))
        case NoTenant():
            raise DomainErrorResponse(Errors.bad_request("Missing tenant Host subdomain"))


Slug = Annotated[str, Depends(path_slug)]
HostSlug = Annotated[str, Depends(host_slug)]


# ═══════════════════════════════════════════════════════════════════════════════
# Health
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/health", response_model=S.HealthOut)
async def health(sf: SF) -> JSONResponse:
    if await sf.db.ping():
        return JSONResponse(status_code=200, content=S.HealthOut(db="ok").model_dump())
    return JSONResponse(status_code=503, content=S.HealthOut(db="fail").model_dump())


# ═══════════════════════════════════════════════════════════════════════════════
# Stores (admin)
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/stores", status_code=201)
async def create_store(body: S.CreateStoreIn, sf: SF) -> S.StoreEnvelope:
    store = unwrap(await sf.admin.create_store(body.slug, body.name, body.currency))
    return S.StoreEnvelope(store=S.StoreOut.from_domain(store))


@router.patch("/stores/{store_id}/enable")
async def enable_store(store_id: UUID, sf: SF) -> S.StoreEnvelope:
    store = unwrap(await sf.admin.enable_store(store_id))
    return S.StoreEnvelope(store=S.StoreOut.from_domain(store))


@router.get("/stores/{store_id}/settings")
async def get_store_settings(store_id: UUID, sf: SF) -> S.StoreSettingsEnvelope:
    settings = unwrap(await sf.admin.get_store_settings(store_id))
    return S.StoreSettingsEnvelope(store=S.StoreSettingsOut.from_domain(settings))


@router.patch("/stores/{store_id}/settings")
async def update_store_settings(
    store_id: UUID,
    body: S.UpdateStoreSettingsIn,
    sf: SF,
) -> S.StoreSettingsEnvelope:
    settings = unwrap(await sf.admin.update_store_settings(store_id, **body.to_domain()))
    return S.StoreSettingsEnvelope(store=S.StoreSettingsOut.from_domain(settings))


# ═══════════════════════════════════════════════════════════════════════════════
# Products (admin)
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/stores/{store_id}/products", status_code=201)
async def create_product(store_id: UUID, body: S.CreateProductIn, sf: SF) -> S.ProductEnvelope:
    product = unwrap(
        await sf.admin.create_product(
            store_id,
            title=body.title,
            price_cents=body.price_cents,
            currency=body.currency,
            description=body.description,
            is_active=body.is_active,
            delivery_url=None if body.delivery_url is None else str(body.delivery_url),
        )
    )
    return S.ProductEnvelope(product=S.ProductOut.from_domain(product))


@router.get("/stores/{store_id}/products")
async def list_products(store_id: UUID, sf: SF) -> S.ProductListEnvelope:
    products = await sf.admin.list_products(store_id)
    return S.ProductListEnvelope(products=[S.ProductOut.from_domain(p) for p in products])


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout (public)
# ═══════════════════════════════════════════════════════════════════════════════


def _order_envelope(result: Outcome[Order]) -> S.OrderEnvelope:
    return S.OrderEnvelope(order=S.OrderOut.from_domain(unwrap(result)))


@router.post("/stores/{store_id}/orders", status_code=201)
async def create_order(store_id: UUID, body: S.CreateOrderIn, sf: SF) -> S.OrderEnvelope:
    return _order_envelope(
        await sf.orders.create_order(store_id, body.to_domain(), body.customer_user_id)
    )


@router.post("/store/{slug}/orders", status_code=201)
async def create_order_by_slug(slug: Slug, body: S.CreateOrderIn, sf: SF) -> S.OrderEnvelope:
    return _order_envelope(
        await sf.orders.create_order_for_slug(slug, body.to_domain(), body.customer_user_id)
    )


@router.post("/storefront/orders", status_code=201)
async def create_order_by_host(slug: HostSlug, body: S.CreateOrderIn, sf: SF) -> S.OrderEnvelope:
    return _order_envelope(
        await sf.orders.create_order_for_slug(slug, body.to_domain(), body.customer_user_id)
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog (public)
# ═══════════════════════════════════════════════════════════════════════════════


async def _store_meta(sf: Storefront, slug: str) -> S.StorePublicEnvelope:
    store = await sf.catalog.get_enabled_store(slug)
    if store is None:
        raise DomainErrorResponse(Errors.not_found("Store not found"))
    return S.StorePublicEnvelope(store=S.StorePublicOut.from_domain(store))


async def _store_products(sf: Storefront, slug: str) -> S.PublicProductListEnvelope:
    if await sf.catalog.get_enabled_store(slug) is None:
        raise DomainErrorResponse(Errors.not_found("Store not found"))
    products = await sf.catalog.list_public_products(slug)
    return S.PublicProductListEnvelope(
        products=[S.ProductPublicOut.from_domain(p) for p in products]
    )


async def _store_product(sf: Storefront, slug: str, product_id: UUID) -> S.PublicProductEnvelope:
    product = await sf.catalog.get_public_product(slug, product_id)
    if product is None:
        raise DomainErrorResponse(Errors.not_found("Product not found"))
    return S.PublicProductEnvelope(product=S.ProductPublicOut.from_domain(product))


@router.get("/store/{slug}/meta")
async def store_meta(slug: Slug, sf: SF) -> S.StorePublicEnvelope:
    return await _store_meta(sf, slug)


@router.get("/store/{slug}/products")
async def store_products(slug: Slug, sf: SF) -> S.PublicProductListEnvelope:
    return await _store_products(sf, slug)


@router.get("/store/{slug}/products/{product_id}")
async def store_product(slug: Slug, product_id: UUID, sf: SF) -> S.PublicProductEnvelope:
    return await _store_product(sf, slug, product_id)


@router.get("/storefront/meta")
async def storefront_meta(slug: HostSlug, sf: SF) -> S.StorePublicEnvelope:
    return await _store_meta(sf, slug)


@router.get("/storefront/products")
async def storefront_products(slug: HostSlug, sf: SF) -> S.PublicProductListEnvelope:
    return await _store_products(sf, slug)


@router.get("/storefront/products/{product_id}")
async def storefront_product(slug: HostSlug, product_id: UUID, sf: SF) -> S.PublicProductEnvelope:
    return await _store_product(sf, slug, product_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders (admin)
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/stores/{store_id}/orders")
async def list_orders(
    store_id: UUID,
    sf: SF,
    limit: Annotated[int | None, Query()] = None,
) -> S.OrderListEnvelope:
    orders = unwrap(await sf.queries.list_orders(store_id, limit))
    return S.OrderListEnvelope(orders=[S.OrderOut.from_domain(o) for o in orders])


@router.patch("/stores/{store_id}/orders/mark-paid-by-payment-intent")
async def mark_paid_by_payment_intent(
    store_id: UUID,
    body: S.PaymentIntentIn,
    sf: SF,
) -> S.TransitionOut:
    transition = unwrap(
        await sf.binder.mark_paid_by_intent(store_id, body.stripe_payment_intent_id)
    )
    return S.TransitionOut.from_domain(transition)


@router.get("/stores/{store_id}/orders/{order_id}")
async def get_order(store_id: UUID, order_id: UUID, sf: SF) -> S.OrderDetailOut:
    detail = unwrap(await sf.queries.get_order_detail(store_id, order_id))
    return S.OrderDetailOut.from_domain(detail)


@router.patch("/stores/{store_id}/orders/{order_id}/mark-paid")
async def mark_paid(store_id: UUID, order_id: UUID, sf: SF) -> S.TransitionOut:
    transition = unwrap(await sf.state_machine.mark_paid(store_id, order_id))
    return S.TransitionOut.from_domain(transition)


@router.patch("/stores/{store_id}/orders/{order_id}/attach-payment-intent")
async def attach_payment_intent(
    store_id: UUID,
    order_id: UUID,
    body: S.PaymentIntentIn,
    sf: SF,
) -> S.IntentBindingOut:
    binding = unwrap(
        await sf.binder.attach(store_id, order_id, body.stripe_payment_intent_id)
    )
    return S.IntentBindingOut.from_domain(binding)


__all__ = ("router", "unwrap", "get_storefront")
