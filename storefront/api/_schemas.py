"""
Wire models — request bodies in, response envelopes out.

Requests convert into domain values with to_domain(); responses are built
from domain records with from_domain().
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from storefront._types import MAX_CENTS
from storefront.catalog import Product, ProductPublic, Store, StorePublic, StoreSettings
from storefront.orders import MAX_QUANTITY, LineItem, Order, OrderDetail, OrderItem, Transition
from storefront.payments import IntentBinding

Name = Annotated[str, Field(min_length=2, max_length=100)]
Currency = Annotated[str, Field(min_length=3, max_length=10)]
HexColor = Annotated[str, Field(pattern=r"^#[0-9a-fA-F]{6}$")]


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class CreateStoreIn(_Body):
    slug: Annotated[str, Field(min_length=2, max_length=63)]
    name: Name
    currency: Currency | None = None


class UpdateStoreSettingsIn(_Body):
    name: Name | None = None
    currency: Currency | None = None
    primary_color: HexColor | None = None
    logo_url: HttpUrl | None = None

    def to_domain(self) -> dict[str, str | None]:
        """Keyword arguments for StoreAdmin.update_store_settings."""
        return {
            "name": self.name,
            "currency": self.currency,
            "primary_color": self.primary_color,
            "logo_url": None if self.logo_url is None else str(self.logo_url),
        }


class CreateProductIn(_Body):
    title: Annotated[str, Field(min_length=2, max_length=200)]
    description: Annotated[str, Field(max_length=5000)] | None = None
    price_cents: Annotated[int, Field(ge=0, le=MAX_CENTS)]
    currency: Currency | None = None
    is_active: bool = True
    delivery_url: HttpUrl | None = None


class LineItemIn(_Body):
    product_id: UUID
    quantity: Annotated[int, Field(gt=0, le=MAX_QUANTITY)]

    def to_domain(self) -> LineItem:
        return LineItem(product_id=self.product_id, quantity=self.quantity)


class CreateOrderIn(_Body):
    customer_user_id: UUID | None = None
    items: Annotated[list[LineItemIn], Field(min_length=1)]

    def to_domain(self) -> list[LineItem]:
        return [item.to_domain() for item in self.items]


class PaymentIntentIn(_Body):
    stripe_payment_intent_id: Annotated[str, Field(min_length=5, max_length=200)]


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════


class StoreOut(BaseModel):
    id: UUID
    slug: str
    name: str
    currency: str
    is_enabled: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, store: Store) -> StoreOut:
        return cls(
            id=store.id,
            slug=store.slug,
            name=store.name,
            currency=store.currency,
            is_enabled=store.is_enabled,
            created_at=store.created_at,
            updated_at=store.updated_at,
        )


class StoreSettingsOut(BaseModel):
    id: UUID
    slug: str
    name: str
    currency: str
    primary_color: str | None
    logo_url: str | None
    is_enabled: bool
    updated_at: datetime

    @classmethod
    def from_domain(cls, s: StoreSettings) -> StoreSettingsOut:
        return cls(
            id=s.id,
            slug=s.slug,
            name=s.name,
            currency=s.currency,
            primary_color=s.primary_color,
            logo_url=s.logo_url,
            is_enabled=s.is_enabled,
            updated_at=s.updated_at,
        )


class StorePublicOut(BaseModel):
    id: UUID
    slug: str
    name: str
    currency: str
    primary_color: str | None
    logo_url: str | None

    @classmethod
    def from_domain(cls, store: StorePublic) -> StorePublicOut:
        return cls(
            id=store.id,
            slug=store.slug,
            name=store.name,
            currency=store.currency,
            primary_color=store.primary_color,
            logo_url=store.logo_url,
        )


class ProductOut(BaseModel):
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
    def from_domain(cls, p: Product) -> ProductOut:
        return cls(
            id=p.id,
            store_id=p.store_id,
            title=p.title,
            description=p.description,
            price_cents=p.price_cents,
            currency=p.currency,
            is_active=p.is_active,
            delivery_url=p.delivery_url,
            created_at=p.created_at,
            updated_at=p.updated_at,
        )


class ProductPublicOut(BaseModel):
    id: UUID
    title: str
    description: str | None
    price_cents: int
    currency: str

    @classmethod
    def from_domain(cls, p: ProductPublic) -> ProductPublicOut:
        return cls(
            id=p.id,
            title=p.title,
            description=p.description,
            price_cents=p.price_cents,
            currency=p.currency,
        )


class OrderOut(BaseModel):
    id: UUID
    store_id: UUID
    customer_user_id: UUID | None
    status: str
    total_cents: int
    currency: str
    stripe_payment_intent_id: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, o: Order) -> OrderOut:
        return cls(
            id=o.id,
            store_id=o.store_id,
            customer_user_id=o.customer_user_id,
            status=o.status,
            total_cents=o.total_cents,
            currency=o.currency,
            stripe_payment_intent_id=o.stripe_payment_intent_id,
            created_at=o.created_at,
            updated_at=o.updated_at,
        )


class OrderItemOut(BaseModel):
    id: UUID
    product_id: UUID
    line_no: int
    title: str | None
    quantity: int
    unit_price_cents: int
    line_total_cents: int

    @classmethod
    def from_domain(cls, item: OrderItem) -> OrderItemOut:
        return cls(
            id=item.id,
            product_id=item.product_id,
            line_no=item.line_no,
            title=item.title,
            quantity=item.quantity,
            unit_price_cents=item.unit_price_cents,
            line_total_cents=item.line_total_cents,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Envelopes
# ═══════════════════════════════════════════════════════════════════════════════


class StoreEnvelope(BaseModel):
    store: StoreOut


class StoreSettingsEnvelope(BaseModel):
    store: StoreSettingsOut


class StorePublicEnvelope(BaseModel):
    store: StorePublicOut


class ProductEnvelope(BaseModel):
    product: ProductOut


class ProductListEnvelope(BaseModel):
    products: list[ProductOut]


class PublicProductEnvelope(BaseModel):
    product: ProductPublicOut


class PublicProductListEnvelope(BaseModel):
    products: list[ProductPublicOut]


class OrderEnvelope(BaseModel):
    order: OrderOut


class OrderListEnvelope(BaseModel):
    orders: list[OrderOut]


class OrderDetailOut(BaseModel):
    order: OrderOut
    items: list[OrderItemOut]

    @classmethod
    def from_domain(cls, detail: OrderDetail) -> OrderDetailOut:
        return cls(
            order=OrderOut.from_domain(detail.order),
            items=[OrderItemOut.from_domain(item) for item in detail.items],
        )


class TransitionOut(BaseModel):
    order: OrderOut
    changed: bool

    @classmethod
    def from_domain(cls, t: Transition) -> TransitionOut:
        return cls(order=OrderOut.from_domain(t.order), changed=t.changed)


class IntentBindingOut(BaseModel):
    ok: bool = True
    order_id: UUID
    stripe_payment_intent_id: str
    changed: bool

    @classmethod
    def from_domain(cls, b: IntentBinding) -> IntentBindingOut:
        return cls(
            order_id=b.order_id,
            stripe_payment_intent_id=b.payment_intent_id,
            changed=b.changed,
        )


class HealthOut(BaseModel):
    status: str = "server running"
    db: str


__all__ = (
    "CreateStoreIn",
    "UpdateStoreSettingsIn",
    "CreateProductIn",
    "LineItemIn",
    "CreateOrderIn",
    "PaymentIntentIn",
    "StoreOut",
    "StoreSettingsOut",
    "StorePublicOut",
    "ProductOut",
    "ProductPublicOut",
    "OrderOut",
    "OrderItemOut",
    "StoreEnvelope",
    "StoreSettingsEnvelope",
    "StorePublicEnvelope",
    "ProductEnvelope",
    "ProductListEnvelope",
    "PublicProductEnvelope",
    "PublicProductListEnvelope",
    "OrderEnvelope",
    "OrderListEnvelope",
    "OrderDetailOut",
    "TransitionOut",
    "IntentBindingOut",
    "HealthOut",
)
