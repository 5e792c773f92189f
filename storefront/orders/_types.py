"""
Order types — records, status taxonomy, outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from storefront.db import OrderTable


# ═══════════════════════════════════════════════════════════════════════════════
# Status — Order Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    """
    Order status.

    Lifecycle:
        PENDING → PAID

    FAILED and REFUNDED are reserved. Nothing transitions into them yet.
    """

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Order:
    """
    A persisted order.

    Note: status is kept as the raw column value so an unexpected status
    read from storage is still reported, not lost.
    """

    id: UUID
    store_id: UUID
    customer_user_id: UUID | None
    status: str
    total_cents: int
    currency: str
    stripe_payment_intent_id: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID.value

    @classmethod
    def from_row(cls, row: OrderTable) -> Order:
        return cls(
            id=row.id,
            store_id=row.store_id,
            customer_user_id=row.customer_user_id,
            status=row.status,
            total_cents=row.total_cents,
            currency=row.currency,
            stripe_payment_intent_id=row.stripe_payment_intent_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True, slots=True)
class OrderItem:
    id: UUID
    order_id: UUID
    product_id: UUID
    line_no: int
    quantity: int
    # Snapshot taken at creation; never recomputed.
    unit_price_cents: int
    title: str | None
    created_at: datetime

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True, slots=True)
class OrderDetail:
    order: Order
    items: tuple[OrderItem, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout input
# ═══════════════════════════════════════════════════════════════════════════════


MAX_QUANTITY = 10_000
"""Largest quantity accepted for one product in one order."""


@dataclass(frozen=True, slots=True)
class LineItem:
    product_id: UUID
    quantity: int


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Transition:
    """
    Successful mark-paid outcome.

    changed: True when this call moved the order to paid, False when it was
    already paid (idempotent re-entry).
    """

    order: Order
    changed: bool


__all__ = (
    "OrderStatus",
    "Order",
    "OrderItem",
    "OrderDetail",
    "LineItem",
    "MAX_QUANTITY",
    "Transition",
)
