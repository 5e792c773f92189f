"""
PaymentIntentBinder — bind an external payment intent to an order, once.

Contract:
    same intent already bound        → Ok(changed=False), no write
    different intent already bound   → CONFLICT
    intent bound to another order    → CONFLICT_PI_IN_USE
    nothing bound                    → conditional write, Ok(changed=True)

The write is guarded by `stripe_payment_intent_id IS NULL`, and the unique
index on (store_id, stripe_payment_intent_id) is the final backstop: a
unique violation becomes CONFLICT_PI_IN_USE, never a raw storage error.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog
from kungfu import Error, Ok
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront._types import DomainError, Errors, Outcome, utcnow
from storefront.db import Database, OrderTable, is_unique_violation, rowcount
from storefront.orders import OrderStateMachine, Transition

logger = structlog.get_logger(__name__)

_DIFFERENT_INTENT = "Order already has a different stripe_payment_intent_id"
_INTENT_IN_USE = "That stripe_payment_intent_id is already attached to another order in this store"


@dataclass(frozen=True, slots=True)
class IntentBinding:
    """
    Successful binding.

    changed: False when the order already carried this intent.
    """

    order_id: UUID
    payment_intent_id: str
    changed: bool


def _missing_intent() -> DomainError:
    return Errors.bad_request("stripe_payment_intent_id is required")


class PaymentIntentBinder:
    def __init__(self, db: Database, state_machine: OrderStateMachine) -> None:
        self._db = db
        self._state_machine = state_machine

    async def attach(
        self,
        store_id: UUID,
        order_id: UUID,
        payment_intent_id: str,
    ) -> Outcome[IntentBinding]:
        pi = (payment_intent_id or "").strip()
        if not pi:
            return Error(_missing_intent())

        log = logger.bind(store_id=str(store_id), order_id=str(order_id), payment_intent_id=pi)

        async with self._db.session() as session:
            current = await self._bound_intent(session, store_id, order_id)
            match current:
                case None:
                    return Error(Errors.not_found("Order not found"))
                case (existing,) if existing == pi:
                    return Ok(IntentBinding(order_id, pi, changed=False))
                case (existing,) if existing is not None:
                    log.warning("payment_intent_conflict", bound=existing)
                    return Error(Errors.conflict(_DIFFERENT_INTENT))

            owner = await self.intent_owner(session, store_id, pi, exclude=order_id)
            if owner is not None:
                log.warning("payment_intent_in_use", owner_order_id=str(owner))
                return Error(Errors.intent_in_use(_INTENT_IN_USE))

            stmt = (
                update(OrderTable)
                .where(
                    OrderTable.store_id == store_id,
                    OrderTable.id == order_id,
                    OrderTable.stripe_payment_intent_id.is_(None),
                )
                .values(stripe_payment_intent_id=pi, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            try:
                written = rowcount(await session.execute(stmt)) == 1
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if is_unique_violation(e):
                    log.warning("payment_intent_in_use", source="unique_index")
                    return Error(Errors.intent_in_use(_INTENT_IN_USE))
                raise

            if written:
                log.info("payment_intent_bound")
                return Ok(IntentBinding(order_id, pi, changed=True))

            # Someone else wrote between our read and our update.
            now = await self._bound_intent(session, store_id, order_id)

        match now:
            case None:
                return Error(Errors.not_found("Order not found"))
            case (existing,) if existing == pi:
                return Ok(IntentBinding(order_id, pi, changed=False))
            case (existing,) if existing is not None:
                log.warning("payment_intent_conflict", bound=existing)
                return Error(Errors.conflict(_DIFFERENT_INTENT))
            case _:
                # Zero-row write yet still unbound: treated as success.
                return Ok(IntentBinding(order_id, pi, changed=False))

    async def mark_paid_by_intent(
        self,
        store_id: UUID,
        payment_intent_id: str,
    ) -> Outcome[Transition]:
        """
        Webhook path: find the order by (store, intent) and mark it paid.

        Safe to call repeatedly for the same event.
        """
        pi = (payment_intent_id or "").strip()
        if not pi:
            return Error(_missing_intent())

        async with self._db.session() as session:
            order_id = await self.intent_owner(session, store_id, pi)

        if order_id is None:
            logger.info("payment_intent_unknown", store_id=str(store_id), payment_intent_id=pi)
            return Error(Errors.not_found("Order not found for that payment intent"))

        return await self._state_machine.mark_paid(store_id, order_id)

    async def intent_owner(
        self,
        session: AsyncSession,
        store_id: UUID,
        payment_intent_id: str,
        exclude: UUID | None = None,
    ) -> UUID | None:
        """Id of the order in this store bound to the intent, if any."""
        stmt = select(OrderTable.id).where(
            OrderTable.store_id == store_id,
            OrderTable.stripe_payment_intent_id == payment_intent_id,
        )
        if exclude is not None:
            stmt = stmt.where(OrderTable.id != exclude)
        return (await session.execute(stmt.limit(1))).scalar_one_or_none()

    async def _bound_intent(
        self,
        session: AsyncSession,
        store_id: UUID,
        order_id: UUID,
    ) -> tuple[str | None] | None:
        """(intent,) for an existing order, None for a missing one."""
        stmt = (
            select(OrderTable.stripe_payment_intent_id)
            .where(OrderTable.store_id == store_id, OrderTable.id == order_id)
            .limit(1)
        )
        row = (await session.execute(stmt)).one_or_none()
        return None if row is None else (row[0],)


__all__ = (
    "IntentBinding",
    "PaymentIntentBinder",
)
