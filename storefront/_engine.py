"""
Storefront — every component wired to one Database.

    db = Database.from_url(settings.database_url)
    sf = build_storefront(db, settings)

    await sf.orders.create_order(store_id, items)
    await sf.state_machine.mark_paid(store_id, order_id)
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.catalog import StoreAdmin, StoreCatalog
from storefront.config import Settings
from storefront.db import Database
from storefront.orders import OrderCreation, OrderQueries, OrderStateMachine
from storefront.payments import PaymentIntentBinder
from storefront.tenancy import TenantResolver


@dataclass(frozen=True, slots=True)
class Storefront:
    db: Database
    resolver: TenantResolver
    catalog: StoreCatalog
    admin: StoreAdmin
    orders: OrderCreation
    queries: OrderQueries
    state_machine: OrderStateMachine
    binder: PaymentIntentBinder


def build_storefront(db: Database, settings: Settings | None = None) -> Storefront:
    settings = settings or Settings()

    catalog = StoreCatalog(db)
    state_machine = OrderStateMachine(db)

    return Storefront(
        db=db,
        resolver=TenantResolver(base_domain=settings.tenancy_base_domain),
        catalog=catalog,
        admin=StoreAdmin(db),
        orders=OrderCreation(db, catalog),
        queries=OrderQueries(db),
        state_machine=state_machine,
        binder=PaymentIntentBinder(db, state_machine),
    )


__all__ = ("Storefront", "build_storefront")
