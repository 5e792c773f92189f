"""
storefront — multi-tenant order and payment reconciliation.

    from storefront import tenancy as T   # Host → store slug
    from storefront import catalog as C   # Stores and products
    from storefront import orders as O    # Checkout and status transitions
    from storefront import payments as P  # Payment intent binding

    db = Database.from_url(settings.database_url)
    sf = build_storefront(db, settings)

The HTTP layer lives in storefront.api and is imported on its own.
"""

from storefront import tenancy
from storefront import db
from storefront import catalog
from storefront import orders
from storefront import payments
from storefront._types import (
    MAX_CENTS,
    Result,
    Ok,
    Error,
    ErrorKind,
    DomainError,
    Errors,
    Outcome,
)
from storefront._engine import Storefront, build_storefront
from storefront.config import Settings
from storefront.db import Database

__version__ = "0.1.0"

__all__ = (
    "tenancy",
    "db",
    "catalog",
    "orders",
    "payments",
    "MAX_CENTS",
    "Result",
    "Ok",
    "Error",
    "ErrorKind",
    "DomainError",
    "Errors",
    "Outcome",
    "Storefront",
    "build_storefront",
    "Settings",
    "Database",
)
