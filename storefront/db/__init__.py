"""
Storage — tables and the injected Database.

    from storefront.db import Database

    db = Database.from_url("sqlite+aiosqlite:///./storefront.db")
    await db.create_all()
"""

from storefront.db._tables import (
    Base,
    StoreTable,
    ProductTable,
    OrderTable,
    OrderItemTable,
)
from storefront.db._database import (
    Database,
    rowcount,
    is_unique_violation,
)

__all__ = (
    # Tables
    "Base",
    "StoreTable",
    "ProductTable",
    "OrderTable",
    "OrderItemTable",
    # Access
    "Database",
    "rowcount",
    "is_unique_violation",
)
