"""
Catalog — stores and products.

    from storefront import catalog as C

    catalog = C.StoreCatalog(db)
    store = await catalog.get_enabled_store("demo")

    admin = C.StoreAdmin(db)
    result = await admin.create_product(store_id, title="Poster", price_cents=1500)
"""

from storefront.catalog._types import (
    DEFAULT_CURRENCY,
    normalize_currency,
    Store,
    StoreSettings,
    StorePublic,
    StorePricing,
    Product,
    ProductPublic,
    ProductPrice,
)
from storefront.catalog._catalog import StoreCatalog
from storefront.catalog._admin import StoreAdmin

__all__ = (
    # Records
    "DEFAULT_CURRENCY",
    "normalize_currency",
    "Store",
    "StoreSettings",
    "StorePublic",
    "StorePricing",
    "Product",
    "ProductPublic",
    "ProductPrice",
    # Components
    "StoreCatalog",
    "StoreAdmin",
)
