import pytest

from helpers import Seeded, seed_store
from storefront import Settings, Storefront, build_storefront
from storefront.db import Database


@pytest.fixture
def settings(tmp_path) -> Settings:
    # File database: every pooled connection sees the same data.
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        tenancy_base_domain="example.com",
    )


@pytest.fixture
async def db(settings):
    database = Database.from_url(settings.database_url)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def sf(db, settings) -> Storefront:
    return build_storefront(db, settings)


@pytest.fixture
async def seeded(sf) -> Seeded:
    return await seed_store(sf)
