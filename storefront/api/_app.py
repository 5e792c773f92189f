"""
FastAPI application factory.

    settings = Settings.from_env()
    configure_logging(settings.log_level, json=settings.log_json)
    db = Database.from_url(settings.database_url)
    app = create_app(build_storefront(db, settings), settings)

Run with uvicorn:

    uvicorn storefront.api:app_from_env --factory
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import fastapi
import structlog

from storefront._engine import Storefront, build_storefront
from storefront.api._errors import install_error_handlers
from storefront.api._routes import router
from storefront.config import Settings
from storefront.db import Database
from storefront.log import configure_logging

logger = structlog.get_logger(__name__)

API_PREFIX = "/api"


def create_app(storefront: Storefront, settings: Settings | None = None) -> fastapi.FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
        logger.info("app_started", environment=settings.environment)
        try:
            yield
        finally:
            await storefront.db.dispose()
            logger.info("app_stopped")

    app = fastapi.FastAPI(
        title="Storefront API",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )
    app.state.storefront = storefront
    app.state.settings = settings

    install_error_handlers(app)
    app.include_router(router, prefix=API_PREFIX)
    return app


def app_from_env() -> fastapi.FastAPI:
    """Build the app from environment variables (.env is honoured)."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, json=settings.log_json)

    db = Database.from_url(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )
    return create_app(build_storefront(db, settings), settings)


__all__ = ("create_app", "app_from_env", "API_PREFIX")
