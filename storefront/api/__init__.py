"""
HTTP surface (FastAPI).

    from storefront.api import create_app

    app = create_app(build_storefront(db, settings), settings)
"""

from storefront.api._app import API_PREFIX, app_from_env, create_app
from storefront.api._errors import (
    HTTP_STATUS,
    DomainErrorResponse,
    install_error_handlers,
)
from storefront.api._routes import router

__all__ = (
    "API_PREFIX",
    "app_from_env",
    "create_app",
    "HTTP_STATUS",
    "DomainErrorResponse",
    "install_error_handlers",
    "router",
)
