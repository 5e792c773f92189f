"""
HTTP error mapping.

    DomainError            → status by kind, code = kind name
    RequestValidationError → 400 BAD_REQUEST with issues
    unique violation       → 409 CONFLICT
    storage unreachable    → 503 UNAVAILABLE

Every error body has the same shape:

    {"error": true, "code": "...", "message": "...", "path": "/api/..."}
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from storefront._types import DomainError, ErrorKind
from storefront.db import is_unique_violation

logger = structlog.get_logger(__name__)

HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.CONFLICT_PI_IN_USE: 409,
    ErrorKind.INVALID_STATE: 409,
}


def error_body(request: Request, code: str, message: str, **extra: Any) -> dict[str, Any]:
    return {
        "error": True,
        "code": code,
        "message": message,
        "path": request.url.path,
        **extra,
    }


def domain_error_response(request: Request, err: DomainError) -> JSONResponse:
    status_code = HTTP_STATUS[err.kind]
    extra: dict[str, Any] = {}
    if err.kind is ErrorKind.INVALID_STATE:
        extra["status"] = err.status

    logger.info(
        "request_rejected",
        method=request.method,
        path=request.url.path,
        status=status_code,
        code=err.kind.value,
        message=err.message,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_body(request, err.kind.value, err.message, **extra),
    )


class DomainErrorResponse(Exception):
    """Carries a DomainError out of a route handler."""

    def __init__(self, err: DomainError) -> None:
        super().__init__(err.message)
        self.err = err


# ═══════════════════════════════════════════════════════════════════════════════
# Handlers
# ═══════════════════════════════════════════════════════════════════════════════


async def _on_domain_error(request: Request, exc: DomainErrorResponse) -> JSONResponse:
    return domain_error_response(request, exc.err)


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = [
        {
            "loc": list(e.get("loc", ())),
            "message": e.get("msg", ""),
            "type": e.get("type", ""),
        }
        for e in exc.errors()
    ]
    logger.info("request_invalid", method=request.method, path=request.url.path, issues=len(issues))
    return JSONResponse(
        status_code=400,
        content=error_body(request, "BAD_REQUEST", "Invalid request", issues=issues),
    )


async def _on_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    if not is_unique_violation(exc):
        raise exc
    logger.warning("request_unique_violation", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=409,
        content=error_body(request, "CONFLICT", "Resource already exists"),
    )


async def _on_storage_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "storage_unavailable",
        method=request.method,
        path=request.url.path,
        error=str(exc),
    )
    return JSONResponse(
        status_code=503,
        content=error_body(request, "UNAVAILABLE", "Storage is unavailable"),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainErrorResponse, _on_domain_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(IntegrityError, _on_integrity_error)
    app.add_exception_handler(OperationalError, _on_storage_unavailable)
    app.add_exception_handler(InterfaceError, _on_storage_unavailable)


__all__ = (
    "HTTP_STATUS",
    "DomainErrorResponse",
    "domain_error_response",
    "error_body",
    "install_error_handlers",
)
