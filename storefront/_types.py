"""
Core types for storefront.

Re-exports from kungfu + the shared error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

# Re-export from kungfu
from kungfu import Result, Ok, Error

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

MAX_CENTS = 2**31 - 1
"""Largest amount a cents column holds (32-bit signed integer)."""


def utcnow() -> datetime:
    return datetime.now(UTC)


# ═══════════════════════════════════════════════════════════════════════════════
# Error Taxonomy
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """
    Kinds of expected business outcomes.

    Note: CONFLICT_PI_IN_USE is kept apart from CONFLICT so that callers
    can tell "this order already has another intent" from "this intent
    belongs to another order".
    """

    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    CONFLICT_PI_IN_USE = "CONFLICT_PI_IN_USE"
    INVALID_STATE = "INVALID_STATE"


@dataclass(frozen=True, slots=True)
class DomainError:
    """
    Expected failure of a storefront operation.

    status: the order status observed when kind is INVALID_STATE.
    """

    kind: ErrorKind
    message: str
    status: str | None = None


class Errors:
    @staticmethod
    def not_found(msg: str = "Not found") -> DomainError:
        return DomainError(ErrorKind.NOT_FOUND, msg)

    @staticmethod
    def bad_request(msg: str) -> DomainError:
        return DomainError(ErrorKind.BAD_REQUEST, msg)

    @staticmethod
    def conflict(msg: str) -> DomainError:
        return DomainError(ErrorKind.CONFLICT, msg)

    @staticmethod
    def intent_in_use(msg: str) -> DomainError:
        return DomainError(ErrorKind.CONFLICT_PI_IN_USE, msg)

    @staticmethod
    def invalid_state(status: str) -> DomainError:
        return DomainError(
            ErrorKind.INVALID_STATE,
            f"Cannot mark paid from status '{status}'",
            status=status,
        )


type Outcome[T] = Result[T, DomainError]
"""Result of a storefront operation."""


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    # Money
    "MAX_CENTS",
    "utcnow",
    # Errors
    "ErrorKind",
    "DomainError",
    "Errors",
    "Outcome",
)
