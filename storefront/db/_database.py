"""
Database — explicitly constructed storage access.

Every component receives a Database at construction time. There is no
module-level engine or pool.

    db = Database.from_url("postgresql+asyncpg://...")
    await db.create_all()

    async with db.session() as session:
        ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, cast

from kungfu import Ok, Result
from sqlalchemy import text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import structlog

from storefront.db._tables import Base

logger = structlog.get_logger(__name__)

# PostgreSQL SQLSTATE for unique_violation
_UNIQUE_VIOLATION = "23505"


class Database:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
    ) -> Database:
        """
        Create the async engine and its connection pool.

        Note: pool sizing only applies to server databases; SQLite uses the
        dialect's default pool.
        """
        options: dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )
        return cls(create_async_engine(url, **options))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def session(self) -> AsyncSession:
        return self._sessions()

    async def transaction[T, E](
        self,
        work: Callable[[AsyncSession], Awaitable[Result[T, E]]],
    ) -> Result[T, E]:
        """
        Run work in one transaction.

        Commits on Ok, rolls back on Error. A raised exception rolls back
        and propagates.
        """
        async with self.session() as session:
            try:
                result = await work(session)
            except BaseException:
                await session.rollback()
                raise

            match result:
                case Ok(_):
                    await session.commit()
                case _:
                    await session.rollback()
            return result

    async def create_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                value = (await conn.execute(text("SELECT 1"))).scalar()
        except SQLAlchemyError as e:
            logger.warning("db_ping_failed", error=str(e))
            return False
        return value == 1

    async def dispose(self) -> None:
        await self._engine.dispose()


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def rowcount(result: Any) -> int:
    """Rows affected by an UPDATE/DELETE executed through a session."""
    return cast(CursorResult[Any], result).rowcount


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError is a uniqueness violation.

    PostgreSQL drivers expose the SQLSTATE; SQLite only has the message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return str(code) == _UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


__all__ = (
    "Database",
    "rowcount",
    "is_unique_violation",
)
