"""
Settings — environment-driven configuration.

Immutable. Each with_* method returns a new Settings.

    settings = Settings.from_env()
    test_settings = settings.with_database_url("sqlite+aiosqlite:///./test.db")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./storefront.db"


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    # Empty means "no base domain": resolver falls back to the 3-label rule.
    tenancy_base_domain: str = ""
    log_level: str = "INFO"
    log_json: bool = False
    environment: str = "development"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> Settings:
        """
        Build settings from environment variables.

        STOREFRONT_DATABASE_URL wins over DATABASE_URL.
        """
        if dotenv:
            load_dotenv()

        database_url = (
            os.getenv("STOREFRONT_DATABASE_URL")
            or os.getenv("DATABASE_URL")
            or DEFAULT_DATABASE_URL
        ).strip()

        return cls(
            database_url=database_url,
            database_echo=_env_bool("STOREFRONT_DATABASE_ECHO"),
            pool_size=_env_int("STOREFRONT_POOL_SIZE", 10),
            max_overflow=_env_int("STOREFRONT_MAX_OVERFLOW", 20),
            tenancy_base_domain=(os.getenv("TENANCY_BASE_DOMAIN") or "")
            .strip()
            .strip(".")
            .lower(),
            log_level=(os.getenv("STOREFRONT_LOG_LEVEL") or "INFO").strip().upper(),
            log_json=_env_bool("STOREFRONT_LOG_JSON"),
            environment=(os.getenv("STOREFRONT_ENV") or "development").strip().lower(),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def with_database_url(self, url: str) -> Settings:
        return replace(self, database_url=url)

    def with_base_domain(self, base_domain: str) -> Settings:
        return replace(self, tenancy_base_domain=base_domain.strip().strip(".").lower())

    def with_logging(self, *, level: str | None = None, json: bool | None = None) -> Settings:
        return replace(
            self,
            log_level=level.upper() if level else self.log_level,
            log_json=self.log_json if json is None else json,
        )


__all__ = ("Settings", "DEFAULT_DATABASE_URL")
