"""Centralized configuration management for the movie favorites API."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

# Populate ``os.environ`` from a local .env file so that both the settings
# object and the plain ``os.getenv`` lookups below observe the same values.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/movies.db"
SQLITE_ASYNC_PREFIX = "sqlite+aiosqlite://"
SQLITE_SYNC_PREFIXES = ("sqlite://", "sqlite+pysqlite://")
DEFAULT_API_PREFIX = "/api"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
DEFAULT_LOG_LEVEL = "INFO"


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


def _default_origins() -> list[str]:
    """Local development servers commonly used for the browser client."""

    origins: list[str] = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend(f"http://{host}:{port}" for port in (3000, 5173))
    return origins


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes a couple of derived
    helpers (async driver URL, on-disk database path, CORS origin list) so the
    application factory and the CLI never repeat parsing logic.
    """

    _explicit_database_url: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Remember which settings were supplied explicitly."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_database_url = "database_url" in normalized_keys
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        database_env = os.getenv("DATABASE_URL")
        if database_env is not None and database_env.strip():
            self._explicit_database_url = True
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        alias="DATABASE_URL",
        description=(
            "SQLAlchemy URL of the favorites store. Plain sqlite:// URLs are"
            " upgraded to the aiosqlite driver at runtime."
        ),
    )
    api_prefix: str = Field(
        default=DEFAULT_API_PREFIX,
        alias="API_PREFIX",
        description="Base path every endpoint is mounted under.",
    )
    host: str = Field(default=DEFAULT_HOST, alias="HOST")
    port: int = Field(default=DEFAULT_PORT, alias="PORT")
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of browser origins allowed by CORS.",
    )
    cors_allow_origin_regex: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGIN_REGEX",
        description="Optional regular expression evaluated by the CORS middleware.",
    )
    slow_query_threshold: float = Field(
        default=0.1,
        alias="SLOW_QUERY_THRESHOLD",
        description="Seconds after which a SQL statement is logged as slow.",
    )

    @property
    def resolved_database_url(self) -> str:
        """Return the aiosqlite URL after applying driver upgrades."""

        url = self.database_url.strip() or DEFAULT_DATABASE_URL

        if url.startswith(SQLITE_ASYNC_PREFIX):
            return url

        for prefix in SQLITE_SYNC_PREFIXES:
            if url.startswith(prefix):
                return url.replace(prefix, SQLITE_ASYNC_PREFIX, 1)

        raise RuntimeError(
            f"Expected a SQLite connection string for the favorites store, received: {url}"
        )

    @property
    def database_path(self) -> Path | None:
        """Filesystem location of the store, ``None`` for in-memory databases."""

        database = make_url(self.resolved_database_url).database
        if not database or database == ":memory:":
            return None
        return Path(database)

    @property
    def normalized_api_prefix(self) -> str:
        """``api_prefix`` with exactly one leading slash and no trailing slash."""

        stripped = self.api_prefix.strip().strip("/")
        return f"/{stripped}" if stripped else ""

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return configured origins, or the local development defaults."""

        if not self.cors_allow_origins_raw:
            return _default_origins()

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_database_url:
            warnings.append(
                "DATABASE_URL is not set - favorites are stored in "
                f"{DEFAULT_DATABASE_URL.removeprefix(SQLITE_ASYNC_PREFIX + '/')}"
            )

        if not self._explicit_cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_API_PREFIX",
    "DEFAULT_DATABASE_URL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PORT",
    "get_settings",
]
