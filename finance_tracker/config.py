"""Environment-driven settings for the finance tracker backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Final

DEFAULT_DB_PATH: Final[Path] = Path(__file__).with_name("expenses.db")
DEFAULT_SESSION_SECRET: Final[str] = "dev-change-this-secret"
DEFAULT_SESSION_COOKIE: Final[str] = "session"
DEFAULT_CORS_ORIGINS: Final[tuple[str, ...]] = ("http://localhost:3000",)
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_LOG_PATH: Final[Path] = Path("logs") / "finance_tracker.log"

DATABASE_URL_ENV: Final[str] = "FINANCE_DATABASE_URL"
DB_PATH_ENV: Final[str] = "FINANCE_DB_PATH"
SESSION_SECRET_ENV: Final[str] = "FINANCE_SESSION_SECRET"
SESSION_COOKIE_ENV: Final[str] = "FINANCE_SESSION_COOKIE"
CORS_ORIGINS_ENV: Final[str] = "FINANCE_CORS_ORIGINS"
LOG_LEVEL_ENV: Final[str] = "FINANCE_LOG_LEVEL"
JSON_LOGS_ENV: Final[str] = "FINANCE_JSON_LOGS"
LOG_PATH_ENV: Final[str] = "FINANCE_LOG_PATH"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration resolved once per process."""

    database_url: str
    session_secret: str
    session_cookie: str
    cors_origins: tuple[str, ...]
    log_level: str
    json_logs: bool
    log_path: Path


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_flag(name: str) -> bool:
    value = os.environ.get(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


def _database_url() -> str:
    url = os.environ.get(DATABASE_URL_ENV, "").strip()
    if url:
        return url
    path = _env_str(DB_PATH_ENV, str(DEFAULT_DB_PATH))
    return f"sqlite:///{path}"


@cache
def load_settings() -> Settings:
    """Build :class:`Settings` from ``FINANCE_*`` environment variables.

    Blank variables fall back to the defaults. The result is cached; call
    ``load_settings.cache_clear()`` after changing the environment.
    """

    return Settings(
        database_url=_database_url(),
        session_secret=_env_str(SESSION_SECRET_ENV, DEFAULT_SESSION_SECRET),
        session_cookie=_env_str(SESSION_COOKIE_ENV, DEFAULT_SESSION_COOKIE),
        cors_origins=_env_list(CORS_ORIGINS_ENV, DEFAULT_CORS_ORIGINS),
        log_level=_env_str(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper(),
        json_logs=_env_flag(JSON_LOGS_ENV),
        log_path=Path(_env_str(LOG_PATH_ENV, str(DEFAULT_LOG_PATH))),
    )


__all__ = ["Settings", "load_settings"]
