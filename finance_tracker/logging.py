"""Structured logging helpers for the finance tracker backend."""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Final

from .config import Settings

CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL: Final[str] = "INFO"
REQUEST_FIELDS: Final[tuple[str, ...]] = (
    "request_method",
    "request_path",
    "owner_id",
    "expense_id",
)


class JsonAuditFormatter(logging.Formatter):
    """Render log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat()
        payload: dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        for field in REQUEST_FIELDS:
            payload[field] = getattr(record, field, None)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestLogAdapter(logging.LoggerAdapter):
    """Logger adapter carrying request-scoped context into every record.

    Unlike the stock adapter, per-call ``extra`` values are merged on top of
    the request context instead of replacing it.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs



CONSOLE_HANDLER_NAME: Final[str] = "finance_tracker.console"
JSON_HANDLER_NAME: Final[str] = "finance_tracker.json"


def level_number(level: str | int) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _named_handler(logger: logging.Logger, name: str) -> logging.Handler | None:
    return next((handler for handler in logger.handlers if handler.get_name() == name), None)


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _json_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name(JSON_HANDLER_NAME)
    handler.setFormatter(JsonAuditFormatter())
    return handler


def setup_logger(
    name: str,
    level: str | int = DEFAULT_LEVEL,
    json_path: Path | None = None,
) -> logging.Logger:
    """Configure ``name`` with a console handler and, given ``json_path``, a JSON file handler.

    Handlers are looked up by name, so calling this again only updates the
    level. A JSON handler attached earlier is dropped when ``json_path`` is
    ``None``.
    """

    numeric_level = level_number(level)
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    # Keep propagation so pytest's caplog still sees the records.
    logger.propagate = True

    console = _named_handler(logger, CONSOLE_HANDLER_NAME)
    if console is None:
        console = _console_handler()
        logger.addHandler(console)
    console.setLevel(numeric_level)

    json_handler = _named_handler(logger, JSON_HANDLER_NAME)
    if json_path is None:
        if json_handler is not None:
            logger.removeHandler(json_handler)
            json_handler.close()
    else:
        if json_handler is None:
            json_handler = _json_handler(json_path)
            logger.addHandler(json_handler)
        json_handler.setLevel(numeric_level)
    return logger


def configure_logging(
    settings: Settings,
    *,
    level: str | int | None = None,
    json_logs: bool | None = None,
) -> logging.Logger:
    """Configure the package logger from ``settings``.

    ``level`` and ``json_logs`` override the settings when given, which is how
    command line flags take precedence over the environment.
    """

    use_json = settings.json_logs if json_logs is None else json_logs
    return setup_logger(
        "finance_tracker",
        level=settings.log_level if level is None else level,
        json_path=settings.log_path if use_json else None,
    )


def request_logger(name: str, method: str, path: str) -> RequestLogAdapter:
    """Return an adapter that stamps ``method`` and ``path`` on each record."""

    return RequestLogAdapter(
        logging.getLogger(name),
        {"request_method": method, "request_path": path},
    )


__all__ = [
    "JsonAuditFormatter",
    "RequestLogAdapter",
    "configure_logging",
    "level_number",
    "request_logger",
    "setup_logger",
]
