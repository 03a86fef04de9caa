"""
Logging setup shared by the library and the CLI.

Library modules only call `get_logger(__name__)`; handlers are installed by
`configure_logging`, normally from the CLI. Console output goes through
rich; `json_logs=True` switches to one JSON object per line.

Usage:
    from dbfdecode.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    log = get_logger(__name__)
    log.info("opened table", extra={"records": 3})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Attributes present on every LogRecord; anything else came from `extra=`.
_STANDARD_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as a JSON string."""
    payload: dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in record.__dict__.items():
        if key not in _STANDARD_ATTRS and not key.startswith("_"):
            payload[key] = value
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


def _rich_handler() -> logging.Handler:
    """Console handler writing to stderr so stdout stays clean for decoded output."""
    return RichHandler(console=Console(stderr=True), show_path=False)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "WARNING",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Emit JSON lines instead of rich console output.
    force : bool
        Replace an existing configuration. When False and the root logger
        already has handlers (e.g. set up by a host application), do nothing.
    """
    if not force and logging.getLogger().handlers:
        return

    if json_logs:
        handler: dict[str, Any] = {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": level.upper(),
        }
    else:
        handler = {
            "()": _rich_handler,
            "formatter": "console",
            "level": level.upper(),
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": "%(name)s | %(message)s", "datefmt": "%H:%M:%S"},
                "json": {"()": JsonFormatter},
            },
            "handlers": {"default": handler},
            "root": {"handlers": ["default"], "level": level.upper()},
        }
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a named logger (the root logger when name is None)."""
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
