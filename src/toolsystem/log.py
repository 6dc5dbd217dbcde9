"""Logging setup for toolsystem.

Modules log through stdlib loggers under the ``toolsystem`` namespace
(``toolsystem.registry``, ``toolsystem.tools``). Nothing is emitted until
the application configures logging, either with its own handlers or via
`configure_logging()`:

    >>> from toolsystem.log import configure_logging
    >>> configure_logging(level="DEBUG")          # human-readable
    >>> configure_logging(format="json")          # JSON lines for aggregation
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from .settings import get_settings

ROOT_LOGGER = "toolsystem"

# LogRecord attributes that are not user-supplied `extra=` fields
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, event, plus any extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        entry.update((k, v) for k, v in record.__dict__.items() if k not in _RESERVED)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the toolsystem namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - matches settings field name
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Attach a single stream handler to the toolsystem logger.

    Defaults come from `ToolSystemSettings.logging`. Calling again replaces
    the previously installed handler.
    """
    settings = get_settings().logging
    level = (level or settings.level).upper()
    format = format or settings.format
    match format:
        case "json": formatter: logging.Formatter = JsonFormatter()
        case "text": formatter = logging.Formatter(_TEXT_FORMAT)
        case _: raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    handler._toolsystem = True  # type: ignore[attr-defined]

    root = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in root.handlers if getattr(h, "_toolsystem", False)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return handler
