"""Structured JSON logging with execution-slot context.

Uses structlog for structured logging with JSON output.
Every log entry carries the slot currently being executed, if any.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog

# Context var for current-slot propagation
_current_slot: ContextVar[str] = ContextVar("current_slot", default="")


def get_current_slot() -> str:
    """Get the slot bound to this context ("" when none)."""
    return _current_slot.get()


def set_current_slot(slot: object) -> None:
    """Bind *slot* (rendered with ``str``) to this context."""
    _current_slot.set(str(slot))


def clear_current_slot() -> None:
    _current_slot.set("")


def _add_slot(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add the current slot to every log entry."""
    slot = get_current_slot()
    if slot:
        event_dict.setdefault("slot", slot)
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_slot,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def setup_logging_from_settings(settings: Any) -> None:
    """Apply ``settings.observability`` (see ``core.config.Settings``)."""
    obs = settings.observability
    setup_logging(level=obs.log_level, format=obs.log_format)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
