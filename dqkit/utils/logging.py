# ruff: noqa: PLR6301
"""Logging helpers for dqkit.

Every logger lives under the ``dqkit`` namespace. Records can be rendered as
JSON lines that carry the correlation ID of the request being filtered, so the
filters validated and applied for one request can be grouped together.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import msgspec

from dqkit.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from logging import LogRecord
    from typing import TextIO

__all__ = (
    "ROOT_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "dqkit"
FORMAT_STYLES = ("structured", "simple")
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

correlation_id_var: ContextVar[str | None] = ContextVar("dqkit_correlation_id", default=None)

_json_encoder = msgspec.json.Encoder()
_OWNED_HANDLER_ATTR = "_dqkit_owned"


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set, or None to clear
    """
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Tag every record logged inside the block with ``correlation_id``.

    The previous correlation ID is restored on exit, so scopes can nest.
    """
    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Fields passed through ``extra={"extra_fields": {...}}`` are nested under
    ``context`` so they never overwrite the base fields.
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        context = getattr(record, "extra_fields", None)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return _json_encoder.encode(entry).decode("utf-8")


class CorrelationIDFilter(logging.Filter):
    """Copy the current correlation ID onto each record."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger in the dqkit namespace.

    Args:
        name: Logger name, e.g. ``"params"`` or ``"dqkit.params"``. If not
            provided, returns the root dqkit logger.

    Returns:
        The logger, with a :class:`CorrelationIDFilter` attached.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        msg = f"Unknown log level {level!r}"
        raise ImproperConfigurationError(msg)
    return resolved


def _own(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED_HANDLER_ATTR, True)
    return handler


def configure_logging(
    level: str | int = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure the dqkit logger.

    Calling it again replaces the handlers installed by the previous call;
    handlers attached by other code are left in place.

    Args:
        level: Logging level name or number.
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for text.
        log_to_file: Optional file path to log to. Files always get JSON lines.
        extra_handlers: Additional handlers to add.
        stream: Console stream, standard output by default.

    Raises:
        ImproperConfigurationError: If ``level`` or ``format_style`` is unknown.
    """
    if format_style not in FORMAT_STYLES:
        msg = f"format_style must be one of {FORMAT_STYLES}, got {format_style!r}"
        raise ImproperConfigurationError(msg)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_resolve_level(level))
    for handler in [h for h in root_logger.handlers if getattr(h, _OWNED_HANDLER_ATTR, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = _own(logging.StreamHandler(stream or sys.stdout))
    console_handler.setFormatter(
        StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT)
    )
    root_logger.addHandler(console_handler)

    if log_to_file:
        file_handler = _own(logging.FileHandler(log_to_file))
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for handler in extra_handlers or ():
        root_logger.addHandler(_own(handler))

    root_logger.propagate = False

    root_logger.info(
        "dqkit logging configured",
        extra={
            "extra_fields": {
                "level": logging.getLevelName(root_logger.level),
                "format_style": format_style,
                "handlers_count": len(root_logger.handlers),
            }
        },
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with structured context fields.

    The record points at the caller, not at this helper.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
