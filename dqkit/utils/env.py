"""Environment variable readers with fallbacks.

A missing variable always yields the fallback. A present but unparsable value
also yields the fallback and is reported as a warning, so a typo in a
deployment never stops the service from starting.
"""

import os
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dqkit.utils.logging import get_logger

__all__ = (
    "get_bool",
    "get_date",
    "get_duration",
    "get_int",
    "get_str",
    "parse_duration",
)

logger = get_logger("utils.env")

_TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})

# Go-style durations: "300ms", "1.5h", "2h45m", "-1m30s"
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS_US = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}


def _warn_fallback(key: str, value: str, kind: str) -> None:
    logger.warning("invalid %s in environment variable %s=%r, using fallback", kind, key, value)


def get_str(key: str, fallback: str) -> str:
    return os.environ.get(key, fallback)


def get_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        _warn_fallback(key, value, "integer")
        return fallback


def get_bool(key: str, fallback: bool) -> bool:
    """Read a boolean flag.

    Accepts the usual spellings (``1``/``0``, ``true``/``false``, ``yes``/``no``,
    ``on``/``off``), case-insensitively.
    """
    value = os.environ.get(key)
    if value is None:
        return fallback
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    _warn_fallback(key, value, "boolean")
    return fallback


def parse_duration(value: str) -> Optional[timedelta]:
    """Parse a Go-style duration string.

    Args:
        value: A duration such as ``"90s"``, ``"1h30m"`` or ``"-2.5h"``.

    Returns:
        The parsed duration, or ``None`` when ``value`` is not a valid duration.
    """
    text = value.strip()
    sign = 1
    if text[:1] in {"+", "-"}:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        return None

    microseconds = 0.0
    position = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != position:
            return None
        microseconds += _DURATION_UNITS_US[match.group(2)] * float(match.group(1))
        position = match.end()
    if position != len(text):
        return None
    return timedelta(microseconds=microseconds * sign)


def get_duration(key: str, fallback: timedelta) -> timedelta:
    value = os.environ.get(key)
    if value is None:
        return fallback
    parsed = parse_duration(value)
    if parsed is None:
        _warn_fallback(key, value, "duration")
        return fallback
    return parsed


def get_date(key: str, fallback: date) -> date:
    """Read a ``YYYY-MM-DD`` date."""
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        _warn_fallback(key, value, "date")
        return fallback
