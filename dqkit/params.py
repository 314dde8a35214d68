"""Validation of request parameters against a filter catalog.

Request data is untrusted: names that are not in the catalog are ignored and
values are passed through as opaque strings. Type checks are left to the
database, which receives every value as a bound parameter.
"""

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Optional
from urllib.parse import parse_qs

from dqkit.filters import PAGINATION_PARAMS, Filter
from dqkit.typing import NormalizedParams, QueryParams
from dqkit.utils.logging import get_logger

__all__ = (
    "NOT_NULL_TOKEN",
    "NULL_TOKEN",
    "NullCheck",
    "match_params",
    "normalize_params",
    "null_check_for",
    "parse_query_string",
    "validate_params",
    "validate_values",
)

logger = get_logger("params")

NULL_TOKEN = "__NULL__"
NOT_NULL_TOKEN = "__NOT_NULL__"


class NullCheck(Enum):
    """Tagged form of the reserved NULL sentinel values.

    The value of each member is the label used when reporting applied filters.
    """

    IS_NULL = "NULL"
    IS_NOT_NULL = "Not NULL"

    @property
    def operator(self) -> str:
        return "IS NULL" if self is NullCheck.IS_NULL else "IS NOT NULL"

    @classmethod
    def from_token(cls, value: str) -> Optional["NullCheck"]:
        if value == NULL_TOKEN:
            return cls.IS_NULL
        if value == NOT_NULL_TOKEN:
            return cls.IS_NOT_NULL
        return None


SENTINEL_TOKENS = frozenset({NULL_TOKEN, NOT_NULL_TOKEN})


def null_check_for(values: Iterable[str]) -> Optional[NullCheck]:
    """Scan every value for a sentinel token.

    Returns:
        The check for the first sentinel found, or ``None`` when the values are
        all literals.
    """
    for value in values:
        check = NullCheck.from_token(value)
        if check is not None:
            return check
    return None


def normalize_params(params: QueryParams) -> NormalizedParams:
    """Lower-case parameter names and coerce values to lists.

    Names that collide once lower-cased (``Country`` and ``country``) have
    their values concatenated in iteration order. ``params`` is not modified.
    """
    normalized: NormalizedParams = {}
    for name, raw_values in params.items():
        values = [raw_values] if isinstance(raw_values, str) else list(raw_values)
        normalized.setdefault(name.lower(), []).extend(values)
    return normalized


def parse_query_string(query_string: str) -> NormalizedParams:
    """Parse a raw URL query string, keeping blank values.

    >>> parse_query_string("country=Greece&stars=1&stars=2")
    {'country': ['Greece'], 'stars': ['1', '2']}
    """
    return parse_qs(query_string.lstrip("?"), keep_blank_values=True)


def _with_pagination(filters: Sequence[Filter]) -> list[Filter]:
    catalog = list(filters)
    declared = {filter_.name.lower() for filter_ in catalog}
    catalog.extend(Filter.pagination(name) for name in PAGINATION_PARAMS if name not in declared)
    return catalog


def _wrap_wildcards(value: str) -> str:
    if len(value) >= 2 and value.startswith("%") and value.endswith("%"):
        return value
    return f"%{value}%"


def validate_values(filter_values: Mapping[Filter, Sequence[str]]) -> dict[Filter, list[str]]:
    """Apply operator-specific value rewrites.

    ``LIKE``/``ILIKE`` values are wrapped as ``%value%``. Empty values,
    sentinel tokens and values that are already wrapped are left alone, so the
    rewrite is safe to apply twice. Values of every other operator, ``IN``
    included, are returned unchanged.
    """
    validated: dict[Filter, list[str]] = {}
    for filter_, values in filter_values.items():
        if not filter_.is_pattern:
            validated[filter_] = list(values)
            continue
        validated[filter_] = [
            _wrap_wildcards(value) if value and value not in SENTINEL_TOKENS else value for value in values
        ]
    return validated


def match_params(filters: Sequence[Filter], params: QueryParams) -> dict[Filter, list[str]]:
    """Match request parameters against a filter catalog.

    The ``limit`` and ``offset`` pseudo-filters are always accepted, whether or
    not the catalog declares them. Filters are matched by name,
    case-insensitively. Filters without values in the request are dropped, so
    an absent parameter never produces an entry.

    Args:
        filters: The filter catalog of the endpoint.
        params: Raw request parameters.

    Returns:
        Matched filters mapped to a copy of their requested values, in catalog
        order. Values are returned as sent; see :func:`validate_values`.
    """
    normalized = normalize_params(params)
    matched: dict[Filter, list[str]] = {}
    null_checks: dict[str, str] = {}
    for filter_ in _with_pagination(filters):
        values = normalized.get(filter_.name.lower())
        if not values or filter_ in matched:
            continue
        matched[filter_] = list(values)
        check = null_check_for(values)
        if check is not None and not filter_.is_pagination:
            null_checks[filter_.name] = check.value

    if matched:
        logger.debug(
            "validated request parameters",
            extra={
                "extra_fields": {"filters": [filter_.name for filter_ in matched], "null_checks": null_checks},
            },
        )
    return matched


def validate_params(filters: Sequence[Filter], params: QueryParams) -> dict[Filter, list[str]]:
    """Match request parameters against a filter catalog and rewrite their values.

    Same as :func:`match_params` followed by :func:`validate_values`.
    """
    return validate_values(match_params(filters, params))
