"""Filter catalog datastructures.

A filter catalog is the programmer-declared list of :class:`Filter` entries an
endpoint accepts as query parameters. Catalogs are built once at route
registration and shared read-only between requests.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from dqkit.exceptions import FilterDefinitionError

__all__ = (
    "LIMIT_PARAM",
    "OFFSET_PARAM",
    "OPERATORS",
    "PAGINATION_PARAMS",
    "PATTERN_OPERATORS",
    "Filter",
    "extend_filters",
    "is_field_filter",
    "merge_filters",
)

OPERATORS = frozenset({"=", "!=", "<", ">", "<=", ">=", "LIKE", "ILIKE", "IN"})
"""Comparison operators a filter may declare."""

PATTERN_OPERATORS = frozenset({"LIKE", "ILIKE"})
"""Operators whose values are wrapped in ``%`` wildcards."""

LIMIT_PARAM = "limit"
OFFSET_PARAM = "offset"
PAGINATION_PARAMS = (LIMIT_PARAM, OFFSET_PARAM)


@dataclass(frozen=True)
class Filter:
    """A queryable field declared by an endpoint.

    Two filters are equal when all four attributes are equal, which makes them
    usable as mapping keys.

    Attributes:
        name: Query parameter name as sent by the client.
        operator: One of :data:`OPERATORS`. Stored upper-cased.
        db_field: Field expression the operator applies to, e.g. ``country.name``
            or an aggregate such as ``SUM(price)``.
        field_id: Opaque identifier for client-side correlation. Not used when
            building predicates.
    """

    name: str
    operator: str
    db_field: str
    field_id: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Filter name cannot be empty."
            raise FilterDefinitionError(msg)
        operator = self.operator.strip().upper()
        if operator not in OPERATORS and not (operator == "" and self.is_pagination):
            msg = f"Unsupported operator {self.operator!r} for filter {self.name!r}."
            raise FilterDefinitionError(msg)
        object.__setattr__(self, "operator", operator)

    @classmethod
    def pagination(cls, name: str) -> "Filter":
        """Build the implicit ``limit`` or ``offset`` pseudo-filter."""
        if name.lower() not in PAGINATION_PARAMS:
            msg = f"{name!r} is not a pagination parameter."
            raise FilterDefinitionError(msg)
        return cls(name=name.lower(), operator="", db_field="", field_id="")

    @property
    def is_pagination(self) -> bool:
        return self.name.lower() in PAGINATION_PARAMS

    @property
    def is_pattern(self) -> bool:
        return self.operator in PATTERN_OPERATORS


def is_field_filter(filters: Sequence[Filter], field: str) -> Optional[Filter]:
    """Find the filter a field refers to.

    Args:
        filters: The filter catalog.
        field: A filter name or a database field expression.

    Returns:
        The first filter whose name or ``db_field`` matches ``field``
        case-insensitively, or ``None``.
    """
    if not field:
        return None
    wanted = field.lower()
    for filter_ in filters:
        if filter_.name.lower() == wanted or filter_.db_field.lower() == wanted:
            return filter_
    return None


def extend_filters(filter_lists: Iterable[Sequence[Filter]]) -> list[Filter]:
    """Flatten several filter catalogs into one.

    Entries keep the order of ``filter_lists``, so reusable route components
    can be combined into the catalog of a single endpoint.
    """
    combination: list[Filter] = []
    for filter_list in filter_lists:
        combination.extend(filter_list)
    return combination


def merge_filters(first: Sequence[Filter], second: Sequence[Filter]) -> list[Filter]:
    """Combine two catalogs, shorter one first.

    On equal length the entries of ``second`` come first. Predicates are
    AND-combined so the order never changes query results, but it decides which
    filter :func:`dqkit.ordering.order_validation` falls back to.
    """
    if len(first) < len(second):
        return [*first, *second]
    return [*second, *first]
