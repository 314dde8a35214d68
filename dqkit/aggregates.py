"""Classification of aggregate field expressions.

Predicates on aggregates (``SUM(price) > ?``) are only valid in a HAVING
clause, so every filter is classified before its conditional is targeted.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dqkit.filters import Filter

__all__ = (
    "DEFAULT_AGGREGATE_FUNCTIONS",
    "AggregateClassifier",
    "are_filters_aggregate",
    "default_classifier",
    "is_aggregate",
)

DEFAULT_AGGREGATE_FUNCTIONS = frozenset({"count", "sum", "min", "max", "stddev", "variance"})


@dataclass(frozen=True)
class AggregateClassifier:
    """Decide whether a field expression is an aggregate function call.

    An expression is aggregate when, lower-cased, it starts with one of
    ``functions`` immediately followed by ``(``. ``MAX(value)`` is aggregate,
    ``MAXvalue`` and ``max.value`` are not.

    Args:
        functions: Lower-case aggregate function names. Pass a different set to
            give a catalog its own vocabulary, e.g. adding ``avg``.
    """

    functions: frozenset[str] = DEFAULT_AGGREGATE_FUNCTIONS
    _prefixes: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        functions = frozenset(fn.strip().lower() for fn in self.functions if fn.strip())
        object.__setattr__(self, "functions", functions)
        object.__setattr__(self, "_prefixes", tuple(f"{fn}(" for fn in sorted(functions)))

    def is_aggregate(self, field_expression: str) -> bool:
        return field_expression.lstrip().lower().startswith(self._prefixes)

    def are_filters_aggregate(self, filters: "Iterable[Filter]") -> bool:
        """Return True if any of the filters targets an aggregate expression."""
        return any(self.is_aggregate(filter_.db_field) for filter_ in filters)


default_classifier = AggregateClassifier()


def is_aggregate(field_expression: str) -> bool:
    return default_classifier.is_aggregate(field_expression)


def are_filters_aggregate(filters: "Iterable[Filter]") -> bool:
    return default_classifier.are_filters_aggregate(filters)
