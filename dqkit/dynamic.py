"""Apply dynamic filters to a query.

``dynamic_filters`` is the entry point used by route handlers: it takes the
endpoint's filter catalog, a base query and the raw request parameters, and
returns the filtered query together with the applied-filters mapping used to
derive cache keys.
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

import msgspec
from sqlglot import exp

from dqkit.conditionals import ClauseTarget, Conditional, build_filter_conditions
from dqkit.filters import Filter
from dqkit.ordering import order_validation
from dqkit.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from dqkit.aggregates import AggregateClassifier
    from dqkit.builder import SelectBuilder
    from dqkit.typing import ParamsApplied, QueryParams

__all__ = (
    "apply_conditionals",
    "apply_ordering",
    "dynamic_filters",
    "format_params_applied",
    "get_params_applied",
)

logger = get_logger("dynamic")

_json_encoder = msgspec.json.Encoder()


def _params_applied(conditionals: "Sequence[Conditional]") -> "ParamsApplied":
    applied: ParamsApplied = {}
    for conditional in conditionals:
        if conditional.target in {ClauseTarget.LIMIT, ClauseTarget.OFFSET}:
            applied[conditional.target.value] = str(conditional.args[0])
        elif not conditional.args:
            applied[conditional.field] = conditional.operator
        else:
            key = f"{conditional.field} {conditional.operator}"
            value = ",".join(str(arg) for arg in conditional.args)
            applied[key] = f"{applied[key]},{value}" if key in applied else value
    return applied


def get_params_applied(
    filters: Sequence[Filter],
    params: "QueryParams",
    classifier: "Optional[AggregateClassifier]" = None,
) -> "ParamsApplied":
    """Describe the filters a request applies.

    Keys are ``"<field> <operator>"`` (``"<field>"`` for NULL checks,
    ``"limit"``/``"offset"`` for pagination). Values are the bound values
    joined by commas, or ``IS NULL``/``IS NOT NULL``. Two requests that apply
    the same filters give equal mappings.
    """
    return _params_applied(build_filter_conditions(filters, params, classifier))


def format_params_applied(params_applied: "ParamsApplied") -> str:
    """Encode an applied-filters mapping as a canonical cache-key fragment.

    >>> format_params_applied({"country.name =": "Greece", "limit": "50"})
    '{"country.name =":"Greece","limit":"50"}'
    """
    return _json_encoder.encode(dict(sorted(params_applied.items()))).decode("utf-8")


def _and_all(builder: "SelectBuilder", conditionals: "Sequence[Conditional]") -> "Optional[exp.Expression]":
    expressions = [conditional.to_expression(builder) for conditional in conditionals]
    if not expressions:
        return None
    return exp.and_(*expressions, copy=False)


def apply_conditionals(query: "SelectBuilder", conditionals: "Sequence[Conditional]") -> "SelectBuilder":
    """Attach conditionals to ``query`` in place.

    WHERE conditionals become one AND-combined row filter, HAVING conditionals
    one AND-combined group filter. LIMIT and OFFSET set the pagination.
    """
    where = _and_all(query, [c for c in conditionals if c.target is ClauseTarget.WHERE])
    if where is not None:
        query.where(where)
    having = _and_all(query, [c for c in conditionals if c.target is ClauseTarget.HAVING])
    if having is not None:
        query.having(having)
    for conditional in conditionals:
        if conditional.target is ClauseTarget.LIMIT:
            query.limit(conditional.args[0])
        elif conditional.target is ClauseTarget.OFFSET:
            query.offset(conditional.args[0])
    return query


def dynamic_filters(
    filters: Sequence[Filter],
    query: "SelectBuilder",
    params: "QueryParams",
    classifier: "Optional[AggregateClassifier]" = None,
) -> "tuple[SelectBuilder, ParamsApplied]":
    """Apply the filters requested by ``params`` to a copy of ``query``.

    All conditions are AND-combined, in both the WHERE and the HAVING clause.
    Nothing stops a client from repeating a parameter: ``?price=1&price=2``
    with ``=`` requires both, which matches no rows.

    Args:
        filters: The filter catalog of the endpoint.
        query: Base query. It is not modified, so it can be shared between
            requests.
        params: Raw request parameters, e.g. ``parse_qs`` output.
        classifier: Aggregate vocabulary; defaults to the built-in functions.

    Returns:
        The filtered query and the applied-filters mapping.
    """
    conditionals = build_filter_conditions(filters, params, classifier)
    filtered = apply_conditionals(query.copy(), conditionals)
    params_applied = _params_applied(conditionals)
    log_with_context(logger, logging.DEBUG, "applied dynamic filters", params_applied=params_applied)
    return filtered, params_applied


def apply_ordering(
    query: "SelectBuilder",
    filters: Sequence[Filter],
    order_by: str,
    direction: str = "",
    default_direction: str = "ASC",
) -> "SelectBuilder":
    """Return a copy of ``query`` ordered by a validated catalog field.

    A missing or unknown ``direction`` falls back to ``default_direction``.

    Raises:
        OrderByError: If the catalog is empty.
    """
    term = order_validation(order_by, direction, filters, default_direction=default_direction)
    field, _, order_direction = term.rpartition(" ")
    return query.copy().order_by(field, desc=order_direction == "DESC")
