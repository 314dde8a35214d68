"""Conditional builder.

Turns validated filter/value pairs into :class:`Conditional` objects, each
tagged with the clause it belongs to.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlglot import exp

from dqkit.aggregates import AggregateClassifier, default_classifier
from dqkit.builder import parse_column_expression
from dqkit.exceptions import SQLBuilderError
from dqkit.filters import LIMIT_PARAM, Filter
from dqkit.params import match_params, null_check_for, validate_values
from dqkit.utils.logging import get_logger

if TYPE_CHECKING:
    from dqkit.builder import SelectBuilder
    from dqkit.typing import QueryParams

__all__ = (
    "ClauseTarget",
    "Conditional",
    "build_filter_conditions",
)

logger = get_logger("conditionals")

_COMPARISONS: dict[str, type[exp.Expression]] = {
    "=": exp.EQ,
    "!=": exp.NEQ,
    "<": exp.LT,
    ">": exp.GT,
    "<=": exp.LTE,
    ">=": exp.GTE,
    "LIKE": exp.Like,
    "ILIKE": exp.ILike,
}


class ClauseTarget(Enum):
    WHERE = "where"
    HAVING = "having"
    LIMIT = "limit"
    OFFSET = "offset"


@dataclass(frozen=True)
class Conditional:
    """One predicate, or pagination directive, ready to be applied to a query.

    Attributes:
        field: Left-hand field expression. Empty for pagination directives.
        operator: SQL operator, including ``IS NULL``/``IS NOT NULL``,
            ``LIMIT`` and ``OFFSET``.
        target: Clause the conditional belongs to.
        args: Values bound as parameters, in placeholder order.
        values: Request values the conditional was built from, before
            ``LIKE``/``ILIKE`` wildcard wrapping.
    """

    field: str
    operator: str
    target: ClauseTarget
    args: tuple[Any, ...] = ()
    values: tuple[str, ...] = ()

    @property
    def sql(self) -> str:
        """Placeholder form of the predicate, e.g. ``booking.stars IN (?,?)``."""
        if self.target in {ClauseTarget.LIMIT, ClauseTarget.OFFSET}:
            return f"{self.operator} ?"
        if self.operator == "IN":
            return f"{self.field} IN ({','.join('?' * len(self.args))})"
        if not self.args:
            return f"{self.field} {self.operator}"
        return f"{self.field} {self.operator} ?"

    def to_expression(self, builder: "SelectBuilder") -> exp.Expression:
        """Render the predicate as a sqlglot condition.

        Bound values are registered on ``builder``.

        Raises:
            SQLBuilderError: For pagination directives, which are not predicates.
        """
        if self.target in {ClauseTarget.LIMIT, ClauseTarget.OFFSET}:
            msg = f"{self.operator} conditional cannot be rendered as a predicate."
            raise SQLBuilderError(msg)
        context = self.target.value
        column = parse_column_expression(self.field)
        if self.operator == "IS NULL":
            return exp.Is(this=column, expression=exp.Null())
        if self.operator == "IS NOT NULL":
            return exp.Not(this=exp.Is(this=column, expression=exp.Null()))
        if self.operator == "IN":
            return exp.In(this=column, expressions=[builder.add_parameter(arg, context) for arg in self.args])
        comparison = _COMPARISONS.get(self.operator)
        if comparison is None:
            msg = f"{self.operator} conditional cannot be rendered as a predicate."
            raise SQLBuilderError(msg)
        return comparison(this=column, expression=builder.add_parameter(self.args[0], context))


def _pagination_conditional(filter_: Filter, values: list[str]) -> Conditional:
    is_limit = filter_.name.lower() == LIMIT_PARAM
    return Conditional(
        field="",
        operator="LIMIT" if is_limit else "OFFSET",
        target=ClauseTarget.LIMIT if is_limit else ClauseTarget.OFFSET,
        args=(values[0],),
        values=(values[0],),
    )


def build_filter_conditions(
    filters: Sequence[Filter],
    params: "QueryParams",
    classifier: Optional[AggregateClassifier] = None,
) -> list[Conditional]:
    """Build the conditionals requested by ``params``.

    For each matched filter:

    - ``limit``/``offset`` give one pagination conditional bound to the first
      value.
    - A ``__NULL__`` or ``__NOT_NULL__`` token anywhere in the values gives a
      single ``IS NULL``/``IS NOT NULL`` WHERE conditional and nothing else.
    - ``IN`` gives one WHERE conditional bound to every value.
    - Any other operator gives one conditional per value, in HAVING when the
      field is an aggregate and in WHERE otherwise.

    The conditionals are AND-combined when applied, so only membership
    matters; the list follows catalog order for reproducibility.
    """
    classifier = classifier or default_classifier
    conditionals: list[Conditional] = []

    matched = match_params(filters, params)
    for filter_, values in validate_values(matched).items():
        raw_values = matched[filter_]
        if filter_.is_pagination:
            conditionals.append(_pagination_conditional(filter_, values))
            continue

        null_check = null_check_for(values)
        if null_check is not None:
            conditionals.append(
                Conditional(
                    field=filter_.db_field,
                    operator=null_check.operator,
                    target=ClauseTarget.WHERE,
                    values=tuple(raw_values),
                )
            )
            continue

        if filter_.operator == "IN":
            conditionals.append(
                Conditional(
                    field=filter_.db_field,
                    operator="IN",
                    target=ClauseTarget.WHERE,
                    args=tuple(values),
                    values=tuple(values),
                )
            )
            continue

        target = ClauseTarget.HAVING if classifier.is_aggregate(filter_.db_field) else ClauseTarget.WHERE
        conditionals.extend(
            Conditional(
                field=filter_.db_field,
                operator=filter_.operator,
                target=target,
                args=(value,),
                values=(raw_value,),
            )
            for value, raw_value in zip(values, raw_values)
        )

    logger.debug("built %d conditionals", len(conditionals))
    return conditionals
