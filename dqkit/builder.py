"""Safe SELECT builder with parameter binding.

A thin fluent layer over sqlglot expressions. Every value that comes from a
request is bound as a parameter; only programmer-declared field expressions
are parsed into the statement itself.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import sqlglot
from sqlglot import exp
from sqlglot.dialects.dialect import DialectType
from sqlglot.errors import ParseError, TokenError
from typing_extensions import Self

from dqkit.exceptions import SQLBuilderError
from dqkit.utils.logging import get_logger

__all__ = (
    "SafeQuery",
    "SelectBuilder",
    "get_pagination_query",
    "parse_column_expression",
    "select",
)

logger = get_logger("builder")

_QMARK_MARKER = "__dqk_{name}__"
_QMARK_MARKER_RE = re.compile(r"__dqk_([A-Za-z0-9]+(?:_[A-Za-z0-9]+)*)__")


def parse_column_expression(column_input: Union[str, exp.Expression]) -> exp.Expression:
    """Parse a field expression that might be more than a bare column.

    Handles cases like:
    - Simple column names: "name" -> Column(this=name)
    - Qualified names: "users.name" -> Column(table=users, this=name)
    - Function calls: "MAX(price)" -> Max(this=Column(price))

    Strings sqlglot cannot parse are treated as a single column name.
    """
    if isinstance(column_input, exp.Expression):
        return column_input.copy()

    text = column_input.strip()
    try:
        parsed = sqlglot.parse_one(text)
    except (ParseError, TokenError):
        logger.debug("treating unparsable field expression as a column name", extra={"extra_fields": {"field": text}})
        return exp.to_column(text)
    return parsed


@dataclass(frozen=True)
class SafeQuery:
    """A safely constructed SQL query with bound parameters."""

    sql: str
    parameters: dict[str, Any] = field(default_factory=dict)
    dialect: Optional[DialectType] = None


@dataclass
class SelectBuilder:
    """Fluent builder for ``SELECT`` statements.

    Methods modify the builder in place and return it for chaining. Use
    :meth:`copy` to derive a statement from a shared base query.
    """

    dialect: DialectType = field(default=None)
    _expression: exp.Select = field(default_factory=exp.Select, init=False, repr=False, compare=False)
    _parameters: dict[str, Any] = field(default_factory=dict, init=False, repr=False, compare=False)
    _parameter_counter: int = field(default=0, init=False, repr=False, compare=False)

    @property
    def expression(self) -> exp.Select:
        return self._expression

    @property
    def parameters(self) -> dict[str, Any]:
        return dict(self._parameters)

    def copy(self) -> "SelectBuilder":
        clone = SelectBuilder(dialect=self.dialect)
        clone._expression = self._expression.copy()
        clone._parameters = dict(self._parameters)
        clone._parameter_counter = self._parameter_counter
        return clone

    def add_parameter(self, value: Any, context: Optional[str] = None) -> exp.Placeholder:
        """Bind a value and return the placeholder referencing it.

        Args:
            value: The value of the parameter.
            context: Optional hint used in the generated name, e.g. ``"where"``.

        Returns:
            A named placeholder expression for the new parameter.
        """
        self._parameter_counter += 1
        name = f"{context}_param_{self._parameter_counter}" if context else f"param_{self._parameter_counter}"
        self._parameters[name] = value
        return exp.Placeholder(this=name)

    def select(self, *columns: Union[str, exp.Expression]) -> Self:
        self._expression = self._expression.select(*(parse_column_expression(c) for c in columns), copy=False)
        return self

    def from_(self, table: Union[str, exp.Expression]) -> Self:
        self._expression = self._expression.from_(table, dialect=self.dialect, copy=False)
        return self

    def join(self, table: Union[str, exp.Expression], on: Union[str, exp.Expression], join_type: str = "") -> Self:
        self._expression = self._expression.join(table, on=on, join_type=join_type or None, dialect=self.dialect, copy=False)
        return self

    def group_by(self, *columns: Union[str, exp.Expression]) -> Self:
        self._expression = self._expression.group_by(*(parse_column_expression(c) for c in columns), copy=False)
        return self

    def where(self, condition: exp.Expression) -> Self:
        """AND a condition onto the WHERE clause."""
        self._expression = self._expression.where(condition, copy=False)
        return self

    def having(self, condition: exp.Expression) -> Self:
        """AND a condition onto the HAVING clause."""
        self._expression = self._expression.having(condition, copy=False)
        return self

    def order_by(self, column: Union[str, exp.Expression], desc: bool = False) -> Self:
        expression = parse_column_expression(column)
        ordered = expression.desc() if desc else expression.asc()
        self._expression = self._expression.order_by(ordered, copy=False)
        return self

    def limit(self, value: Any) -> Self:
        """Set LIMIT, binding ``value`` as a parameter."""
        self._expression = self._expression.limit(self.add_parameter(value, "limit"), copy=False)
        return self

    def offset(self, value: Any) -> Self:
        """Set OFFSET, binding ``value`` as a parameter."""
        self._expression = self._expression.offset(self.add_parameter(value, "offset"), copy=False)
        return self

    def build(self) -> SafeQuery:
        """Render the statement with named placeholders.

        Raises:
            SQLBuilderError: If sqlglot cannot generate SQL for the expression.
        """
        try:
            sql = self._expression.sql(dialect=self.dialect)
        except Exception as e:
            msg = f"Error generating SQL from expression: {e!s}"
            raise SQLBuilderError(msg) from e
        return SafeQuery(sql=sql, parameters=dict(self._parameters), dialect=self.dialect)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render the statement with ``?`` placeholders.

        Returns:
            The SQL text and the bound values in placeholder order.
        """

        def _mark(node: exp.Expression) -> exp.Expression:
            if isinstance(node, exp.Placeholder) and node.name in self._parameters:
                return exp.var(_QMARK_MARKER.format(name=node.name))
            return node

        marked = self._expression.transform(_mark, copy=True)
        try:
            sql = marked.sql(dialect=self.dialect)
        except Exception as e:
            msg = f"Error generating SQL from expression: {e!s}"
            raise SQLBuilderError(msg) from e

        args: list[Any] = []

        def _replace(match: "re.Match[str]") -> str:
            args.append(self._parameters[match.group(1)])
            return "?"

        return _QMARK_MARKER_RE.sub(_replace, sql), args


def select(*columns: Union[str, exp.Expression], dialect: DialectType = None) -> SelectBuilder:
    """Start a new ``SELECT`` statement."""
    builder = SelectBuilder(dialect=dialect)
    if columns:
        builder.select(*columns)
    return builder


def get_pagination_query(query: SelectBuilder) -> SelectBuilder:
    """Wrap a query to count its total rows.

    The wrapped copy keeps its filters and bound parameters but drops LIMIT,
    OFFSET and ORDER BY, so the count covers every page::

        SELECT COUNT(*) AS total_rows FROM (<query>) AS grouped_results
    """
    inner = query.copy()
    for arg in ("limit", "offset", "order"):
        inner._expression.set(arg, None)
    pagination_params = {name for name in inner._parameters if name.startswith(("limit_", "offset_"))}
    for name in pagination_params:
        del inner._parameters[name]

    counter = SelectBuilder(dialect=query.dialect)
    counter._expression = exp.select(exp.alias_(exp.Count(this=exp.Star()), "total_rows")).from_(
        inner._expression.subquery("grouped_results", copy=False), copy=False
    )
    counter._parameters = inner._parameters
    counter._parameter_counter = inner._parameter_counter
    return counter
