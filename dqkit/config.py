from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from dqkit.aggregates import DEFAULT_AGGREGATE_FUNCTIONS, AggregateClassifier
from dqkit.dynamic import apply_ordering
from dqkit.exceptions import ImproperConfigurationError
from dqkit.ordering import ORDER_DIRECTIONS
from dqkit.utils import env
from dqkit.utils.logging import FORMAT_STYLES, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dqkit.builder import SelectBuilder
    from dqkit.filters import Filter

__all__ = ("DynamicFilterConfig",)


@dataclass(frozen=True)
class DynamicFilterConfig:
    """Settings shared by the endpoints of one application.

    Attributes:
        aggregate_functions: Function names whose calls are treated as
            aggregates and filtered in HAVING.
        default_order_direction: Direction used by :meth:`apply_ordering` when
            a request asks for no direction or an unknown one.
        log_level: Level of the ``dqkit`` logger.
        log_format: ``"structured"`` (JSON lines) or ``"simple"``.
    """

    aggregate_functions: frozenset[str] = field(default=DEFAULT_AGGREGATE_FUNCTIONS)
    default_order_direction: str = "ASC"
    log_level: str = "INFO"
    log_format: str = "structured"

    def __post_init__(self) -> None:
        direction = self.default_order_direction.strip().upper()
        if direction not in ORDER_DIRECTIONS:
            msg = f"default_order_direction must be ASC or DESC, got {self.default_order_direction!r}"
            raise ImproperConfigurationError(msg)
        if self.log_format not in FORMAT_STYLES:
            msg = f"log_format must be one of {FORMAT_STYLES}, got {self.log_format!r}"
            raise ImproperConfigurationError(msg)
        object.__setattr__(self, "default_order_direction", direction)
        object.__setattr__(self, "aggregate_functions", frozenset(self.aggregate_functions))

    @classmethod
    def from_env(cls, prefix: str = "DQKIT_", **overrides: Any) -> "DynamicFilterConfig":
        """Load settings from environment variables.

        Reads ``{prefix}AGGREGATE_FUNCTIONS`` (comma separated),
        ``{prefix}ORDER_DIRECTION``, ``{prefix}LOG_LEVEL`` and
        ``{prefix}LOG_FORMAT``. Keyword ``overrides`` win over the environment.

        Raises:
            ImproperConfigurationError: If a value is present but not usable.
        """
        functions = env.get_str(f"{prefix}AGGREGATE_FUNCTIONS", "")
        values: dict[str, Any] = {
            "aggregate_functions": (
                frozenset(fn.strip().lower() for fn in functions.split(",") if fn.strip())
                if functions
                else DEFAULT_AGGREGATE_FUNCTIONS
            ),
            "default_order_direction": env.get_str(f"{prefix}ORDER_DIRECTION", "ASC"),
            "log_level": env.get_str(f"{prefix}LOG_LEVEL", "INFO"),
            "log_format": env.get_str(f"{prefix}LOG_FORMAT", "structured"),
        }
        values.update(overrides)
        return cls(**values)

    def classifier(self) -> AggregateClassifier:
        return AggregateClassifier(functions=self.aggregate_functions)

    def configure_logging(self) -> None:
        configure_logging(level=self.log_level, format_style=self.log_format)

    def apply_ordering(
        self, query: "SelectBuilder", filters: "Sequence[Filter]", order_by: str, direction: str = ""
    ) -> "SelectBuilder":
        """Order a copy of ``query`` by a catalog field, using the configured default direction."""
        return apply_ordering(query, filters, order_by, direction, default_direction=self.default_order_direction)
