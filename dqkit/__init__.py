"""dqkit: dynamic, parameterized SQL filters from request query parameters."""

from dqkit import aggregates, builder, cache_keys, conditionals, dynamic, exceptions, filters, ordering, params, utils
from dqkit.__metadata__ import __version__
from dqkit.aggregates import DEFAULT_AGGREGATE_FUNCTIONS, AggregateClassifier, are_filters_aggregate, is_aggregate
from dqkit.builder import SafeQuery, SelectBuilder, get_pagination_query, select
from dqkit.cache_keys import build_cache_key, get_route_key
from dqkit.conditionals import ClauseTarget, Conditional, build_filter_conditions
from dqkit.config import DynamicFilterConfig
from dqkit.dynamic import (
    apply_conditionals,
    apply_ordering,
    dynamic_filters,
    format_params_applied,
    get_params_applied,
)
from dqkit.exceptions import (
    DQKitError,
    FilterDefinitionError,
    ImproperConfigurationError,
    OrderByError,
    SQLBuilderError,
)
from dqkit.filters import Filter, extend_filters, is_field_filter, merge_filters
from dqkit.ordering import is_model_field, order_validation
from dqkit.params import (
    NOT_NULL_TOKEN,
    NULL_TOKEN,
    NullCheck,
    match_params,
    normalize_params,
    null_check_for,
    parse_query_string,
    validate_params,
    validate_values,
)

__all__ = (
    "DEFAULT_AGGREGATE_FUNCTIONS",
    "NOT_NULL_TOKEN",
    "NULL_TOKEN",
    "AggregateClassifier",
    "ClauseTarget",
    "Conditional",
    "DQKitError",
    "DynamicFilterConfig",
    "Filter",
    "FilterDefinitionError",
    "ImproperConfigurationError",
    "NullCheck",
    "OrderByError",
    "SQLBuilderError",
    "SafeQuery",
    "SelectBuilder",
    "__version__",
    "aggregates",
    "apply_conditionals",
    "apply_ordering",
    "are_filters_aggregate",
    "build_cache_key",
    "build_filter_conditions",
    "builder",
    "cache_keys",
    "conditionals",
    "dynamic",
    "dynamic_filters",
    "exceptions",
    "extend_filters",
    "filters",
    "format_params_applied",
    "get_pagination_query",
    "get_params_applied",
    "get_route_key",
    "is_aggregate",
    "is_field_filter",
    "is_model_field",
    "match_params",
    "merge_filters",
    "normalize_params",
    "null_check_for",
    "order_validation",
    "ordering",
    "params",
    "parse_query_string",
    "select",
    "utils",
    "validate_params",
    "validate_values",
)
