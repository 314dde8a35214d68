"""ORDER BY validation against a filter catalog."""

import dataclasses
from collections.abc import Sequence
from typing import Any

from msgspec import Struct, structs

from dqkit.exceptions import OrderByError
from dqkit.filters import Filter, is_field_filter
from dqkit.utils.logging import get_logger

__all__ = ("ORDER_DIRECTIONS", "is_model_field", "order_validation", "resolve_order_direction")

logger = get_logger("ordering")

ORDER_DIRECTIONS = ("ASC", "DESC")


def resolve_order_direction(direction: str, default: str = "ASC") -> str:
    normalized = direction.strip().upper()
    return normalized if normalized in ORDER_DIRECTIONS else default


def order_validation(order_by: str, direction: str, filters: Sequence[Filter], default_direction: str = "ASC") -> str:
    """Resolve a client-supplied sort into a safe ``ORDER BY`` term.

    The field may be given as a filter name or as its ``db_field``. Unknown or
    empty fields fall back to the first filter of the catalog, and unknown
    directions fall back to ``default_direction``.

    Args:
        order_by: Requested sort field.
        direction: Requested direction, ``asc`` or ``desc`` in any case.
        filters: The filter catalog of the endpoint.
        default_direction: Direction used when ``direction`` is not valid.

    Raises:
        OrderByError: If ``filters`` is empty, leaving nothing to sort on.

    Returns:
        The ``"<db_field> <ASC|DESC>"`` term.
    """
    order_direction = resolve_order_direction(direction, default_direction)
    match = is_field_filter(filters, order_by.strip())
    if match is None:
        if not filters:
            msg = f"Cannot order by {order_by!r}: the filter catalog is empty."
            raise OrderByError(msg)
        match = filters[0]
        logger.warning(
            "order by field is not a filter, using first field instead",
            extra={"extra_fields": {"order_by": order_by, "direction": order_direction, "filter": match.db_field}},
        )
    return f"{match.db_field} {order_direction}"


def _encoded_field_names(model: Any) -> tuple[str, ...]:
    model_type = model if isinstance(model, type) else type(model)
    if issubclass(model_type, Struct):
        return tuple(info.encode_name for info in structs.fields(model_type))
    if dataclasses.is_dataclass(model_type):
        return tuple(item.name for item in dataclasses.fields(model_type))
    msg = f"Expected a dataclass or msgspec.Struct, got {model_type.__name__}"
    raise TypeError(msg)


def is_model_field(model: Any, field: str) -> bool:
    """Check ``field`` against the serialized field names of a response model.

    Useful to accept an ``order_by`` value only when it names a field of the
    rows the endpoint returns. ``msgspec.Struct`` fields are matched by their
    encoded name, so ``rename`` is honoured. Dataclass fields are matched by
    attribute name.

    Args:
        model: A dataclass or ``msgspec.Struct``, as a class or an instance.
        field: Name to look up, compared case-sensitively.

    Raises:
        TypeError: If ``model`` is neither a dataclass nor a ``msgspec.Struct``.
    """
    names = _encoded_field_names(model)
    found = field in names
    logger.debug("checked model field", extra={"extra_fields": {"field": field, "fields": list(names), "found": found}})
    return found
