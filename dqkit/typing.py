from collections.abc import Mapping, Sequence
from typing import Union

from typing_extensions import TypeAlias

__all__ = (
    "NormalizedParams",
    "ParamsApplied",
    "QueryParams",
)

QueryParams: TypeAlias = Mapping[str, Union[str, Sequence[str]]]
"""Raw request parameters: name to one value or an ordered list of values."""

NormalizedParams: TypeAlias = dict[str, list[str]]
"""Request parameters with lower-cased names and list values."""

ParamsApplied: TypeAlias = dict[str, str]
"""Field expression (optionally suffixed with its operator) to bound value text."""
