"""Cache key helpers.

The cache itself (connections, prefixes, hashing, TTLs) lives outside dqkit.
These helpers only compose the key text from a route and the applied filters.
"""

from typing import TYPE_CHECKING, Optional

from dqkit.dynamic import format_params_applied

if TYPE_CHECKING:
    from dqkit.typing import ParamsApplied

__all__ = ("build_cache_key", "get_route_key")


def get_route_key(route: str, asset_id: Optional[int] = None, *args: str) -> tuple[str, str]:
    """Return the route key and the index key of a route.

    The index key records every route key cached for an asset, so that
    updating the asset can invalidate them together. Sub-resources share the
    index key of their parent asset:

    >>> get_route_key("properties", 1)
    ('properties:1', 'properties:1')
    >>> get_route_key("properties", 1, "google_searches")
    ('properties:1:google_searches', 'properties:1')

    Deeper routes such as ``properties/{id}/google_searches/{other_id}``
    should pass every extra segment in ``args`` and keep the first-level index
    key.
    """
    route_key = route
    if asset_id is not None:
        route_key += f":{asset_id}"
    index_key = route_key

    for arg in args:
        route_key += f":{arg}"

    return route_key, index_key


def build_cache_key(route_key: str, params_applied: "ParamsApplied") -> str:
    """Join a route key and the applied filters into one cache key.

    Requests applying no filters share the bare route key.
    """
    if not params_applied:
        return route_key
    return f"{route_key}:{format_params_applied(params_applied)}"
