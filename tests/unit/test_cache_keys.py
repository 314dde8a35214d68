import pytest

from dqkit.cache_keys import build_cache_key, get_route_key
from dqkit.dynamic import get_params_applied
from dqkit.filters import Filter


@pytest.mark.parametrize(
    ("route", "asset_id", "args", "expected"),
    [
        ("cars", None, (), ("cars", "cars")),
        ("cars", 1, (), ("cars:1", "cars:1")),
        ("cars", 1, ("colors",), ("cars:1:colors", "cars:1")),
        ("properties", 7, ("google_searches", "3"), ("properties:7:google_searches:3", "properties:7")),
        ("cars", None, ("colors",), ("cars:colors", "cars")),
        ("cars", 0, (), ("cars:0", "cars:0")),
    ],
)
def test_get_route_key(route: str, asset_id: "int | None", args: tuple[str, ...], expected: tuple[str, str]) -> None:
    assert get_route_key(route, asset_id, *args) == expected


def test_build_cache_key_without_filters() -> None:
    assert build_cache_key("cars:1", {}) == "cars:1"


def test_build_cache_key() -> None:
    key = build_cache_key("cars", {"limit": "50", "cars.color =": "red"})
    assert key == 'cars:{"cars.color =":"red","limit":"50"}'


def test_cache_key_distinguishes_requests() -> None:
    filters = [
        Filter(name="color", operator="=", db_field="cars.color"),
        Filter(name="seats", operator="IN", db_field="cars.seats"),
    ]

    red = build_cache_key("cars", get_params_applied(filters, {"color": ["red"]}))
    blue = build_cache_key("cars", get_params_applied(filters, {"color": ["blue"]}))
    red_again = build_cache_key("cars", get_params_applied(filters, {"COLOR": "red", "unknown": ["x"]}))
    seats = build_cache_key("cars", get_params_applied(filters, {"seats": ["2", "4"]}))

    assert red != blue
    assert red == red_again
    assert seats == 'cars:{"cars.seats IN":"2,4"}'
