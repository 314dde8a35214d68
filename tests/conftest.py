from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from dqkit.filters import Filter
from dqkit.utils.logging import ROOT_LOGGER_NAME, set_correlation_id

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def restore_dqkit_logger() -> Iterator[None]:
    """Undo handlers, level and propagation changes made by ``configure_logging``."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    set_correlation_id(None)


@pytest.fixture
def booking_filters() -> list[Filter]:
    """Catalog covering every kind of predicate."""
    return [
        Filter(name="country", operator="=", db_field="country.name", field_id="1"),
        Filter(name="stars", operator="IN", db_field="booking.stars", field_id="1"),
        Filter(name="deleted_date", operator="=", db_field="country.deleted_date", field_id="1"),
        Filter(name="created_date", operator="=", db_field="country.created_date", field_id="1"),
        Filter(name="c", operator="<", db_field="SUM(id)", field_id="3"),
        Filter(name="flying", operator="LIKE", db_field="cars.flying", field_id="1"),
        Filter(name="crying", operator="ILIKE", db_field="cars.crying", field_id="1"),
    ]


@pytest.fixture
def booking_params() -> dict[str, list[str]]:
    return {
        "country": ["Greece"],
        "stars": ["1", "2"],
        "deleted_date": ["__NULL__", "France", "Germany"],
        "created_date": ["__NOT_NULL__", "France", "Germany"],
        "c": ["8"],
        "flying": ["cars"],
        "crying": ["TeSlA"],
    }
