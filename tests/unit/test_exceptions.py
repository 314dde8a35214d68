import pytest

from dqkit.exceptions import (
    DQKitError,
    FilterDefinitionError,
    ImproperConfigurationError,
    OrderByError,
    SQLBuilderError,
)


def test_exception_hierarchy() -> None:
    """Every dqkit exception derives from DQKitError."""
    assert issubclass(FilterDefinitionError, DQKitError)
    assert issubclass(OrderByError, DQKitError)
    assert issubclass(SQLBuilderError, DQKitError)
    assert issubclass(ImproperConfigurationError, DQKitError)


def test_exception_instantiation() -> None:
    exc = OrderByError("catalog is empty")
    assert str(exc) == "catalog is empty"
    assert exc.detail == "catalog is empty"
    assert repr(exc) == "OrderByError - catalog is empty"


@pytest.mark.parametrize(
    ("exc_type", "default_message"),
    [
        (FilterDefinitionError, "Invalid filter definition."),
        (OrderByError, "Unable to resolve order by field."),
        (SQLBuilderError, "Issues building SQL statement."),
    ],
)
def test_default_messages(exc_type: type[DQKitError], default_message: str) -> None:
    assert str(exc_type()) == default_message


def test_detail_keyword() -> None:
    exc = ImproperConfigurationError(detail="bad value")
    assert str(exc) == "bad value"


def test_exception_chaining() -> None:
    """Exceptions support chaining with 'from'."""
    with pytest.raises(SQLBuilderError) as exc_info:
        try:
            raise ValueError("Original error")
        except ValueError as e:
            raise SQLBuilderError("Mapped error") from e
    assert isinstance(exc_info.value.__cause__, ValueError)
