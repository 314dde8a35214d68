from typing import Any, Optional

__all__ = (
    "DQKitError",
    "FilterDefinitionError",
    "ImproperConfigurationError",
    "OrderByError",
    "SQLBuilderError",
)


class DQKitError(Exception):
    """Base exception class from which all dqkit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``DQKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class FilterDefinitionError(DQKitError):
    """A filter was declared with an unsupported operator or an empty name."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Invalid filter definition."
        super().__init__(message)


class OrderByError(DQKitError):
    """An ORDER BY clause could not be resolved against the filter catalog."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Unable to resolve order by field."
        super().__init__(message)


class SQLBuilderError(DQKitError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ImproperConfigurationError(DQKitError):
    """Improper Configuration error.

    Raised when a configuration value is present but cannot be used.
    """
