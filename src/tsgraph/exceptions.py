"""
tsgraph exceptions module.

Contains exception classes used across multiple modules to avoid circular dependencies.
"""


class TsgraphError(Exception):
    """Base class for all tsgraph errors."""

    pass


class ConfigurationError(TsgraphError):
    """Exception raised when no OpenTSDB host is configured."""

    pass


class ValidationError(TsgraphError):
    """Exception raised when a query request cannot be turned into a query."""

    pass


class TransportError(TsgraphError):
    """Exception raised when the remote metrics store cannot be reached or answers with an error."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(TsgraphError):
    """Exception raised for a structurally malformed response line."""

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message)
        self.line = line
