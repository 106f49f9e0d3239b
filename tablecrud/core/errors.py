"""Table accessor error classes.

Errors raised by the accessor itself. Failures surfaced by the database
engine (constraint violations, connectivity) are never wrapped and reach
the caller as SQLAlchemy exceptions.
"""

from typing import Any


class TableCrudError(Exception):
    """Base class for accessor errors.

    All accessor errors have a code, message, and HTTP status.
    Subclasses set the default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "MISSING_QUERY").
        message: Human-readable error message.
        status_code: HTTP status code used by the FastAPI error handler.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ConfigurationError(TableCrudError):
    """Accessor is misconfigured (500).

    Raised for a missing table name, a missing or invalid engine binding,
    an unknown table or primary key, or an unsupported insert strategy.
    Not recoverable at runtime.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
        )


class InvalidArgumentError(TableCrudError):
    """Caller passed an unusable argument (400).

    Use for unknown column names and negative limit/offset values.
    """

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_ARGUMENT",
            message=message,
            status_code=400,
            details=details,
        )


class MissingQueryError(InvalidArgumentError):
    """A composition primitive received no query (400).

    This is a programmer error: the primitives always need a query to
    build on.
    """

    def __init__(self, message: str = "Missing query") -> None:
        TableCrudError.__init__(
            self,
            code="MISSING_QUERY",
            message=message,
            status_code=400,
        )


class MissingDataError(TableCrudError):
    """Insert or update called with an empty payload (400)."""

    def __init__(self, message: str = "Missing data") -> None:
        super().__init__(
            code="MISSING_DATA",
            message=message,
            status_code=400,
        )


class RecordNotFoundError(TableCrudError):
    """Record not found (404).

    Only raised by the HTTP surface. Accessor lookups report a missing
    record as None or False, not as an error.
    """

    def __init__(self, table: str, value: str) -> None:
        super().__init__(
            code="NOT_FOUND",
            message=f"{table} with key {value!r} not found",
            status_code=404,
        )
