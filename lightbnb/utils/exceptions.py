"""
Custom exception classes for the LightBnB data-access layer.
Lets callers tell a failed query apart from a query that found nothing.
"""

from typing import Optional


class DataAccessError(Exception):
    """Base data-access exception class."""

    error_code = "DATA_ACCESS_ERROR"

    def __init__(self, detail: str, statement: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.statement = statement

    def __str__(self) -> str:
        return f"{self.error_code}: {self.detail}"


class ConnectionFailureError(DataAccessError):
    """The pool could not provide a working connection."""

    error_code = "CONNECTION_FAILURE"


class ConstraintViolationError(DataAccessError):
    """A unique, foreign key or check constraint rejected the statement."""

    error_code = "CONSTRAINT_VIOLATION"

    def __init__(
        self,
        detail: str,
        statement: Optional[str] = None,
        constraint: Optional[str] = None
    ):
        super().__init__(detail, statement)
        self.constraint = constraint


class MalformedQueryError(DataAccessError):
    """The database rejected the SQL text or a bound value."""

    error_code = "MALFORMED_QUERY"


class NoRowsError(DataAccessError):
    """A statement that must return a row returned none."""

    error_code = "NO_ROWS"

    def __init__(self, resource: str, statement: Optional[str] = None):
        super().__init__(f"{resource} statement returned no rows", statement)
        self.resource = resource
