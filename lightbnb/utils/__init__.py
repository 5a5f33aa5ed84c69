"""
Utility modules for the LightBnB data-access layer.
"""

from .exceptions import (
    DataAccessError,
    ConnectionFailureError,
    ConstraintViolationError,
    MalformedQueryError,
    NoRowsError
)

from .query_builder import (
    Predicate,
    CompiledQuery,
    ParameterList,
    SearchQueryBuilder,
    build_insert
)

__all__ = [
    # Exceptions
    "DataAccessError",
    "ConnectionFailureError",
    "ConstraintViolationError",
    "MalformedQueryError",
    "NoRowsError",

    # Query building
    "Predicate",
    "CompiledQuery",
    "ParameterList",
    "SearchQueryBuilder",
    "build_insert"
]
