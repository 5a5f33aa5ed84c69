"""
LightBnB data-access layer.
Parameterized PostgreSQL queries for users, reservations and properties.
"""

from lightbnb.database import Database, QueryExecutor
from lightbnb.services.query_service import QueryService

__version__ = "1.0.0"

__all__ = [
    "Database",
    "QueryExecutor",
    "QueryService",
]
