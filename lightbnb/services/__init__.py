"""
Service layer exposing the data operations.
"""

from .query_service import QueryService

__all__ = [
    "QueryService"
]
