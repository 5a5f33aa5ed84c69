"""
Pydantic schemas for rows passed to and from the database.
"""

# User schemas
from .user import (
    UserBase,
    UserCreate,
    UserRecord
)

# Property schemas
from .property import (
    PropertyBase,
    PropertyCreate,
    PropertyRecord,
    PropertySearchResult,
    PropertySearchOptions
)

# Reservation schemas
from .reservation import ReservedProperty

__all__ = [
    # User
    "UserBase",
    "UserCreate",
    "UserRecord",

    # Property
    "PropertyBase",
    "PropertyCreate",
    "PropertyRecord",
    "PropertySearchResult",
    "PropertySearchOptions",

    # Reservation
    "ReservedProperty"
]
