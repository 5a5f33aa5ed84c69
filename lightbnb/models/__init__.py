"""
Table definitions for the LightBnB schema.
Used to create the schema in development and test databases.
"""

from lightbnb.models.user import User
from lightbnb.models.property import Property
from lightbnb.models.reservation import Reservation, PropertyReview

__all__ = [
    "User",
    "Property",
    "Reservation",
    "PropertyReview",
]
