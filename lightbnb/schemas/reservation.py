"""
Pydantic schemas for reservation listings.
"""

from datetime import date

from lightbnb.schemas.property import PropertyRecord


class ReservedProperty(PropertyRecord):
    """A property a guest has reserved, with the reservation's date range."""

    start_date: date
    end_date: date
