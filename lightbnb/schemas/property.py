"""
Pydantic schemas for property rows, property creation and property search.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Any
from decimal import Decimal


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    owner_id: int = Field(..., gt=0, description="ID of the owning user")

    title: str = Field(..., min_length=1, max_length=255, description="Listing title")
    description: str = Field("", description="Listing description")

    thumbnail_photo_url: str = Field(..., max_length=255)
    cover_photo_url: str = Field(..., max_length=255)

    cost_per_night: int = Field(
        ...,
        ge=0,
        description="Nightly price in cents; callers convert from dollars"
    )

    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=255)
    province: str = Field(..., max_length=255)
    post_code: str = Field(..., max_length=255)
    country: str = Field(..., max_length=255)

    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class PropertyCreate(PropertyBase):
    """Schema for inserting a property."""


class PropertyRecord(BaseModel):
    """
    A row of the ``properties`` table.
    Plain column types with no input validation.
    """

    id: int
    owner_id: int
    title: str
    description: str
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int
    street: str
    city: str
    province: str
    post_code: str
    country: str
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int

    model_config = {"from_attributes": True}

    @property
    def price_per_night(self) -> Decimal:
        """Nightly price in dollars."""
        return Decimal(self.cost_per_night) / 100


class PropertySearchResult(PropertyRecord):
    """A property returned by search, with its mean review rating."""

    average_rating: Optional[float] = None


class PropertySearchOptions(BaseModel):
    """
    Optional filters for property search.

    Prices are in dollars and converted to cents when the query is built.
    Empty strings, as sent by a blank form field, count as absent.
    """

    city: Optional[str] = Field(None, max_length=255)
    owner_id: Optional[int] = Field(None, gt=0)
    minimum_price_per_night: Optional[Decimal] = Field(None, ge=0)
    maximum_price_per_night: Optional[Decimal] = Field(None, ge=0)
    minimum_rating: Optional[Decimal] = Field(None, ge=0, le=5)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if not (isinstance(value, str) and not value.strip())
            }
        return data

    @field_validator("city")
    @classmethod
    def validate_city(cls, v):
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def validate_price_range(self):
        """Validate price range."""
        if (
            self.minimum_price_per_night is not None
            and self.maximum_price_per_night is not None
            and self.minimum_price_per_night > self.maximum_price_per_night
        ):
            raise ValueError("Minimum price cannot be greater than maximum price")
        return self
