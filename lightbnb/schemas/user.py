"""
Pydantic schemas for user rows and user creation.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.networks import validate_email


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., max_length=255, description="Unique login email")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        """Reject malformed addresses; the address is stored exactly as given."""
        validate_email(v)
        return v


class UserCreate(UserBase):
    """Schema for inserting a user. The password must already be hashed."""

    password: str = Field(..., min_length=1, max_length=255, description="Password hash")


class UserRecord(BaseModel):
    """A row of the ``users`` table."""

    id: int
    name: str
    email: str
    password: str = Field(..., repr=False)

    model_config = {"from_attributes": True}
