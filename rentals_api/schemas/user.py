"""
Pydantic schemas for administrator accounts.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from rentals_api.utils.auth import MIN_PASSWORD_LENGTH


class AdminBase(BaseModel):
    """Base administrator schema with common fields."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="Administrator's name",
        examples=["Maria Souza"]
    )

    email: EmailStr = Field(
        ...,
        description="Administrator's email address",
        examples=["admin@example.com"]
    )

    phone: Optional[str] = Field(None, max_length=20)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class AdminCreate(AdminBase):
    """Schema for creating an administrator."""

    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (minimum {MIN_PASSWORD_LENGTH} characters)"
    )


class AdminResponse(AdminBase):
    """Administrator as returned by the API (never includes the password hash)."""

    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminListResponse(BaseModel):
    users: List[AdminResponse]
    total: int


class StatusUpdate(BaseModel):
    """Activate or deactivate an account or lookup entry."""

    is_active: bool = Field(..., description="New active flag")
