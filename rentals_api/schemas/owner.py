"""
Pydantic schemas for owner registration, profiles and admin owner management.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from rentals_api.utils.auth import MIN_PASSWORD_LENGTH


def _clean_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class OwnerProfileFields(BaseModel):
    """Contact fields an owner can edit."""

    phone: Optional[str] = Field(None, max_length=20, examples=["+55 85 99999-0000"])
    instagram: Optional[str] = Field(None, max_length=100, examples=["@casadapraia"])
    website: Optional[str] = Field(None, max_length=255)
    profile_image: Optional[str] = Field(None, max_length=500, description="URL returned by the upload endpoint")

    @field_validator('phone', 'instagram', 'website', 'profile_image')
    @classmethod
    def clean_optional_text(cls, v):
        return _clean_optional(v)


class OwnerRegister(OwnerProfileFields):
    """Schema for owner self-registration."""

    full_name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="Owner's full name",
        examples=["João da Silva"]
    )
    email: EmailStr = Field(..., examples=["owner@example.com"])
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (minimum {MIN_PASSWORD_LENGTH} characters)"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()


class OwnerUpdate(OwnerProfileFields):
    """Profile update. The full name is always required."""

    full_name: str = Field(..., min_length=2, max_length=255)

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()


class OwnerPublicResponse(BaseModel):
    """Contact details shown next to a listing."""

    id: str
    full_name: str
    email: EmailStr
    phone: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None
    profile_image: Optional[str] = None


class OwnerResponse(OwnerPublicResponse):
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OwnerAdminResponse(OwnerResponse):
    """Owner row in the admin panel."""

    property_count: int = Field(0, description="Number of listings registered by the owner")


class OwnerListResponse(BaseModel):
    owners: List[OwnerAdminResponse]
    total: int


class OwnerBulkRequest(BaseModel):
    """Owner ids targeted by a bulk admin action."""

    owner_ids: List[str] = Field(..., min_length=1, description="Owner identifiers")


class OwnerBulkStatusRequest(OwnerBulkRequest):
    is_active: bool


class BulkOperationResponse(BaseModel):
    """Result of a bulk admin action."""

    success: bool = True
    affected: int = Field(..., description="Number of rows changed")
    message: str
