"""
Pydantic schemas for authentication requests and responses.
Owners and administrators log in through separate endpoints but share the token format.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from rentals_api.utils.auth import AccountRole


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="Account email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Account password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[86400])


class AccountResponse(BaseModel):
    """Authenticated account, owner or administrator."""

    id: str = Field(..., description="Account identifier")
    email: EmailStr
    name: str = Field(..., description="Full name of the owner or administrator")
    role: AccountRole = Field(..., description="Account kind", examples=["owner"])
    is_active: bool


class LoginResponse(BaseModel):
    """Complete login response schema."""

    account: AccountResponse = Field(..., description="Authenticated account information")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[86400])


class TokenValidationResponse(BaseModel):
    """Token validation response schema."""

    valid: bool
    subject: Optional[str] = None
    role: Optional[AccountRole] = None
