"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    LoginRequest,
    RefreshTokenRequest,
    AccessTokenResponse,
    AccountResponse,
    LoginResponse,
    TokenValidationResponse
)

# Account schemas
from .user import (
    AdminBase,
    AdminCreate,
    AdminResponse,
    AdminListResponse,
    StatusUpdate
)
from .owner import (
    OwnerRegister,
    OwnerUpdate,
    OwnerPublicResponse,
    OwnerResponse,
    OwnerAdminResponse,
    OwnerListResponse,
    OwnerBulkRequest,
    OwnerBulkStatusRequest,
    BulkOperationResponse
)

# Lookup schemas
from .catalog import (
    AmenityCreate,
    AmenityUpdate,
    AmenityResponse,
    AmenityGroup,
    PropertyClassCreate,
    PropertyClassUpdate,
    PropertyClassResponse,
    PropertyClassUsage
)

# Property schemas
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyStatusUpdate,
    PropertyDetailResponse,
    PropertySummaryResponse,
    PropertyListResponse,
    FeaturedPropertiesResponse,
    split_property_payload
)

# Availability and reservation schemas
from .reservation import (
    AvailabilityDay,
    AvailabilityUpdate,
    AvailabilityCalendarResponse,
    AvailabilityCheckResponse,
    ReservationCreate,
    ReservationStatusUpdate,
    ReservationResponse,
    ReservationListResponse
)

from .upload import UploadedFile, UploadResponse

# Error schemas
from .error import ErrorDetail, ErrorBody, ErrorResponse, error_responses

__all__ = [
    # Authentication
    "LoginRequest",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "AccountResponse",
    "LoginResponse",
    "TokenValidationResponse",

    # Accounts
    "AdminBase",
    "AdminCreate",
    "AdminResponse",
    "AdminListResponse",
    "StatusUpdate",
    "OwnerRegister",
    "OwnerUpdate",
    "OwnerPublicResponse",
    "OwnerResponse",
    "OwnerAdminResponse",
    "OwnerListResponse",
    "OwnerBulkRequest",
    "OwnerBulkStatusRequest",
    "BulkOperationResponse",

    # Lookups
    "AmenityCreate",
    "AmenityUpdate",
    "AmenityResponse",
    "AmenityGroup",
    "PropertyClassCreate",
    "PropertyClassUpdate",
    "PropertyClassResponse",
    "PropertyClassUsage",

    # Properties
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyStatusUpdate",
    "PropertyDetailResponse",
    "PropertySummaryResponse",
    "PropertyListResponse",
    "FeaturedPropertiesResponse",
    "split_property_payload",

    # Availability and reservations
    "AvailabilityDay",
    "AvailabilityUpdate",
    "AvailabilityCalendarResponse",
    "AvailabilityCheckResponse",
    "ReservationCreate",
    "ReservationStatusUpdate",
    "ReservationResponse",
    "ReservationListResponse",

    # Uploads
    "UploadedFile",
    "UploadResponse",

    # Errors
    "ErrorDetail",
    "ErrorBody",
    "ErrorResponse",
    "error_responses"
]
