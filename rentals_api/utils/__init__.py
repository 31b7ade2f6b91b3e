"""
Utility modules for the Rentals API.
"""

from .auth import (
    AccountRole,
    create_access_token,
    create_refresh_token,
    verify_token,
    hash_password,
    verify_password,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InactiveAccountError,
    InsufficientPermissionsError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "AccountRole",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InactiveAccountError",
    "InsufficientPermissionsError",
]
