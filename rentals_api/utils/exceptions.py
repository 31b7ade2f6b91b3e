"""
Custom exception classes for the Rentals API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error exception."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[Any] = None):
        detail = f"{resource} not found"
        if resource_id is not None:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class ServiceUnavailableError(APIException):
    """Service unavailable exception."""

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="SERVICE_UNAVAILABLE"
        )


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class TokenExpiredError(UnauthorizedError):
    """JWT token expired exception."""

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    """Invalid JWT token exception."""

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class InactiveAccountError(UnauthorizedError):
    """Deactivated owner or administrator account."""

    def __init__(self, detail: str = "Account is deactivated"):
        super().__init__(detail)


class InsufficientPermissionsError(ForbiddenError):
    """Insufficient permissions exception."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class PropertyOwnershipError(ForbiddenError):
    """Property ownership violation exception."""

    def __init__(self, detail: str = "You don't own this property"):
        super().__init__(detail)


# Business rule exceptions
class BusinessRuleViolationError(BadRequestError):
    """Business rule violation exception."""

    def __init__(self, rule: str, detail: Optional[str] = None):
        message = f"Business rule violation: {rule}"
        if detail:
            message += f" - {detail}"
        super().__init__(message)


class DuplicateResourceError(ConflictError):
    """Duplicate resource exception."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


class DatesUnavailableError(ConflictError):
    """Requested stay overlaps a confirmed reservation or a blocked day."""

    def __init__(self, detail: str = "Property is not available for the selected dates"):
        super().__init__(detail)


# File upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(BadRequestError):
    """Unsupported file type exception."""

    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(BadRequestError):
    """File size exceeded exception."""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")
