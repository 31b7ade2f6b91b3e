"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["body -> email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["value is not a valid email address"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )

    input: Optional[Any] = Field(
        None,
        description="Input value that caused the error"
    )


class ErrorBody(BaseModel):
    """Error information carried by every failed response."""

    code: str = Field(..., description="Error code identifier", examples=["NOT_FOUND"])
    message: str = Field(..., description="Human-readable error message", examples=["Property not found"])
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Field errors, present on validation failures"
    )


class ErrorResponse(BaseModel):
    """Envelope of every failed response."""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorBody


COMMON_ERROR_RESPONSES = {
    400: {"description": "Bad Request - Invalid request parameters", "model": ErrorResponse},
    401: {"description": "Unauthorized - Missing, invalid or expired token", "model": ErrorResponse},
    403: {"description": "Forbidden - Insufficient permissions", "model": ErrorResponse},
    404: {"description": "Not Found - Resource does not exist", "model": ErrorResponse},
    409: {"description": "Conflict - Duplicate resource or unavailable dates", "model": ErrorResponse},
    422: {"description": "Validation Error - Request data failed validation", "model": ErrorResponse},
    500: {"description": "Internal Server Error", "model": ErrorResponse},
}


def error_responses(*status_codes: int) -> dict:
    """Pick documented error responses for a route."""
    return {code: COMMON_ERROR_RESPONSES[code] for code in status_codes if code in COMMON_ERROR_RESPONSES}
