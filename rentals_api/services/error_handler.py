"""
Error handling service for consistent error response formatting and logging.
Every failure leaves the API as {"success": false, "error": {...}}.
"""

from typing import Dict, Any, Optional, List, Union
from datetime import datetime, timezone
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from rentals_api.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "REQUEST_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    503: "SERVICE_UNAVAILABLE",
}


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    Provides structured error responses with appropriate logging and error codes.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional list of detailed error information
            request_id: Optional request identifier for tracking

        Returns:
            Formatted error response dictionary
        """
        response = {
            "success": False,
            "error": {
                "code": error_code,
                "message": message,
                "timestamp": ErrorHandlerService._get_current_timestamp(),
                "request_id": request_id,
            }
        }

        if details:
            response["error"]["details"] = details

        return response

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle custom API exceptions with structured response."""
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        field_errors = getattr(exception, "field_errors", None)
        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=field_errors,
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: Union[RequestValidationError, PydanticValidationError],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle request and model validation errors with detailed field information."""
        request_id = ErrorHandlerService._get_request_id(request)

        validation_details = []
        for error in exception.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            validation_details.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
                "input": error.get("input")
            })
        validation_details = jsonable_encoder(
            validation_details,
            custom_encoder={bytes: lambda v: v.decode("utf-8", errors="replace")}
        )

        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors",
            extra={
                "error_count": len(validation_details),
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=validation_details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=422,
            content=error_response
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Integrity violations become 409; every other database failure is a 500."""
        request_id = ErrorHandlerService._get_request_id(request)

        if isinstance(exception, IntegrityError):
            error_code = "CONFLICT"
            message = "Data integrity constraint violation"
            status_code = 409

            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            if constraint_info:
                message = f"Constraint violation: {constraint_info}"
        else:
            error_code = "DATABASE_ERROR"
            message = "Database operation failed"
            status_code = 500

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {str(exception)}",
            extra={
                "error_code": error_code,
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=error_code,
            message=message,
            request_id=request_id
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response
        )

    @staticmethod
    def handle_http_exception(
        exception: StarletteHTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle framework HTTP exceptions such as unknown routes."""
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=HTTP_ERROR_CODES.get(exception.status_code, f"HTTP_{exception.status_code}"),
            message=str(exception.detail),
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle unexpected errors without exposing internals."""
        request_id = ErrorHandlerService._get_request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request_id=request_id
        )

        return JSONResponse(
            status_code=500,
            content=error_response
        )

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the request middleware, or generate one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        """Get current timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        """
        Extract constraint information from integrity error.

        Returns:
            Constraint information string or None
        """
        error_msg = str(exception.orig).lower()

        if "unique" in error_msg:
            return "Duplicate value for unique field"
        elif "foreign key" in error_msg:
            return "Referenced record does not exist"
        elif "not null" in error_msg:
            return "Required field cannot be empty"
        elif "check constraint" in error_msg:
            return "Value does not meet validation requirements"

        return None
