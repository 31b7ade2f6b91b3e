"""
Request middleware: request ids, request size limits and request/response logging.
"""

from typing import Callable
from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import re
import time
import uuid

from rentals_api.services.error_handler import ErrorHandlerService
from rentals_api.utils.exceptions import APIException, BadRequestError

logger = logging.getLogger(__name__)

REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class RequestTooLargeError(APIException):
    """Request body larger than the configured limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request size {size} bytes exceeds maximum allowed size {max_size} bytes",
            error_code="REQUEST_TOO_LARGE"
        )


class ValidationMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id (echoed as X-Request-ID), rejects oversized
    bodies and logs method, path, status and timing.
    Unhandled errors raised further down are turned into the error envelope here.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 50 * 1024 * 1024,
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = self._get_request_id(request)
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)

            if self.enable_request_logging:
                self._log_request(request, request_id)

            response = await call_next(request)

        except APIException as exc:
            response = ErrorHandlerService.handle_api_exception(exc, request)
        except Exception as exc:
            processing_time = time.time() - start_time
            logger.error(
                f"Middleware error [{request_id}]: {type(exc).__name__} - {str(exc)}",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                    "processing_time": processing_time
                },
                exc_info=True
            )
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        processing_time = time.time() - start_time
        if self.enable_request_logging:
            self._log_response(request, response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{processing_time:.4f}"
        return response

    @staticmethod
    def _get_request_id(request: Request) -> str:
        """Keep a well-formed id sent by a proxy, otherwise generate one."""
        incoming = request.headers.get("x-request-id")
        if incoming and REQUEST_ID_PATTERN.match(incoming):
            return incoming
        return str(uuid.uuid4())[:8]

    def _validate_request_size(self, request: Request) -> None:
        """
        Raises:
            BadRequestError: If the content-length header is malformed
            RequestTooLargeError: If request size exceeds limit
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise RequestTooLargeError(size, self.max_request_size)

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _log_request(self, request: Request, request_id: str) -> None:
        logger.info(
            f"Request [{request_id}]: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "client_ip": self._get_client_ip(request),
                "user_agent": request.headers.get("user-agent", "unknown")
            }
        )

    def _log_response(
        self,
        request: Request,
        response: Response,
        request_id: str,
        processing_time: float
    ) -> None:
        logger.info(
            f"Response [{request_id}]: {response.status_code} - {processing_time:.3f}s",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "processing_time": processing_time,
                "path": request.url.path,
                "method": request.method
            }
        )
