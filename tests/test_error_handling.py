"""
Tests for error handling and request middleware.
Covers the error envelope produced for every failure type and the request id headers.
"""

import json
import pytest
from unittest.mock import Mock
from httpx import AsyncClient
from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rentals_api.services.error_handler import ErrorHandlerService
from rentals_api.utils.exceptions import (
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    BusinessRuleViolationError,
    DuplicateResourceError,
    PropertyNotFoundError,
    InsufficientPermissionsError,
)

API = "/api/v1"


def mock_request(request_id="req-123", path="/api/v1/properties"):
    request = Mock()
    request.state.request_id = request_id
    request.url.path = path
    return request


class TestErrorHandlerService:
    """Error envelope formatting."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "title", "message": "Too short"}],
            request_id="test123"
        )

        assert response["success"] is False
        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "title"
        assert response["error"]["timestamp"].endswith("Z")

    def test_details_are_omitted_when_empty(self):
        response = ErrorHandlerService.format_error_response("NOT_FOUND", "Missing")

        assert "details" not in response["error"]

    def test_handle_api_exception_uses_request_id(self):
        response = ErrorHandlerService.handle_api_exception(
            ValidationError("Bad amenity", field_errors=[{"field": "amenity_ids", "message": "Unknown"}]),
            mock_request()
        )

        assert response.status_code == 422
        data = json.loads(response.body)
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["request_id"] == "req-123"
        assert data["error"]["details"] == [{"field": "amenity_ids", "message": "Unknown"}]

    def test_handle_pydantic_error(self):
        class Sample(BaseModel):
            max_guests: int

        with pytest.raises(PydanticValidationError) as exc_info:
            Sample(max_guests="many")

        response = ErrorHandlerService.handle_validation_error(exc_info.value, mock_request())

        assert response.status_code == 422
        details = json.loads(response.body)["error"]["details"]
        assert details[0]["field"] == "max_guests"
        assert details[0]["input"] == "many"

    def test_integrity_error_is_conflict(self):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: amenities.name"))

        response = ErrorHandlerService.handle_database_error(error, mock_request())

        assert response.status_code == 409
        data = json.loads(response.body)
        assert data["error"]["code"] == "CONFLICT"
        assert data["error"]["message"] == "Constraint violation: Duplicate value for unique field"

    def test_other_database_errors_are_hidden(self):
        error = OperationalError("SELECT", {}, Exception("connection refused to db.internal"))

        response = ErrorHandlerService.handle_database_error(error, mock_request())

        assert response.status_code == 500
        body = response.body.decode()
        assert "DATABASE_ERROR" in body
        assert "db.internal" not in body

    def test_http_exception_codes(self):
        response = ErrorHandlerService.handle_http_exception(
            StarletteHTTPException(status_code=405, detail="Method Not Allowed"),
            mock_request()
        )

        assert json.loads(response.body)["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_unexpected_error_is_generic(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret stack detail"))

        assert response.status_code == 500
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in data["error"]["message"]
        assert data["error"]["request_id"]


class TestCustomExceptions:

    @pytest.mark.parametrize("exception, status_code, code", [
        (NotFoundError("Amenity", 4), 404, "NOT_FOUND"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (ConflictError("Taken"), 409, "CONFLICT"),
        (BadRequestError("Broken"), 400, "BAD_REQUEST"),
        (ValidationError("Invalid"), 422, "VALIDATION_ERROR"),
    ])
    def test_status_and_code(self, exception, status_code, code):
        assert exception.status_code == status_code
        assert exception.error_code == code

    def test_messages(self):
        assert NotFoundError("Amenity", 4).detail == "Amenity not found with ID: 4"
        assert PropertyNotFoundError("abc").detail == "Property not found with ID: abc"
        assert DuplicateResourceError("Amenity", "Piscina").detail == "Amenity with identifier 'Piscina' already exists"
        assert InsufficientPermissionsError("delete owners").detail == "Insufficient permissions to delete owners"
        assert BusinessRuleViolationError("max_guests", "At most 4").detail == (
            "Business rule violation: max_guests - At most 4"
        )

    def test_unauthorized_asks_for_bearer(self):
        assert UnauthorizedError().headers == {"WWW-Authenticate": "Bearer"}


class TestErrorEnvelopeOverHTTP:
    """Every failure leaves the API in the same envelope."""

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get(f"{API}/nothing-here")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "NOT_FOUND"

    async def test_unauthorized(self, client: AsyncClient):
        response = await client.get(f"{API}/owners/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_forbidden(self, client: AsyncClient, owner_headers):
        response = await client.get(f"{API}/admin/users", headers=owner_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    async def test_not_found(self, client: AsyncClient):
        response = await client.get(f"{API}/properties/unknown-id")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Property not found with ID: unknown-id"

    async def test_conflict(self, client: AsyncClient, admin_headers, test_amenities):
        response = await client.post(f"{API}/amenities", json={"name": "Piscina"}, headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_request_validation(self, client: AsyncClient):
        response = await client.post(f"{API}/auth/owners/register", json={
            "full_name": "A",
            "email": "not-an-email",
            "password": "short"
        })

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in error["details"]}
        assert fields == {"body -> full_name", "body -> email", "body -> password"}

    async def test_malformed_json(self, client: AsyncClient):
        response = await client.post(
            f"{API}/auth/owners/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestRequestMiddleware:

    async def test_generates_request_id(self, client: AsyncClient):
        response = await client.get("/")

        assert len(response.headers["X-Request-ID"]) == 8
        assert float(response.headers["X-Process-Time"]) >= 0

    async def test_echoes_valid_request_id(self, client: AsyncClient):
        response = await client.get(f"{API}/properties/unknown-id", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["error"]["request_id"] == "trace-42"

    async def test_replaces_malformed_request_id(self, client: AsyncClient):
        response = await client.get("/", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["X-Request-ID"] != "bad id with spaces"

    async def test_rejects_oversized_body(self, client: AsyncClient):
        response = await client.post(
            f"{API}/auth/owners/login",
            content=b"{}",
            headers={"Content-Type": "application/json", "Content-Length": str(10 ** 12)}
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "REQUEST_TOO_LARGE"
