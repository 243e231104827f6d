"""Unit tests for the error handling middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.middleware.error_handler import (
    APIError,
    ConfirmationRequiredError,
    NotFoundError,
    StoreError,
    ValidationError,
    error_handler_middleware,
)


@pytest.fixture
def error_client() -> TestClient:
    """App whose routes raise each kind of error."""
    app = FastAPI()
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    @app.get("/store")
    async def store_error() -> None:
        raise StoreError("Error adding invitation: boom")

    @app.get("/value")
    async def value_error() -> None:
        raise ValueError("Unknown filter: company")

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("secret detail")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorClasses:
    """Tests for APIError subclasses."""

    @pytest.mark.parametrize(
        ("error", "status_code", "error_type"),
        [
            (NotFoundError("x"), 404, "not_found"),
            (ValidationError("x"), 422, "validation_error"),
            (ConfirmationRequiredError("x"), 400, "confirmation_required"),
            (StoreError("x"), 502, "store_error"),
        ],
    )
    def test_status_and_type(self, error: APIError, status_code: int, error_type: str) -> None:
        assert error.status_code == status_code
        assert error.error_type == error_type
        assert error.message == "x"

    def test_overrides(self) -> None:
        error = APIError("teapot", status_code=418, error_type="teapot")

        assert error.status_code == 418
        assert error.error_type == "teapot"


class TestErrorHandlerMiddleware:
    """Tests for error_handler_middleware."""

    def test_api_error_keeps_message(self, error_client: TestClient) -> None:
        response = error_client.get("/store")

        assert response.status_code == 502
        data = response.json()
        assert data["error"] == "store_error"
        assert data["message"] == "Error adding invitation: boom"
        assert "timestamp" in data

    def test_value_error_becomes_422(self, error_client: TestClient) -> None:
        response = error_client.get("/value")

        assert response.status_code == 422
        assert response.json()["message"] == "Unknown filter: company"

    def test_unexpected_error_hides_detail(self, error_client: TestClient) -> None:
        response = error_client.get("/crash")

        assert response.status_code == 500
        assert response.json()["message"] == "An unexpected error occurred"

    def test_request_id_is_echoed(self, error_client: TestClient) -> None:
        response = error_client.get("/store", headers={"X-Request-ID": "req-1"})

        assert response.json()["request_id"] == "req-1"
