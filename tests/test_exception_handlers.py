"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from intake_gateway.core.errors import (
    AppError,
    BackendUnavailableError,
    ConfigurationAppError,
    ForbiddenOriginError,
    HoneypotTriggeredError,
    InvalidSubmissionError,
    MethodNotAllowedAppError,
    RateLimitedError,
    SubmissionBackendError,
    TenantNotAvailableError,
)
from intake_gateway.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_code_for,
)


def _request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/v1/contact",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


@pytest.mark.parametrize(
    ("exc", "status_code"),
    [
        (InvalidSubmissionError(code="invalid_email", message="m"), 400),
        (HoneypotTriggeredError(code="honeypot_triggered", message="m"), 400),
        (TenantNotAvailableError(code="tenant_unavailable", message="m"), 400),
        (ForbiddenOriginError(code="forbidden_origin", message="m"), 403),
        (MethodNotAllowedAppError(code="method_not_allowed", message="m"), 405),
        (RateLimitedError(code="rate_limited", message="m"), 429),
        (ConfigurationAppError(code="server_misconfigured", message="m"), 500),
        (BackendUnavailableError(code="backend_unavailable", message="m"), 503),
        (SubmissionBackendError(code="backend_unavailable", message="m"), 503),
    ],
)
def test_status_code_mapping(exc: AppError, status_code: int) -> None:
    assert status_code_for(exc) == status_code


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_invalid_submission_returns_400_with_details(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise InvalidSubmissionError(
                code="invalid_phone",
                message="Field 'phone' is missing or invalid",
                details={"field": "phone"},
            )

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "invalid_phone"
        assert data["error"]["details"] == {"field": "phone"}
        assert "request_id" in data["error"]

    def test_forbidden_origin_echoes_cors_headers(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-origin")
        async def test_endpoint():
            raise ForbiddenOriginError(code="forbidden_origin", message="Origin is not allowed")

        response = client.get("/test-origin", headers={"Origin": "https://evil.example"})

        assert response.status_code == 403
        assert response.headers["access-control-allow-origin"] == "https://evil.example"

    def test_configuration_error_returns_500(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-config")
        async def test_endpoint():
            raise ConfigurationAppError(
                code="server_misconfigured",
                message="Storage backend is not configured",
            )

        response = client.get("/test-config")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "server_misconfigured"
        assert "details" not in response.json()["error"]

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise RateLimitedError(code="rate_limited", message="slow down")

        response = client.get("/test-format")
        data = response.json()

        assert set(data) == {"error"}
        assert {"code", "message", "request_id"} <= set(data["error"])


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_hides_internals(self):
        request = _request()

        exc = RuntimeError("Unexpected error: database connection failed")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        data = json.loads(response_text)
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "database connection" not in response_text
        assert "RuntimeError" not in response_text
        assert "Traceback" not in response_text

    def test_request_id_falls_back_to_incoming_header(self):
        request = _request({"X-Request-ID": "req-500"})

        response = asyncio.run(general_exception_handler(request, RuntimeError("boom")))

        assert json.loads(bytes(response.body))["error"]["request_id"] == "req-500"

    def test_request_id_falls_back_to_request_state(self):
        request = _request()
        request.state.request_id = "generated-id"

        response = asyncio.run(general_exception_handler(request, RuntimeError("boom")))

        assert json.loads(bytes(response.body))["error"]["request_id"] == "generated-id"

    def test_unhandled_error_keeps_request_id_through_middleware(self):
        from intake_gateway.core.app_factory import create_app

        app = create_app()

        @app.get("/explode")
        async def explode():
            raise RuntimeError("boom")

        client = TestClient(app, raise_server_exceptions=False)

        with_header = client.get("/explode", headers={"X-Request-ID": "req-explode"})
        generated = client.get("/explode")

        assert with_header.status_code == 500
        assert with_header.json()["error"]["request_id"] == "req-explode"
        assert generated.json()["error"]["request_id"]


class TestRouterLevelErrors:
    def test_unrouted_method_gets_error_envelope(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.post("/test-post-only")
        async def test_endpoint():
            return {}

        response = client.request("TRACE", "/test-post-only")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "method_not_allowed"
        assert response.headers["allow"] == "POST, OPTIONS"

    def test_not_found_keeps_default_body(self, client: TestClient):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}


def test_multiple_handler_setups_does_not_fail():
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
