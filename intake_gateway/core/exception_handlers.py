"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → mapped HTTP status (400, 403, 405, 429, 500, 503)
- Router-level 405 → same method_not_allowed envelope
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing

Stealth masking of rejections happens in the contact route; anything that
reaches these handlers is meant to be visible to the caller.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intake_gateway.core.config import settings
from intake_gateway.core.errors import (
    AppError,
    BackendUnavailableError,
    ConfigurationAppError,
    ForbiddenOriginError,
    MethodNotAllowedAppError,
    RateLimitedError,
    SubmissionBackendError,
)
from intake_gateway.core.logging import get_request_id
from intake_gateway.core.request_meta import cors_headers, get_request_origin

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, ForbiddenOriginError):
        return 403
    if isinstance(exc, RateLimitedError):
        return 429
    if isinstance(exc, MethodNotAllowedAppError):
        return 405
    if isinstance(exc, (BackendUnavailableError, SubmissionBackendError)):
        return 503
    if isinstance(exc, ConfigurationAppError):
        return 500
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Responses carry ``error.code``, ``error.message``, ``error.request_id``
    and, when present, ``error.details``. Origin and rate-limit rejections
    also echo CORS headers so browsers can read the code.
    """
    status_code = status_code_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    headers: dict[str, str] = {}
    if isinstance(exc, (ForbiddenOriginError, RateLimitedError)):
        headers = cors_headers(get_request_origin(request))
    if isinstance(exc, MethodNotAllowedAppError):
        headers["allow"] = "POST, OPTIONS"

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers or None,
    )


def _resolve_request_id(request: Request) -> str | None:
    # Outermost handlers run after the middleware has reset the context.
    return (
        get_request_id()
        or getattr(request.state, "request_id", None)
        or request.headers.get(settings.log.request_id_header)
    )


async def starlette_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Give router-level 405s the same envelope as the explicit method routes."""
    if exc.status_code == 405:
        return await app_error_handler(
            request,
            MethodNotAllowedAppError(
                code="method_not_allowed",
                message=f"Method {request.method} is not allowed; use POST",
            ),
        )
    return await http_exception_handler(request, exc)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure for operators and returns a generic message with no
    stack trace or exception text.
    """
    request_id = _resolve_request_id(request)

    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": request_id,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": request_id,
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(starlette_http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
