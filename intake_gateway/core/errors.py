"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    field: str
    hint: str
    backend: str
    operation: str
    limit: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationAppError(AppError):
    """Raised when the service cannot run with the current configuration."""


class BackendUnavailableError(AppError):
    """Raised when a storage collaborator cannot be reached or fails."""


class MethodNotAllowedAppError(AppError):
    """Raised for HTTP methods the intake endpoint does not serve."""


class SubmissionRejected(AppError):
    """Base for every admission pipeline rejection.

    ``always_masked`` rejections are answered with the uniform success
    response even when stealth mode is switched off.
    """

    always_masked: ClassVar[bool] = False


class InvalidSubmissionError(SubmissionRejected):
    """Raised when the payload is malformed or a field is out of bounds."""


class HoneypotTriggeredError(SubmissionRejected):
    """Raised when the decoy field carries a value."""

    always_masked = True


class TenantNotAvailableError(SubmissionRejected):
    """Raised when the tenant is unknown or disabled."""

    always_masked = True


class ForbiddenOriginError(SubmissionRejected):
    """Raised when the declared origin is not in the tenant allow-list."""


class RateLimitedError(SubmissionRejected):
    """Raised when the tenant/source quota for the current hour is spent."""


class SubmissionBackendError(SubmissionRejected):
    """Raised when a backend failure forces the pipeline to fail closed."""
