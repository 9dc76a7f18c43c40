"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that loads settings, so the
suite never reads a developer's .env file or reaches a real Supabase project.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_BACKEND", "memory")
os.environ.setdefault("APP_STEALTH_MODE", "true")
os.environ.setdefault("APP_NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from intake_gateway.adapters.audit.in_memory import InMemoryAuditSink
from intake_gateway.adapters.notify.base import AbstractNotifier
from intake_gateway.adapters.rate_limit.in_memory import InMemoryRateLimiter
from intake_gateway.adapters.tenants.in_memory import InMemoryTenantRegistry
from intake_gateway.schemas.tenant import TenantConfig
from intake_gateway.services.admission import AdmissionPipeline

ALLOWED_ORIGIN = "https://cf-obras-civiles-web-kplb.bolt.host"
WEBHOOK_URL = "https://hooks.example.test/services/T000/B000/XXXX"


class RecordingNotifier(AbstractNotifier):
    """Notifier double that remembers every attempt."""

    def __init__(self, *, succeed: bool = True, raises: Exception | None = None) -> None:
        self.calls: list[tuple[str, str]] = []
        self.succeed = succeed
        self.raises = raises

    async def notify(self, target: str, message: str) -> bool:
        self.calls.append((target, message))
        if self.raises is not None:
            raise self.raises
        return self.succeed


class FakeClock:
    """Deterministic clock for hour-bucket tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def tenant() -> TenantConfig:
    return TenantConfig(
        tenant_slug="cfobras",
        allowed_origins=[ALLOWED_ORIGIN],
        slack_webhook_url=WEBHOOK_URL,
        rate_limit_per_hour=10,
        enabled=True,
    )


@pytest.fixture
def disabled_tenant() -> TenantConfig:
    return TenantConfig(
        tenant_slug="dormant",
        allowed_origins=["https://dormant.example"],
        slack_webhook_url=WEBHOOK_URL,
        enabled=False,
    )


@pytest.fixture
def tenants(tenant: TenantConfig, disabled_tenant: TenantConfig) -> InMemoryTenantRegistry:
    return InMemoryTenantRegistry([tenant, disabled_tenant])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> InMemoryRateLimiter:
    return InMemoryRateLimiter(clock=clock)


@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def pipeline(
    tenants: InMemoryTenantRegistry,
    rate_limiter: InMemoryRateLimiter,
    audit_sink: InMemoryAuditSink,
    notifier: RecordingNotifier,
) -> AdmissionPipeline:
    return AdmissionPipeline(
        tenants=tenants,
        rate_limiter=rate_limiter,
        audit_sink=audit_sink,
        notifier=notifier,
    )


@pytest.fixture
def valid_payload() -> dict:
    return {
        "tenant": "cfobras",
        "name": "Ana Pérez",
        "email": "Ana.Perez@Example.com",
        "phone": "+54 11 5555 0000",
        "company_name": "Obras SA",
        "contact_type": "budget_request",
        "message": "Necesito un presupuesto para una losa.",
        "company_website": "",
    }
