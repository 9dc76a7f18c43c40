"""Wiring of storage and notification backends into the admission pipeline.

The routes depend on ``get_admission_pipeline`` only, so tests can swap the
whole pipeline through ``app.dependency_overrides``.

The pipeline is built once per process on first use and reused across
requests; it holds no per-request state.
"""

from __future__ import annotations

import asyncio
import logging

from intake_gateway.adapters.audit.base import AbstractAuditSink
from intake_gateway.adapters.audit.in_memory import InMemoryAuditSink
from intake_gateway.adapters.audit.supabase import SupabaseAuditSink
from intake_gateway.adapters.notify.base import AbstractNotifier
from intake_gateway.adapters.notify.webhook import DisabledNotifier, WebhookNotifier
from intake_gateway.adapters.rate_limit.base import AbstractRateLimiter
from intake_gateway.adapters.rate_limit.in_memory import InMemoryRateLimiter
from intake_gateway.adapters.rate_limit.supabase import SupabaseRateLimiter
from intake_gateway.adapters.supabase_client import create_supabase_client
from intake_gateway.adapters.tenants.base import AbstractTenantRegistry
from intake_gateway.adapters.tenants.cached import CachedTenantRegistry
from intake_gateway.adapters.tenants.in_memory import InMemoryTenantRegistry
from intake_gateway.adapters.tenants.supabase import SupabaseTenantRegistry
from intake_gateway.core.config import Settings, settings
from intake_gateway.services.admission import AdmissionPipeline
from intake_gateway.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)


_pipeline: AdmissionPipeline | None = None
_pipeline_lock = asyncio.Lock()


def build_notifier(cfg: Settings) -> AbstractNotifier:
    if not cfg.app.notifications_enabled:
        return DisabledNotifier()
    return WebhookNotifier(timeout_seconds=cfg.app.notify_timeout_seconds)


async def _build_storage(
    cfg: Settings,
) -> tuple[AbstractTenantRegistry, AbstractRateLimiter, AbstractAuditSink]:
    if cfg.app.backend == "memory":
        tenants = (
            InMemoryTenantRegistry.from_file(cfg.app.memory_tenants_file)
            if cfg.app.memory_tenants_file
            else InMemoryTenantRegistry()
        )
        return tenants, InMemoryRateLimiter(), InMemoryAuditSink()

    client = await create_supabase_client(cfg.supabase)
    return (
        SupabaseTenantRegistry(client),
        SupabaseRateLimiter(client),
        SupabaseAuditSink(client),
    )


async def build_admission_pipeline(cfg: Settings | None = None) -> AdmissionPipeline:
    """Assemble a pipeline for the configured backend.

    Raises:
        ConfigurationAppError: If the selected backend cannot be set up.
    """
    cfg = cfg or settings

    tenants, rate_limiter, audit_sink = await _build_storage(cfg)
    if cfg.app.tenant_cache_ttl_seconds > 0:
        tenants = CachedTenantRegistry(
            tenants,
            SimpleTTLCache(ttl_seconds=cfg.app.tenant_cache_ttl_seconds),
        )

    logger.info(
        "pipeline.built",
        extra={
            "backend": cfg.app.backend,
            "stealth_mode": cfg.app.stealth_mode,
            "notifications_enabled": cfg.app.notifications_enabled,
            "tenant_cache_ttl_s": cfg.app.tenant_cache_ttl_seconds,
        },
    )

    return AdmissionPipeline(
        tenants=tenants,
        rate_limiter=rate_limiter,
        audit_sink=audit_sink,
        notifier=build_notifier(cfg),
        honeypot_field=cfg.app.honeypot_field,
        default_rate_limit_per_hour=cfg.app.default_rate_limit_per_hour,
    )


async def get_admission_pipeline() -> AdmissionPipeline:
    """FastAPI dependency returning the process-wide pipeline."""

    global _pipeline

    if _pipeline is None:
        async with _pipeline_lock:
            if _pipeline is None:
                _pipeline = await build_admission_pipeline()
    return _pipeline


async def shutdown_backends() -> None:
    """Close network clients and forget the cached pipeline."""

    global _pipeline

    if _pipeline is not None:
        await _pipeline.notifier.aclose()
        _pipeline = None
