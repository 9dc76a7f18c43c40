"""Tenant registry reading ``tenant_contact_settings`` through Supabase."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from supabase import AsyncClient

from intake_gateway.adapters.supabase_client import SETTINGS_SELECT, SETTINGS_TABLE
from intake_gateway.adapters.tenants.base import AbstractTenantRegistry
from intake_gateway.core.errors import BackendUnavailableError
from intake_gateway.schemas.tenant import TenantConfig

logger = logging.getLogger(__name__)


class SupabaseTenantRegistry(AbstractTenantRegistry):
    """Always-fresh keyed lookup; one query per call."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def fetch(self, slug: str) -> TenantConfig | None:
        try:
            response = await (
                self._client.table(SETTINGS_TABLE)
                .select(SETTINGS_SELECT)
                .eq("tenant_slug", slug)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            logger.error(
                "tenants.lookup_failed",
                extra={"tenant": slug, "error_type": type(exc).__name__},
            )
            raise BackendUnavailableError(
                code="backend_unavailable",
                message="Tenant store is unavailable",
                details={"backend": "supabase", "operation": "tenant_lookup"},
            ) from exc

        rows = response.data or []
        if not rows:
            return None

        try:
            return TenantConfig.model_validate(rows[0])
        except ValidationError as exc:
            # A row the pipeline cannot interpret is treated like a missing tenant.
            logger.error(
                "tenants.invalid_row",
                extra={"tenant": slug, "error_count": exc.error_count()},
            )
            return None

    async def ping(self) -> None:
        try:
            await self._client.table(SETTINGS_TABLE).select("tenant_slug").limit(1).execute()
        except Exception as exc:
            raise BackendUnavailableError(
                code="backend_unavailable",
                message="Tenant store is unavailable",
                details={"backend": "supabase", "operation": "ping"},
            ) from exc
