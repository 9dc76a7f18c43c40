"""Counter store backed by a Postgres function exposed through Supabase RPC.

``increment_rate_limit_counter`` performs ``insert ... on conflict do update
set count = count + 1 returning count`` on the composite primary key
(tenant_slug, ip, bucket_hour), so concurrent callers on any number of
service instances never lose an increment. The bucket is computed by the
database clock.
"""

from __future__ import annotations

import logging

from supabase import AsyncClient

from intake_gateway.adapters.rate_limit.base import AbstractRateLimiter
from intake_gateway.adapters.supabase_client import RATE_LIMIT_RPC
from intake_gateway.core.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


class SupabaseRateLimiter(AbstractRateLimiter):
    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def increment(self, tenant_slug: str, source_address: str) -> int:
        try:
            response = await self._client.rpc(
                RATE_LIMIT_RPC,
                {"p_tenant_slug": tenant_slug, "p_ip": source_address},
            ).execute()
        except Exception as exc:
            logger.error(
                "rate_limit.store_failed",
                extra={"tenant": tenant_slug, "error_type": type(exc).__name__},
            )
            raise BackendUnavailableError(
                code="backend_unavailable",
                message="Rate limit store is unavailable",
                details={"backend": "supabase", "operation": RATE_LIMIT_RPC},
            ) from exc

        count = response.data
        if isinstance(count, bool) or not isinstance(count, int):
            logger.error(
                "rate_limit.unexpected_response",
                extra={"tenant": tenant_slug, "data_type": type(count).__name__},
            )
            raise BackendUnavailableError(
                code="backend_unavailable",
                message="Rate limit store returned an unexpected value",
                details={"backend": "supabase", "operation": RATE_LIMIT_RPC},
            )
        return count
