"""Supabase async client construction.

Uses the service role key: the intake tables have RLS enabled with no public
policies, so only the service role can read settings and write counters.
"""

from __future__ import annotations

import logging

from supabase import AsyncClient, acreate_client

from intake_gateway.core.config import SupabaseSettings
from intake_gateway.core.errors import ConfigurationAppError

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "tenant_contact_settings"
SETTINGS_SELECT = "tenant_slug, allowed_origins, slack_webhook_url, rate_limit_per_hour, enabled"
SUBMISSIONS_TABLE = "form_submissions"
RATE_LIMIT_RPC = "increment_rate_limit_counter"


async def create_supabase_client(supabase_settings: SupabaseSettings) -> AsyncClient:
    """Create the service-role async client.

    Raises:
        ConfigurationAppError: If the URL or service role key is missing.
    """
    if not supabase_settings.is_configured:
        logger.error(
            "supabase.not_configured",
            extra={
                "url_present": bool(supabase_settings.url),
                "key_present": bool(supabase_settings.service_role_key),
            },
        )
        raise ConfigurationAppError(
            code="server_misconfigured",
            message="Storage backend is not configured",
        )

    return await acreate_client(
        supabase_settings.url,  # type: ignore[arg-type]
        supabase_settings.service_role_key,  # type: ignore[arg-type]
    )
