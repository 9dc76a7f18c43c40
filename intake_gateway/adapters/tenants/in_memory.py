"""Dict-backed tenant registry for local development and tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter

from intake_gateway.adapters.tenants.base import AbstractTenantRegistry
from intake_gateway.core.errors import ConfigurationAppError
from intake_gateway.schemas.tenant import TenantConfig

logger = logging.getLogger(__name__)

_tenant_list_adapter = TypeAdapter(list[TenantConfig])


class InMemoryTenantRegistry(AbstractTenantRegistry):
    def __init__(self, tenants: Iterable[TenantConfig] = ()) -> None:
        self._tenants: dict[str, TenantConfig] = {t.tenant_slug: t for t in tenants}

    async def fetch(self, slug: str) -> TenantConfig | None:
        return self._tenants.get(slug)

    def upsert(self, tenant: TenantConfig) -> None:
        self._tenants[tenant.tenant_slug] = tenant

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryTenantRegistry":
        """Load tenants from a JSON array of tenant objects.

        Rows use the same column names as the ``tenant_contact_settings``
        table.

        Raises:
            ConfigurationAppError: If the file is missing or malformed.
        """
        file_path = Path(path)
        try:
            raw: Any = json.loads(file_path.read_text(encoding="utf-8"))
            tenants = _tenant_list_adapter.validate_python(raw)
        except (OSError, ValueError) as exc:
            logger.error(
                "tenants.seed_load_failed",
                extra={"path": str(file_path), "error_type": type(exc).__name__},
            )
            raise ConfigurationAppError(
                code="server_misconfigured",
                message="Tenant seed file could not be loaded",
                details={"hint": "Check APP_MEMORY_TENANTS_FILE"},
            ) from exc

        logger.info("tenants.seed_loaded", extra={"path": str(file_path), "count": len(tenants)})
        return cls(tenants)
