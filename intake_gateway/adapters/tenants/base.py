"""Tenant registry interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from intake_gateway.schemas.tenant import TenantConfig
from intake_gateway.utils.text import normalize_slug

MAX_TENANT_SLUG_LEN = 64


class AbstractTenantRegistry(ABC):
    """Resolves tenant identifiers to their configuration.

    ``resolve`` normalizes the identifier and short-circuits slugs that can
    never exist; backends only implement the keyed lookup.
    """

    max_slug_len: int = MAX_TENANT_SLUG_LEN

    async def resolve(self, tenant_identifier: str) -> TenantConfig | None:
        """Look up a tenant by (case-insensitive, padded) identifier.

        Returns:
            The tenant configuration, or None for empty, overlong or unknown
            slugs. Disabled tenants are returned as-is.

        Raises:
            BackendUnavailableError: If the tenant store cannot be queried.
        """
        slug = normalize_slug(tenant_identifier)
        if not slug or len(slug) > self.max_slug_len:
            return None
        return await self.fetch(slug)

    @abstractmethod
    async def fetch(self, slug: str) -> TenantConfig | None:
        """Return the stored configuration for an already normalized slug."""
        raise NotImplementedError

    async def ping(self) -> None:
        """Verify the store is reachable; raise BackendUnavailableError if not."""
        return None
