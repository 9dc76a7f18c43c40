"""Read-through TTL cache in front of another tenant registry.

Invalidation policy: entries expire ``ttl_seconds`` after they were fetched;
unknown slugs are never cached, so a newly created tenant is visible on its
next request; ``invalidate``/``clear`` drop entries on demand. Backend errors
pass through uncached.
"""

from __future__ import annotations

from intake_gateway.adapters.tenants.base import AbstractTenantRegistry
from intake_gateway.schemas.tenant import TenantConfig
from intake_gateway.utils.simple_cache import SimpleTTLCache
from intake_gateway.utils.text import normalize_slug


class CachedTenantRegistry(AbstractTenantRegistry):
    def __init__(
        self,
        inner: AbstractTenantRegistry,
        cache: SimpleTTLCache[TenantConfig],
    ) -> None:
        self._inner = inner
        self._cache = cache
        self.max_slug_len = inner.max_slug_len

    async def fetch(self, slug: str) -> TenantConfig | None:
        cached = self._cache.get(slug)
        if cached is not None:
            return cached

        tenant = await self._inner.fetch(slug)
        if tenant is not None:
            self._cache.set(slug, tenant)
        return tenant

    def invalidate(self, tenant_identifier: str) -> None:
        self._cache.invalidate(normalize_slug(tenant_identifier))

    def clear(self) -> None:
        self._cache.clear()

    async def ping(self) -> None:
        await self._inner.ping()
