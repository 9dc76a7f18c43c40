"""Rate limiter interfaces.

The pipeline depends on this abstraction so the counter store can be the
Supabase RPC in production and an in-process dict in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one counted admission attempt.

    Attributes:
        allowed: Whether the attempt fits in the hourly quota.
        limit: Quota applied to this attempt.
        count: Post-increment counter value for the current hour bucket.
    """

    allowed: bool
    limit: int
    count: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)


class AbstractRateLimiter(ABC):
    """Per-tenant, per-source-address, per-hour fixed window limiter."""

    @abstractmethod
    async def increment(self, tenant_slug: str, source_address: str) -> int:
        """Atomically add one attempt to the current hour bucket.

        Implementations must perform the increment as a single atomic
        operation at the store and return the post-increment count.

        Raises:
            BackendUnavailableError: If the counter store cannot be used.
        """
        raise NotImplementedError

    async def consume(
        self, tenant_slug: str, source_address: str, hourly_limit: int
    ) -> RateLimitResult:
        """Count an attempt and decide it against ``hourly_limit``.

        The attempt that pushes the count over the limit is rejected and its
        increment is kept.
        """
        if hourly_limit < 1:
            raise ValueError("hourly_limit must be >= 1")
        count = await self.increment(tenant_slug, source_address)
        return RateLimitResult(allowed=count <= hourly_limit, limit=hourly_limit, count=count)

    async def try_admit(self, tenant_slug: str, source_address: str, hourly_limit: int) -> bool:
        result = await self.consume(tenant_slug, source_address, hourly_limit)
        return result.allowed
