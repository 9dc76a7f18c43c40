"""In-memory hour-bucket counter store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: a lock makes each increment-and-read atomic.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable

from intake_gateway.adapters.rate_limit.base import AbstractRateLimiter

CounterKey = tuple[str, str, datetime]


def hour_bucket(now: float) -> datetime:
    """Truncate a UNIX timestamp to the start of its UTC hour."""
    return datetime.fromtimestamp(now, tz=timezone.utc).replace(
        minute=0, second=0, microsecond=0
    )


class InMemoryRateLimiter(AbstractRateLimiter):
    """Counter store keyed by (tenant, source address, hour bucket).

    Buckets are never pruned; like the database table, retention is an
    external concern.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[CounterKey, int] = {}

    async def increment(self, tenant_slug: str, source_address: str) -> int:
        if not tenant_slug:
            raise ValueError("tenant_slug must be a non-empty string")

        key = (tenant_slug, source_address, hour_bucket(self._clock()))
        with self._lock:
            count = self._counters.get(key, 0) + 1
            self._counters[key] = count
        return count

    def counter_value(self, tenant_slug: str, source_address: str, bucket: datetime) -> int:
        """Current count for a key (0 when the bucket was never touched)."""
        with self._lock:
            return self._counters.get((tenant_slug, source_address, bucket), 0)

    def current_bucket(self) -> datetime:
        return hour_bucket(self._clock())
