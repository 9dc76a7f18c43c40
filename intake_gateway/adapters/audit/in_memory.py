"""List-backed audit sink for local development and tests."""

from __future__ import annotations

import threading

from intake_gateway.adapters.audit.base import AbstractAuditSink
from intake_gateway.schemas.contact import SubmissionRecord


class InMemoryAuditSink(AbstractAuditSink):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[SubmissionRecord] = []

    async def record(self, submission: SubmissionRecord) -> bool:
        with self._lock:
            self._records.append(submission)
        return True

    @property
    def records(self) -> tuple[SubmissionRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def for_tenant(self, tenant_slug: str) -> list[SubmissionRecord]:
        return [r for r in self.records if r.tenant_slug == tenant_slug]
