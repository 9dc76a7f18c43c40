"""Audit sink inserting into ``form_submissions`` through Supabase."""

from __future__ import annotations

import logging
from typing import Any

from supabase import AsyncClient

from intake_gateway.adapters.audit.base import AbstractAuditSink
from intake_gateway.adapters.supabase_client import SUBMISSIONS_TABLE
from intake_gateway.schemas.contact import SubmissionRecord

logger = logging.getLogger(__name__)


def to_row(submission: SubmissionRecord) -> dict[str, Any]:
    """Serialize a record to the column layout of ``form_submissions``."""
    return submission.model_dump(mode="json")


class SupabaseAuditSink(AbstractAuditSink):
    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def record(self, submission: SubmissionRecord) -> bool:
        try:
            response = await self._client.table(SUBMISSIONS_TABLE).insert(to_row(submission)).execute()
        except Exception as exc:
            logger.error(
                "audit.insert_failed",
                extra={
                    "tenant": submission.tenant_slug,
                    "submission_id": str(submission.id),
                    "error_type": type(exc).__name__,
                },
            )
            return False

        if not response.data:
            logger.error(
                "audit.insert_empty",
                extra={"tenant": submission.tenant_slug, "submission_id": str(submission.id)},
            )
            return False
        return True
