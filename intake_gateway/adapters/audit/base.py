"""Audit sink interface for admitted submissions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from intake_gateway.schemas.contact import SubmissionRecord


class AbstractAuditSink(ABC):
    """Append-only store of admitted submissions."""

    @abstractmethod
    async def record(self, submission: SubmissionRecord) -> bool:
        """Persist one record.

        Returns:
            True if the store accepted the record, False otherwise. Callers
            treat exceptions the same as False.
        """
        raise NotImplementedError
