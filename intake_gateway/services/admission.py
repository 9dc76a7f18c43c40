"""Admission pipeline for contact-form submissions.

Each request runs a linear sequence of checks, cheapest and most certain
first:

1. parse the JSON body
2. honeypot field must be empty
3. extract and bound the contact fields
4. resolve an enabled tenant
5. declared origin must be on the tenant allow-list
6. count the attempt against the tenant/source hourly quota

Any failing check raises a ``SubmissionRejected`` subclass and nothing after
it runs. Once all checks pass, the submission is written to the audit sink
and announced through the notifier; both side effects are best-effort and
never change the outcome.

The pipeline does not decide how rejections are presented. The HTTP layer
masks them (stealth mode) or maps them to status codes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, NoReturn

from pydantic import ValidationError

from intake_gateway.adapters.audit.base import AbstractAuditSink
from intake_gateway.adapters.notify.base import AbstractNotifier
from intake_gateway.adapters.rate_limit.base import AbstractRateLimiter
from intake_gateway.adapters.tenants.base import AbstractTenantRegistry
from intake_gateway.core.errors import (
    BackendUnavailableError,
    ErrorDetails,
    ForbiddenOriginError,
    HoneypotTriggeredError,
    InvalidSubmissionError,
    RateLimitedError,
    SubmissionBackendError,
    SubmissionRejected,
    TenantNotAvailableError,
)
from intake_gateway.core.logging import hash_identifier
from intake_gateway.core.request_meta import UNKNOWN_SOURCE_ADDRESS
from intake_gateway.schemas.contact import ContactSubmission, SubmissionRecord
from intake_gateway.schemas.tenant import TenantConfig
from intake_gateway.services.notifications import build_notification_text
from intake_gateway.utils.text import clean_text

logger = logging.getLogger(__name__)

DEFAULT_HONEYPOT_FIELD = "company_website"
DEFAULT_RATE_LIMIT_PER_HOUR = 10


@dataclass(frozen=True)
class IntakeRequest:
    """Transport-independent view of one inbound submission."""

    body: bytes
    origin: str
    source_address: str
    user_agent: str = ""


class AdmissionPipeline:
    """Orchestrates tenant lookup, anti-abuse checks and side effects."""

    def __init__(
        self,
        *,
        tenants: AbstractTenantRegistry,
        rate_limiter: AbstractRateLimiter,
        audit_sink: AbstractAuditSink,
        notifier: AbstractNotifier,
        honeypot_field: str = DEFAULT_HONEYPOT_FIELD,
        default_rate_limit_per_hour: int = DEFAULT_RATE_LIMIT_PER_HOUR,
    ) -> None:
        self.tenants = tenants
        self.rate_limiter = rate_limiter
        self.audit_sink = audit_sink
        self.notifier = notifier
        self.honeypot_field = honeypot_field
        self.default_rate_limit_per_hour = default_rate_limit_per_hour

    async def process(self, request: IntakeRequest) -> SubmissionRecord:
        """Run every admission check, then persist and notify.

        Args:
            request: Raw body plus caller metadata.

        Returns:
            The audit record built for the admitted submission.

        Raises:
            SubmissionRejected: Exactly one subclass, for the first failing
                check.
        """
        source_hash = hash_identifier(request.source_address)

        payload = self._parse(request.body, source_hash)
        self._check_honeypot(payload, source_hash)
        submission = self._extract(payload, source_hash)
        tenant = await self._resolve_tenant(submission.tenant, source_hash)
        self._check_origin(tenant, request.origin, source_hash)
        await self._check_rate_limit(tenant, request.source_address, source_hash)

        record = SubmissionRecord(
            tenant_slug=tenant.tenant_slug,
            name=submission.name,
            email=submission.email,
            phone=submission.phone or None,
            company_name=submission.company_name or None,
            contact_type=submission.contact_type,
            message=submission.message,
            ip=None if request.source_address == UNKNOWN_SOURCE_ADDRESS else request.source_address,
            user_agent=request.user_agent or None,
        )

        logger.info(
            "admission.admitted",
            extra={
                "tenant": tenant.tenant_slug,
                "source_hash": source_hash,
                "submission_id": str(record.id),
                "contact_type": record.contact_type.value,
            },
        )

        await self._persist(record)
        await self._notify(tenant, submission, request)
        return record

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _reject(
        self,
        error_cls: type[SubmissionRejected],
        code: str,
        message: str,
        *,
        source_hash: str,
        tenant: str | None = None,
        details: ErrorDetails | None = None,
    ) -> NoReturn:
        logger.warning(
            "admission.rejected",
            extra={"reason": code, "tenant": tenant, "source_hash": source_hash},
        )
        raise error_cls(code=code, message=message, details=details)

    def _parse(self, body: bytes, source_hash: str) -> dict[str, Any]:
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError):
            # RecursionError: nesting deeper than the decoder can follow
            self._reject(
                InvalidSubmissionError,
                "invalid_json",
                "Request body must be a JSON object",
                source_hash=source_hash,
            )
        if not isinstance(payload, dict):
            self._reject(
                InvalidSubmissionError,
                "invalid_json",
                "Request body must be a JSON object",
                source_hash=source_hash,
            )
        return payload

    def _check_honeypot(self, payload: dict[str, Any], source_hash: str) -> None:
        if clean_text(payload.get(self.honeypot_field)):
            self._reject(
                HoneypotTriggeredError,
                "honeypot_triggered",
                "Submission rejected",
                source_hash=source_hash,
                tenant=clean_text(payload.get("tenant"))[:64] or None,
            )

    def _extract(self, payload: dict[str, Any], source_hash: str) -> ContactSubmission:
        try:
            return ContactSubmission.model_validate(payload)
        except ValidationError as exc:
            # Errors come in field declaration order; report the first one.
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else "payload"
            self._reject(
                InvalidSubmissionError,
                f"invalid_{field}",
                f"Field '{field}' is missing or invalid",
                source_hash=source_hash,
                details={"field": field},
            )

    async def _resolve_tenant(self, tenant_identifier: str, source_hash: str) -> TenantConfig:
        try:
            tenant = await self.tenants.resolve(tenant_identifier)
        except BackendUnavailableError as exc:
            self._reject(
                SubmissionBackendError,
                "backend_unavailable",
                "Submission could not be processed",
                source_hash=source_hash,
                details=exc.details,
            )

        if tenant is None or not tenant.enabled:
            self._reject(
                TenantNotAvailableError,
                "tenant_unavailable",
                "Submission rejected",
                source_hash=source_hash,
                tenant=tenant.tenant_slug if tenant else None,
            )
        return tenant

    def _check_origin(self, tenant: TenantConfig, origin: str, source_hash: str) -> None:
        if not tenant.allows_origin(origin):
            self._reject(
                ForbiddenOriginError,
                "forbidden_origin",
                "Origin is not allowed for this tenant",
                source_hash=source_hash,
                tenant=tenant.tenant_slug,
            )

    async def _check_rate_limit(
        self, tenant: TenantConfig, source_address: str, source_hash: str
    ) -> None:
        limit = tenant.hourly_limit(self.default_rate_limit_per_hour)
        try:
            result = await self.rate_limiter.consume(tenant.tenant_slug, source_address, limit)
        except BackendUnavailableError as exc:
            self._reject(
                SubmissionBackendError,
                "backend_unavailable",
                "Submission could not be processed",
                source_hash=source_hash,
                tenant=tenant.tenant_slug,
                details=exc.details,
            )

        if not result.allowed:
            self._reject(
                RateLimitedError,
                "rate_limited",
                "Too many submissions, try again later",
                source_hash=source_hash,
                tenant=tenant.tenant_slug,
                details={"limit": result.limit},
            )

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    async def _persist(self, record: SubmissionRecord) -> None:
        try:
            stored = await self.audit_sink.record(record)
        except Exception as exc:
            logger.error(
                "audit.record_failed",
                extra={
                    "tenant": record.tenant_slug,
                    "submission_id": str(record.id),
                    "error_type": type(exc).__name__,
                },
            )
            return

        if not stored:
            logger.error(
                "audit.record_failed",
                extra={"tenant": record.tenant_slug, "submission_id": str(record.id)},
            )

    async def _notify(
        self, tenant: TenantConfig, submission: ContactSubmission, request: IntakeRequest
    ) -> None:
        text = build_notification_text(
            tenant.tenant_slug,
            submission,
            origin=request.origin,
            source_address=request.source_address,
        )
        try:
            delivered = await self.notifier.notify(tenant.notification_target, text)
        except Exception as exc:
            logger.error(
                "notify.failed",
                extra={"tenant": tenant.tenant_slug, "error_type": type(exc).__name__},
            )
            return

        logger.info("notify.attempted", extra={"tenant": tenant.tenant_slug, "delivered": delivered})
