"""Slack-compatible incoming-webhook notifier."""

from __future__ import annotations

import logging

import httpx

from intake_gateway.adapters.notify.base import AbstractNotifier

logger = logging.getLogger(__name__)


class WebhookNotifier(AbstractNotifier):
    """POSTs ``{"text": message}`` to the tenant's webhook URL.

    One attempt per call; any 2xx counts as delivered. Timeouts, transport
    errors and non-2xx answers are logged and reported as False.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 5.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout_seconds)

    async def notify(self, target: str, message: str) -> bool:
        if not target:
            logger.warning("notify.no_target")
            return False

        try:
            response = await self._http.post(target, json={"text": message})
        except httpx.HTTPError as exc:
            logger.error("notify.transport_error", extra={"error_type": type(exc).__name__})
            return False

        if not response.is_success:
            logger.error(
                "notify.rejected",
                extra={"status_code": response.status_code, "response_body": response.text[:200]},
            )
            return False
        return True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()


class DisabledNotifier(AbstractNotifier):
    """Stand-in used when delivery is switched off by configuration."""

    async def notify(self, target: str, message: str) -> bool:
        logger.info("notify.skipped", extra={"reason": "notifications_disabled"})
        return False
