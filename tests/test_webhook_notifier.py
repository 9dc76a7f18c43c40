"""Tests for webhook delivery using httpx's mock transport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from intake_gateway.adapters.notify import DisabledNotifier, WebhookNotifier

from conftest import WEBHOOK_URL


def _notifier(handler) -> tuple[WebhookNotifier, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    return WebhookNotifier(http=http), seen


def test_posts_text_payload_once() -> None:
    notifier, seen = _notifier(lambda request: httpx.Response(200, text="ok"))

    delivered = asyncio.run(notifier.notify(WEBHOOK_URL, "*New contact (cfobras)*"))

    assert delivered is True
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == WEBHOOK_URL
    assert json.loads(seen[0].content) == {"text": "*New contact (cfobras)*"}


@pytest.mark.parametrize("status_code", [400, 404, 500])
def test_non_success_status_is_not_retried(status_code: int) -> None:
    notifier, seen = _notifier(lambda request: httpx.Response(status_code, text="invalid_token"))

    assert asyncio.run(notifier.notify(WEBHOOK_URL, "hello")) is False
    assert len(seen) == 1


def test_transport_error_is_reported_as_undelivered() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    notifier, _ = _notifier(boom)

    assert asyncio.run(notifier.notify(WEBHOOK_URL, "hello")) is False


def test_empty_target_skips_delivery() -> None:
    notifier, seen = _notifier(lambda request: httpx.Response(200))

    assert asyncio.run(notifier.notify("", "hello")) is False
    assert seen == []


def test_borrowed_client_is_left_open() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    notifier = WebhookNotifier(http=http)

    asyncio.run(notifier.aclose())

    assert http.is_closed is False


def test_owned_client_is_closed() -> None:
    notifier = WebhookNotifier(timeout_seconds=1.0)

    asyncio.run(notifier.aclose())

    assert notifier._http.is_closed is True


def test_disabled_notifier_never_delivers() -> None:
    assert asyncio.run(DisabledNotifier().notify(WEBHOOK_URL, "hello")) is False
