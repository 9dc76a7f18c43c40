"""Outbound notification channels."""

from intake_gateway.adapters.notify.base import AbstractNotifier
from intake_gateway.adapters.notify.webhook import DisabledNotifier, WebhookNotifier

__all__ = [
    "AbstractNotifier",
    "DisabledNotifier",
    "WebhookNotifier",
]
