"""Notifier interface for admission alerts."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractNotifier(ABC):
    """Best-effort, single-attempt delivery of a text message to a target."""

    @abstractmethod
    async def notify(self, target: str, message: str) -> bool:
        """Deliver ``message`` to ``target`` once.

        Returns:
            True when the target acknowledged delivery, False otherwise.
            Implementations should not raise for delivery failures.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources held by the notifier."""
        return None
