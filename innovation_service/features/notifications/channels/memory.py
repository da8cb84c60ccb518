"""In-memory channel implementations for local runs and tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from innovation_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from innovation_service.features.notifications.types import EmailQueueItem, InAppQueueItem


class InMemoryEmailTransport:
    """Collects sent emails in ``sent``."""

    def __init__(self) -> None:
        self.sent: list[EmailQueueItem] = []
        self._logger = get_lazy_logger(__name__)

    async def send(self, items: Sequence[EmailQueueItem]) -> None:
        self.sent.extend(items)
        self._logger.debug(lambda: f"Captured {len(items)} emails")


class InMemoryNotificationStore:
    """Collects saved in-app notifications in ``saved``."""

    def __init__(self) -> None:
        self.saved: list[InAppQueueItem] = []
        self._logger = get_lazy_logger(__name__)

    async def save(self, items: Sequence[InAppQueueItem]) -> None:
        self.saved.extend(items)
        self._logger.debug(lambda: f"Captured {len(items)} in-app notifications")
