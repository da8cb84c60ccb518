"""Protocols for the delivery collaborators the dispatcher forwards queues to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from innovation_service.features.notifications.types import EmailQueueItem, InAppQueueItem


class EmailTransport(Protocol):
    """Renders and sends emails.

    Resolves ``Recipient.identity_id`` to an address and injects the
    ``display_name`` and unsubscribe link into the template params.
    """

    async def send(self, items: Sequence[EmailQueueItem]) -> None:
        """Send every email item of one dispatch.

        Args:
            items: Email queue items that survived preference routing
        """
        ...


class NotificationStore(Protocol):
    """Persists in-app notifications.

    Items sharing a ``notification_id`` are one logical notification fanned
    out to several roles.
    """

    async def save(self, items: Sequence[InAppQueueItem]) -> None:
        ...
