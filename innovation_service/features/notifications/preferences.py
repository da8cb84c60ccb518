"""Email routing by notification preference.

A role's preference is stored per category; a missing entry means YES.
Only emails are subject to preferences, in-app notifications always go out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from innovation_service.features.notifications.enums import NotificationPreferenceValue
from innovation_service.features.notifications.metrics import notification_emails_suppressed_total
from innovation_service.features.notifications.types import Recipient
from innovation_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from innovation_service.features.notifications.enums import NotificationCategory
    from innovation_service.features.notifications.recipients import RecipientsService
    from innovation_service.features.notifications.types import EmailQueueItem


def should_send_email(
    category: NotificationCategory | None,
    preferences: Mapping[NotificationCategory, NotificationPreferenceValue] | None,
) -> bool:
    """Whether an email of ``category`` may be sent given one role's preferences."""
    if category is None or not preferences:
        return True
    return preferences.get(category, NotificationPreferenceValue.YES) == NotificationPreferenceValue.YES


@dataclass
class EmailRoutingResult:
    """Outcome of preference routing.

    Attributes:
        sent: Items to forward to the email transport, in queue order
        suppressed: Items dropped because the role opted out of the category
    """

    sent: list[EmailQueueItem] = field(default_factory=list)
    suppressed: list[EmailQueueItem] = field(default_factory=list)


class PreferenceResolver:
    """Filters an email queue against the stored preferences of its recipients."""

    def __init__(self, recipients: RecipientsService) -> None:
        self._recipients = recipients
        self._lazy = get_lazy_logger(__name__)

    async def filter_emails(self, items: Sequence[EmailQueueItem]) -> EmailRoutingResult:
        result = EmailRoutingResult()
        if not items:
            return result

        role_ids = list(
            dict.fromkeys(
                item.to.role_id
                for item in items
                if isinstance(item.to, Recipient) and item.preference_category is not None
            )
        )
        preferences = await self._recipients.get_email_preferences(role_ids) if role_ids else {}

        for item in items:
            if isinstance(item.to, Recipient) and not should_send_email(
                item.preference_category,
                preferences.get(item.to.role_id),
            ):
                result.suppressed.append(item)
                notification_emails_suppressed_total.labels(category=str(item.preference_category)).inc()
                continue
            result.sent.append(item)

        self._lazy.debug(lambda: f"Email routing: {len(result.sent)} sent, {len(result.suppressed)} suppressed")
        return result
