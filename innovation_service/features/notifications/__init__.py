"""Notification dispatch engine.

Turns domain events raised by the innovation platform (a task was created,
a support changed status, an innovation was archived...) into email and
in-app notifications for the right users.

Architecture:
    - Registry: maps each ``NotifierType`` to its handler and forwards the
      handler's queues to the channels
    - Handlers: one per event kind, resolve recipients and build the queues
    - Recipients: read-only database queries for users, roles and context
    - Preferences: drop emails a role opted out of
    - Channels: ``EmailTransport`` and ``NotificationStore`` protocols

Example:
    ```python
    dispatcher = NotificationDispatcher(
        recipients=RecipientsService(session_factory),
        links=DeepLinkBuilder("https://innovation.example.org"),
        identity=identity_client,
        email_transport=InMemoryEmailTransport(),
        notification_store=InMemoryNotificationStore(),
    )
    result = await dispatcher.dispatch(NotifierType.LOCK_USER, {"identity_id": "identity-123"}, context)
    ```
"""

from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.registry import (
    HANDLERS,
    DispatchResult,
    NotificationDispatcher,
    create_notification_dispatcher,
    get_notification_dispatcher,
)
from innovation_service.features.notifications.schemas import DomainContext, NotificationEvent

__all__ = [
    "HANDLERS",
    "DispatchResult",
    "DomainContext",
    "NotificationCategory",
    "NotificationDispatcher",
    "NotificationEvent",
    "NotifierType",
    "ServiceRole",
    "create_notification_dispatcher",
    "get_notification_dispatcher",
]
