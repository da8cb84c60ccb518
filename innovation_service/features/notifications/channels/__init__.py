"""Delivery collaborators: email transport and in-app notification store."""

from innovation_service.features.notifications.channels.base import (
    EmailTransport,
    NotificationStore,
)
from innovation_service.features.notifications.channels.memory import (
    InMemoryEmailTransport,
    InMemoryNotificationStore,
)

__all__ = [
    "EmailTransport",
    "InMemoryEmailTransport",
    "InMemoryNotificationStore",
    "NotificationStore",
]
