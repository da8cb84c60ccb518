"""Modular Pydantic Settings v2 configuration.

One frozen settings model per concern, each read from its own environment
prefix (DB_, IDENTITY_, LOG_, NOTIFICATIONS_) and an optional .env file.

Import settings via the cached loaders:
    from innovation_service.core.settings import get_notification_settings
"""

from __future__ import annotations

from .database import DatabaseSettings
from .identity import IdentityProviderSettings
from .loader import (
    clear_all_caches,
    get_db_settings,
    get_identity_settings,
    get_logging_settings,
    get_notification_settings,
)
from .logs import LoggingSettings
from .notifications import NotificationSettings

__all__ = [
    "DatabaseSettings",
    "IdentityProviderSettings",
    "LoggingSettings",
    "NotificationSettings",
    "clear_all_caches",
    "get_db_settings",
    "get_identity_settings",
    "get_logging_settings",
    "get_notification_settings",
]
