"""Cached settings loaders.

Each settings model is read from the environment once per process. Tests
either build models directly (``NotificationSettings(idle_support_days=10)``)
or call ``clear_all_caches()`` after changing the environment.
"""

from __future__ import annotations

from functools import lru_cache

from .database import DatabaseSettings
from .identity import IdentityProviderSettings
from .logs import LoggingSettings
from .notifications import NotificationSettings


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_identity_settings() -> IdentityProviderSettings:
    return IdentityProviderSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    return NotificationSettings()


_LOADERS = (get_db_settings, get_identity_settings, get_logging_settings, get_notification_settings)


def clear_all_caches() -> None:
    for loader in _LOADERS:
        loader.cache_clear()
