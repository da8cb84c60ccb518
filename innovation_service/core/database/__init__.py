"""Declarative base and mixins shared by domain models."""

from innovation_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPKMixin,
    as_utc,
    new_uuid,
    utcnow,
)

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDPKMixin",
    "as_utc",
    "new_uuid",
    "utcnow",
]
