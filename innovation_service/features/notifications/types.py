"""Value types passed between recipient resolution, handlers and channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from innovation_service.features.notifications.enums import (
        InnovationStatus,
        InnovationSupportStatus,
        NotificationCategory,
        ServiceRole,
    )


@dataclass(frozen=True, slots=True)
class Recipient:
    """One role assignment of a platform user, addressable by email and in-app.

    Attributes:
        user_id: Platform user id.
        role_id: UserRole id; the unit of in-app delivery and preferences.
        role: Role of the assignment.
        identity_id: Identity provider id, resolved to name/email downstream.
        is_active: False when either the user or the role is locked.
        organisation_unit_id: Unit of the role, for accessor roles.
    """

    user_id: str
    role_id: str
    role: ServiceRole
    identity_id: str
    is_active: bool
    organisation_unit_id: str | None = None


@dataclass(frozen=True, slots=True)
class EmailRecipient:
    """A raw email address with no platform account (e.g. an invited collaborator)."""

    email: str
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class EmailQueueItem:
    template_id: str
    to: Recipient | EmailRecipient
    preference_category: NotificationCategory | None
    params: dict[str, str]
    include_locked: bool = False


@dataclass(frozen=True, slots=True)
class InAppContext:
    type: NotificationCategory
    detail: str
    id: str


@dataclass(frozen=True, slots=True)
class InAppQueueItem:
    """One logical in-app notification fanned out to every role in ``user_role_ids``."""

    innovation_id: str | None
    context: InAppContext
    user_role_ids: tuple[str, ...]
    params: dict[str, str]
    notification_id: str


# ============================================================================
# Lookup results
# ============================================================================


@dataclass(frozen=True, slots=True)
class InnovationInfo:
    id: str
    name: str
    status: InnovationStatus
    owner_id: str | None = None
    owner_identity_id: str | None = None


@dataclass(frozen=True, slots=True)
class OrganisationInfo:
    id: str
    name: str
    acronym: str | None = None


@dataclass(frozen=True, slots=True)
class OrganisationUnitInfo:
    organisation_id: str
    organisation_name: str
    organisation_acronym: str | None
    unit_id: str
    unit_name: str
    unit_acronym: str | None


@dataclass(frozen=True, slots=True)
class ThreadInfo:
    id: str
    subject: str
    author: Recipient | None = None


@dataclass(frozen=True, slots=True)
class TaskInfo:
    id: str
    display_id: str
    status: str
    owner: Recipient | None = None


@dataclass(frozen=True, slots=True)
class CollaborationInfo:
    collaborator_id: str
    email: str
    status: str
    user_id: str | None = None


@dataclass(frozen=True, slots=True)
class TransferInfo:
    id: str
    email: str
    status: str
    owner_id: str


@dataclass(frozen=True, slots=True)
class ExportRequestInfo:
    id: str
    status: str
    request_reason: str
    reject_reason: str | None
    created_by: str
    created_by_role_id: str
    unit_id: str | None
    unit_name: str | None


@dataclass(frozen=True, slots=True)
class SupportInfo:
    id: str
    innovation_id: str
    innovation_name: str
    organisation_unit_id: str
    status: InnovationSupportStatus


@dataclass(frozen=True, slots=True)
class IdleSupport:
    """A support with no activity for ``days_idle`` whole days."""

    support_id: str
    innovation_id: str
    innovation_name: str
    organisation_unit_id: str
    status: InnovationSupportStatus
    last_activity_at: datetime
    days_idle: int


@dataclass(frozen=True, slots=True)
class IncompleteInnovation:
    innovation_id: str
    innovation_name: str
    owner_id: str
    days_idle: int


@dataclass(frozen=True, slots=True)
class UnsupportedInnovation:
    """An in-progress innovation with no engaging or waiting support for ``days_idle`` days."""

    innovation_id: str
    innovation_name: str
    last_support_at: datetime
    days_idle: int
    expected_archive_date: datetime


@dataclass(frozen=True, slots=True)
class SuggestedUnit:
    """A unit suggested for an innovation that has not opened a support yet."""

    innovation_id: str
    innovation_name: str
    organisation_unit_id: str
    suggested_at: datetime


@dataclass(frozen=True, slots=True)
class OwnedInnovation:
    id: str
    name: str
    assigned: list[Recipient] = field(default_factory=list)
