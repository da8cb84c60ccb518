"""Formatting helpers shared by notification handlers."""

from __future__ import annotations

from datetime import datetime

from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    InnovationTaskStatus,
    ServiceRole,
)

NEEDS_ASSESSMENT_UNIT_NAME = "needs assessment"

_TEAM_NAMES = {
    ServiceRole.ASSESSMENT: "Needs assessment team",
    ServiceRole.ADMIN: "Service administrators",
}

_TASK_STATUS_WORDING = {
    InnovationTaskStatus.CANCELLED: "cancelled",
    InnovationTaskStatus.DONE: "done",
    InnovationTaskStatus.DECLINED: "declined",
    InnovationTaskStatus.OPEN: "reopened",
}

_SUPPORT_STATUS_WORDING = {
    InnovationSupportStatus.SUGGESTED: "Suggested",
    InnovationSupportStatus.ENGAGING: "Engaging",
    InnovationSupportStatus.WAITING: "Waiting",
    InnovationSupportStatus.UNASSIGNED: "Unassigned",
    InnovationSupportStatus.UNSUITABLE: "Unsuitable",
    InnovationSupportStatus.CLOSED: "Closed",
}

_ROLE_FALLBACK_NAMES = {
    ServiceRole.ACCESSOR: "accessor user",
    ServiceRole.QUALIFYING_ACCESSOR: "accessor user",
    ServiceRole.ASSESSMENT: "assessment user",
    ServiceRole.INNOVATOR: "innovator user",
}


def display_tag(role: ServiceRole, *, unit_name: str | None = None, is_owner: bool | None = None) -> str:
    """Label shown next to a sender's name in in-app notifications.

    Examples:
        >>> display_tag(ServiceRole.INNOVATOR, is_owner=False)
        'Collaborator'
        >>> display_tag(ServiceRole.ACCESSOR, unit_name="Unit A")
        'Unit A'
    """
    if role.is_accessor_type:
        return unit_name or ""
    if role in _TEAM_NAMES:
        return _TEAM_NAMES[role]
    if is_owner is None:
        return "Innovator"
    return "Owner" if is_owner else "Collaborator"


def transform_into_bullet(items: list[str], prefix: str = "*") -> str:
    return "".join(f"{prefix} {item} \n" for item in items)


def format_string_array(items: list[str]) -> str:
    """Join names as prose: ``a, b and c``."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def format_date(value: datetime) -> str:
    """Render a date the way UK readers expect: ``dd/mm/yyyy``."""
    return value.strftime("%d/%m/%Y")


def translate_task_status(status: InnovationTaskStatus) -> str:
    return _TASK_STATUS_WORDING[status]


def translate_support_status(status: InnovationSupportStatus) -> str:
    return _SUPPORT_STATUS_WORDING[status]


def fallback_user_name(role: ServiceRole | None) -> str:
    """Name used when the identity provider has no display name for a user."""
    if role is None:
        return "user"
    return _ROLE_FALLBACK_NAMES.get(role, "user")
