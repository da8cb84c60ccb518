"""Enumerations shared by the notification engine."""

from __future__ import annotations

from enum import StrEnum


class ServiceRole(StrEnum):
    INNOVATOR = "INNOVATOR"
    ACCESSOR = "ACCESSOR"
    QUALIFYING_ACCESSOR = "QUALIFYING_ACCESSOR"
    ASSESSMENT = "ASSESSMENT"
    ADMIN = "ADMIN"

    @property
    def is_accessor_type(self) -> bool:
        return self in (ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR)


class NotificationCategory(StrEnum):
    """Preference category of an email; also the in-app context type."""

    TASK = "TASK"
    MESSAGE = "MESSAGE"
    INNOVATION_MANAGEMENT = "INNOVATION_MANAGEMENT"
    SUPPORT = "SUPPORT"
    EXPORT_REQUEST = "EXPORT_REQUEST"
    ACCOUNT = "ACCOUNT"
    REMINDER = "REMINDER"
    INNOVATOR_SUBMIT_IR = "INNOVATOR_SUBMIT_IR"
    ASSIGN_NA = "ASSIGN_NA"
    SUGGEST_SUPPORT = "SUGGEST_SUPPORT"
    DOCUMENT = "DOCUMENT"
    INNOVATION = "INNOVATION"
    NEEDS_ASSESSMENT = "NEEDS_ASSESSMENT"
    SUPPORT_SUMMARY = "SUPPORT_SUMMARY"
    AUTOMATIC = "AUTOMATIC"
    ADMIN = "ADMIN"


class NotificationPreferenceValue(StrEnum):
    YES = "YES"
    NO = "NO"


class InnovationStatus(StrEnum):
    CREATED = "CREATED"
    WAITING_NEEDS_ASSESSMENT = "WAITING_NEEDS_ASSESSMENT"
    NEEDS_ASSESSMENT = "NEEDS_ASSESSMENT"
    IN_PROGRESS = "IN_PROGRESS"
    ARCHIVED = "ARCHIVED"


class InnovationSupportStatus(StrEnum):
    SUGGESTED = "SUGGESTED"
    ENGAGING = "ENGAGING"
    WAITING = "WAITING"
    UNASSIGNED = "UNASSIGNED"
    UNSUITABLE = "UNSUITABLE"
    CLOSED = "CLOSED"


class InnovationTaskStatus(StrEnum):
    OPEN = "OPEN"
    DONE = "DONE"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"


class InnovationCollaboratorStatus(StrEnum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"
    REMOVED = "REMOVED"
    LEFT = "LEFT"
    EXPIRED = "EXPIRED"


class InnovationTransferStatus(StrEnum):
    PENDING = "PENDING"
    CANCELED = "CANCELED"
    DECLINED = "DECLINED"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"


class InnovationSupportLogType(StrEnum):
    STATUS_UPDATE = "STATUS_UPDATE"
    ACCESSOR_SUGGESTION = "ACCESSOR_SUGGESTION"
    ASSESSMENT_SUGGESTION = "ASSESSMENT_SUGGESTION"
    PROGRESS_UPDATE = "PROGRESS_UPDATE"


class InnovationExportRequestStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class NotifierType(StrEnum):
    """Domain event kinds the engine knows how to turn into notifications."""

    ACCOUNT_CREATION = "ACCOUNT_CREATION"
    ACCOUNT_DELETION = "ACCOUNT_DELETION"

    LOCK_USER = "LOCK_USER"
    UNIT_INACTIVATED = "UNIT_INACTIVATED"
    USER_EMAIL_ADDRESS_UPDATED = "USER_EMAIL_ADDRESS_UPDATED"
    NEW_SUPPORTING_ACCOUNT = "NEW_SUPPORTING_ACCOUNT"
    NEW_ANNOUNCEMENT = "NEW_ANNOUNCEMENT"

    INNOVATION_DOCUMENT_UPLOADED = "INNOVATION_DOCUMENT_UPLOADED"

    TASK_CREATION = "TASK_CREATION"
    TASK_UPDATE = "TASK_UPDATE"

    THREAD_CREATION = "THREAD_CREATION"
    THREAD_ADD_FOLLOWERS = "THREAD_ADD_FOLLOWERS"
    THREAD_MESSAGE_CREATION = "THREAD_MESSAGE_CREATION"

    SUPPORT_STATUS_UPDATE = "SUPPORT_STATUS_UPDATE"
    SUPPORT_NEW_ASSIGN_ACCESSORS = "SUPPORT_NEW_ASSIGN_ACCESSORS"
    SUPPORT_STATUS_CHANGE_REQUEST = "SUPPORT_STATUS_CHANGE_REQUEST"
    SUPPORT_SUMMARY_UPDATE = "SUPPORT_SUMMARY_UPDATE"

    INNOVATION_SUBMITTED = "INNOVATION_SUBMITTED"
    NEEDS_ASSESSMENT_STARTED = "NEEDS_ASSESSMENT_STARTED"
    NEEDS_ASSESSMENT_COMPLETED = "NEEDS_ASSESSMENT_COMPLETED"
    NEEDS_ASSESSMENT_ASSESSOR_UPDATE = "NEEDS_ASSESSMENT_ASSESSOR_UPDATE"

    ORGANISATION_UNITS_SUGGESTION = "ORGANISATION_UNITS_SUGGESTION"
    INNOVATION_DELAYED_SHARED_SUGGESTION = "INNOVATION_DELAYED_SHARED_SUGGESTION"

    EXPORT_REQUEST_SUBMITTED = "EXPORT_REQUEST_SUBMITTED"
    EXPORT_REQUEST_FEEDBACK = "EXPORT_REQUEST_FEEDBACK"

    COLLABORATOR_INVITE = "COLLABORATOR_INVITE"
    COLLABORATOR_UPDATE = "COLLABORATOR_UPDATE"
    INNOVATION_STOP_SHARING = "INNOVATION_STOP_SHARING"
    INNOVATION_ARCHIVE = "INNOVATION_ARCHIVE"
    INNOVATION_TRANSFER_OWNERSHIP_CREATION = "INNOVATION_TRANSFER_OWNERSHIP_CREATION"
    INNOVATION_TRANSFER_OWNERSHIP_COMPLETED = "INNOVATION_TRANSFER_OWNERSHIP_COMPLETED"

    INCOMPLETE_INNOVATION_RECORD = "INCOMPLETE_INNOVATION_RECORD"
    IDLE_SUPPORT_ACCESSOR = "IDLE_SUPPORT_ACCESSOR"
    IDLE_SUPPORT_INNOVATOR = "IDLE_SUPPORT_INNOVATOR"
    UNIT_KPI = "UNIT_KPI"
    INNOVATION_TRANSFER_OWNERSHIP_REMINDER = "INNOVATION_TRANSFER_OWNERSHIP_REMINDER"
    INNOVATION_TRANSFER_OWNERSHIP_EXPIRATION = "INNOVATION_TRANSFER_OWNERSHIP_EXPIRATION"
