"""Pydantic schemas for notification events.

``DomainContext`` describes the acting user and is validated upstream by the
API that emitted the event. Each event kind has one payload model, looked up
through ``PAYLOAD_SCHEMAS``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from innovation_service.features.notifications.enums import (
    InnovationCollaboratorStatus,
    InnovationStatus,
    InnovationSupportStatus,
    InnovationTaskStatus,
    NotifierType,
    ServiceRole,
)


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================================
# Acting user context
# ============================================================================


class CurrentRole(_Schema):
    id: str = Field(..., description="UserRole id the actor is operating under")
    role: ServiceRole


class OrganisationUnitRef(_Schema):
    id: str
    name: str
    acronym: str | None = None


class OrganisationRef(_Schema):
    id: str
    name: str
    acronym: str | None = None
    organisation_unit: OrganisationUnitRef | None = None


class DomainContext(_Schema):
    """Who triggered the event, under which role and unit."""

    id: str = Field(..., description="Platform user id of the actor")
    identity_id: str = Field(..., description="Identity provider id of the actor")
    current_role: CurrentRole
    organisation: OrganisationRef | None = None

    @property
    def role(self) -> ServiceRole:
        return self.current_role.role

    @property
    def unit_name(self) -> str | None:
        if self.organisation and self.organisation.organisation_unit:
            return self.organisation.organisation_unit.name
        return None

    @property
    def unit_id(self) -> str | None:
        if self.organisation and self.organisation.organisation_unit:
            return self.organisation.organisation_unit.id
        return None


# ============================================================================
# Payloads
# ============================================================================


class EmptyPayload(_Schema):
    pass


class _InnovationPayload(_Schema):
    innovation_id: str


class LockUserPayload(_Schema):
    identity_id: str


class UnitInactivatedPayload(_Schema):
    unit_id: str


class UserEmailAddressUpdatedPayload(_Schema):
    identity_id: str
    old_email: str
    new_email: str


class NewSupportingAccountPayload(_Schema):
    recipient_email: str


class NewAnnouncementPayload(_Schema):
    announcement_id: str
    title: str
    body: str = ""
    link_url: str = ""
    user_roles: list[ServiceRole] = Field(..., min_length=1, description="Roles the announcement targets")


class DocumentRef(_Schema):
    id: str
    name: str


class DocumentUploadedPayload(_InnovationPayload):
    document: DocumentRef


class TaskRef(_Schema):
    id: str


class TaskStatusRef(_Schema):
    id: str
    status: InnovationTaskStatus


class TaskCreationPayload(_InnovationPayload):
    task: TaskRef


class TaskUpdatePayload(_InnovationPayload):
    task: TaskStatusRef
    message: str = ""
    message_id: str
    thread_id: str


class ThreadCreationPayload(_InnovationPayload):
    thread_id: str
    message_id: str


class ThreadAddFollowersPayload(_InnovationPayload):
    thread_id: str
    new_followers_role_ids: list[str] = Field(default_factory=list)


class ThreadMessageCreationPayload(_InnovationPayload):
    thread_id: str
    message_id: str


class SupportStatusRef(_Schema):
    id: str
    status: InnovationSupportStatus
    message: str = ""
    new_assigned_accessors_ids: list[str] = Field(
        default_factory=list,
        description="UserRole ids assigned as part of the status change",
    )


class SupportStatusUpdatePayload(_InnovationPayload):
    support: SupportStatusRef
    thread_id: str


class SupportNewAssignAccessorsPayload(_InnovationPayload):
    support_id: str
    thread_id: str
    message: str = ""
    new_assigned_accessors_role_ids: list[str] = Field(default_factory=list)
    removed_assigned_accessors_role_ids: list[str] = Field(default_factory=list)
    changed_status: bool = False


class SupportStatusChangeRequestPayload(_InnovationPayload):
    proposed_status: InnovationSupportStatus
    request_status_update_comment: str


class SupportSummaryUpdatePayload(_InnovationPayload):
    support_id: str


class InnovationSubmittedPayload(_InnovationPayload):
    reassessment: bool = False


class NeedsAssessmentStartedPayload(_InnovationPayload):
    assessment_id: str
    message: str = ""
    message_id: str
    thread_id: str


class NeedsAssessmentCompletedPayload(_InnovationPayload):
    assessment_id: str


class AssessorRef(_Schema):
    id: str = Field(..., description="Platform user id of the assessor")


class NeedsAssessmentAssessorUpdatePayload(_InnovationPayload):
    assessment_id: str
    previous_assessor: AssessorRef | None = None
    new_assessor: AssessorRef


class OrganisationUnitsSuggestionPayload(_InnovationPayload):
    units_ids: list[str] = Field(default_factory=list)
    comment: str = ""


class InnovationDelayedSharedSuggestionPayload(_InnovationPayload):
    new_shared_org_ids: list[str] = Field(default_factory=list)


class ExportRequestPayload(_InnovationPayload):
    request_id: str


class CollaboratorInvitePayload(_InnovationPayload):
    collaborator_id: str


class CollaboratorStatusRef(_Schema):
    id: str
    status: InnovationCollaboratorStatus


class CollaboratorUpdatePayload(_InnovationPayload):
    collaborator: CollaboratorStatusRef


class AffectedUsers(_Schema):
    role_ids: list[str] = Field(default_factory=list)


class InnovationStopSharingPayload(_InnovationPayload):
    organisation_id: str
    affected_users: AffectedUsers | None = None


class InnovationArchivePayload(_InnovationPayload):
    message: str = ""
    previous_status: InnovationStatus
    affected_users: AffectedUsers | None = None


class TransferPayload(_InnovationPayload):
    transfer_id: str


class TransferReminderPayload(_InnovationPayload):
    innovation_name: str
    recipient_email: str


class TransferExpirationPayload(_InnovationPayload):
    transfer_id: str | None = None


class DeletedAccountInnovation(_Schema):
    id: str
    name: str
    transfer_expire_date: datetime | None = None


class AccountDeletionPayload(_Schema):
    innovations: list[DeletedAccountInnovation] = Field(default_factory=list)

    @field_validator("innovations")
    @classmethod
    def _dedupe(cls, v: list[DeletedAccountInnovation]) -> list[DeletedAccountInnovation]:
        seen: dict[str, DeletedAccountInnovation] = {}
        for innovation in v:
            seen.setdefault(innovation.id, innovation)
        return list(seen.values())


PAYLOAD_SCHEMAS: dict[NotifierType, type[BaseModel]] = {
    NotifierType.ACCOUNT_CREATION: EmptyPayload,
    NotifierType.ACCOUNT_DELETION: AccountDeletionPayload,
    NotifierType.LOCK_USER: LockUserPayload,
    NotifierType.UNIT_INACTIVATED: UnitInactivatedPayload,
    NotifierType.USER_EMAIL_ADDRESS_UPDATED: UserEmailAddressUpdatedPayload,
    NotifierType.NEW_SUPPORTING_ACCOUNT: NewSupportingAccountPayload,
    NotifierType.NEW_ANNOUNCEMENT: NewAnnouncementPayload,
    NotifierType.INNOVATION_DOCUMENT_UPLOADED: DocumentUploadedPayload,
    NotifierType.TASK_CREATION: TaskCreationPayload,
    NotifierType.TASK_UPDATE: TaskUpdatePayload,
    NotifierType.THREAD_CREATION: ThreadCreationPayload,
    NotifierType.THREAD_ADD_FOLLOWERS: ThreadAddFollowersPayload,
    NotifierType.THREAD_MESSAGE_CREATION: ThreadMessageCreationPayload,
    NotifierType.SUPPORT_STATUS_UPDATE: SupportStatusUpdatePayload,
    NotifierType.SUPPORT_NEW_ASSIGN_ACCESSORS: SupportNewAssignAccessorsPayload,
    NotifierType.SUPPORT_STATUS_CHANGE_REQUEST: SupportStatusChangeRequestPayload,
    NotifierType.SUPPORT_SUMMARY_UPDATE: SupportSummaryUpdatePayload,
    NotifierType.INNOVATION_SUBMITTED: InnovationSubmittedPayload,
    NotifierType.NEEDS_ASSESSMENT_STARTED: NeedsAssessmentStartedPayload,
    NotifierType.NEEDS_ASSESSMENT_COMPLETED: NeedsAssessmentCompletedPayload,
    NotifierType.NEEDS_ASSESSMENT_ASSESSOR_UPDATE: NeedsAssessmentAssessorUpdatePayload,
    NotifierType.ORGANISATION_UNITS_SUGGESTION: OrganisationUnitsSuggestionPayload,
    NotifierType.INNOVATION_DELAYED_SHARED_SUGGESTION: InnovationDelayedSharedSuggestionPayload,
    NotifierType.EXPORT_REQUEST_SUBMITTED: ExportRequestPayload,
    NotifierType.EXPORT_REQUEST_FEEDBACK: ExportRequestPayload,
    NotifierType.COLLABORATOR_INVITE: CollaboratorInvitePayload,
    NotifierType.COLLABORATOR_UPDATE: CollaboratorUpdatePayload,
    NotifierType.INNOVATION_STOP_SHARING: InnovationStopSharingPayload,
    NotifierType.INNOVATION_ARCHIVE: InnovationArchivePayload,
    NotifierType.INNOVATION_TRANSFER_OWNERSHIP_CREATION: TransferPayload,
    NotifierType.INNOVATION_TRANSFER_OWNERSHIP_COMPLETED: TransferPayload,
    NotifierType.INCOMPLETE_INNOVATION_RECORD: EmptyPayload,
    NotifierType.IDLE_SUPPORT_ACCESSOR: EmptyPayload,
    NotifierType.IDLE_SUPPORT_INNOVATOR: EmptyPayload,
    NotifierType.UNIT_KPI: EmptyPayload,
    NotifierType.INNOVATION_TRANSFER_OWNERSHIP_REMINDER: TransferReminderPayload,
    NotifierType.INNOVATION_TRANSFER_OWNERSHIP_EXPIRATION: TransferExpirationPayload,
}


class NotificationEvent(_Schema):
    """One event as emitted by the platform API, payload still unvalidated."""

    kind: NotifierType
    payload: dict[str, Any] = Field(default_factory=dict)
    context: DomainContext
