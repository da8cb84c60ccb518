"""Notification template catalogue.

Every email template has one params model; ``add_emails`` validates the
params a handler passes against it, so a misspelt or missing key fails the
run instead of reaching the email transport. In-app notifications reuse the
template identifier as their ``context.detail``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class NotificationTemplate(StrEnum):
    # Account
    CA01_ACCOUNT_CREATION_OF_INNOVATOR = "CA01_ACCOUNT_CREATION_OF_INNOVATOR"
    CA02_ACCOUNT_CREATION_OF_COLLABORATOR = "CA02_ACCOUNT_CREATION_OF_COLLABORATOR"
    DA01_OWNER_DELETED_ACCOUNT_WITH_PENDING_TRANSFER_TO_COLLABORATOR = (
        "DA01_OWNER_DELETED_ACCOUNT_WITH_PENDING_TRANSFER_TO_COLLABORATOR"
    )

    # Admin
    AP02_INNOVATOR_LOCKED_TO_ASSIGNED_USERS = "AP02_INNOVATOR_LOCKED_TO_ASSIGNED_USERS"
    AP03_USER_LOCKED_TO_LOCKED_USER = "AP03_USER_LOCKED_TO_LOCKED_USER"
    AP07_UNIT_INACTIVATED_TO_ENGAGING_INNOVATIONS = "AP07_UNIT_INACTIVATED_TO_ENGAGING_INNOVATIONS"
    AP08_USER_EMAIL_ADDRESS_UPDATED = "AP08_USER_EMAIL_ADDRESS_UPDATED"
    AP09_NEW_SUPPORTING_ACCOUNT = "AP09_NEW_SUPPORTING_ACCOUNT"
    AP10_NEW_ANNOUNCEMENT = "AP10_NEW_ANNOUNCEMENT"

    # Documents
    DC01_UPLOADED_DOCUMENT_TO_INNOVATOR = "DC01_UPLOADED_DOCUMENT_TO_INNOVATOR"

    # Tasks
    TA01_TASK_CREATION_TO_INNOVATOR = "TA01_TASK_CREATION_TO_INNOVATOR"
    TA02_TASK_RESPONDED_TO_OTHER_INNOVATORS = "TA02_TASK_RESPONDED_TO_OTHER_INNOVATORS"
    TA03_TASK_DONE_TO_ACCESSOR_OR_ASSESSMENT = "TA03_TASK_DONE_TO_ACCESSOR_OR_ASSESSMENT"
    TA04_TASK_DECLINED_TO_ACCESSOR_OR_ASSESSMENT = "TA04_TASK_DECLINED_TO_ACCESSOR_OR_ASSESSMENT"
    TA05_TASK_CANCELLED_TO_INNOVATOR = "TA05_TASK_CANCELLED_TO_INNOVATOR"
    TA06_TASK_REOPEN_TO_INNOVATOR = "TA06_TASK_REOPEN_TO_INNOVATOR"

    # Messages
    THREAD_CREATION = "THREAD_CREATION"
    THREAD_CREATION_TO_INNOVATOR_FROM_ASSIGNED_USER = "THREAD_CREATION_TO_INNOVATOR_FROM_ASSIGNED_USER"
    THREAD_CREATION_TO_INNOVATOR_FROM_INNOVATOR = "THREAD_CREATION_TO_INNOVATOR_FROM_INNOVATOR"
    THREAD_CREATION_TO_ASSIGNED_USERS = "THREAD_CREATION_TO_ASSIGNED_USERS"
    ME02_THREAD_ADD_FOLLOWERS = "ME02_THREAD_ADD_FOLLOWERS"
    ME03_THREAD_MESSAGE_CREATION = "ME03_THREAD_MESSAGE_CREATION"

    # Supports
    ST01_SUPPORT_STATUS_TO_ENGAGING = "ST01_SUPPORT_STATUS_TO_ENGAGING"
    ST02_SUPPORT_STATUS_TO_OTHER = "ST02_SUPPORT_STATUS_TO_OTHER"
    ST03_SUPPORT_STATUS_TO_WAITING = "ST03_SUPPORT_STATUS_TO_WAITING"
    ST04_SUPPORT_NEW_ASSIGNED_ACCESSORS_TO_INNOVATOR = "ST04_SUPPORT_NEW_ASSIGNED_ACCESSORS_TO_INNOVATOR"
    ST05_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_NEW_QA = "ST05_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_NEW_QA"
    ST06_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_OLD_QA = "ST06_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_OLD_QA"
    ST07_SUPPORT_STATUS_CHANGE_REQUEST = "ST07_SUPPORT_STATUS_CHANGE_REQUEST"
    ST08_SUPPORT_NEW_ASSIGNED_WAITING_INNOVATION_TO_QA = "ST08_SUPPORT_NEW_ASSIGNED_WAITING_INNOVATION_TO_QA"
    ST09_SUPPORT_STATUS_TO_CLOSED = "ST09_SUPPORT_STATUS_TO_CLOSED"
    SS01_SUPPORT_SUMMARY_UPDATE_TO_INNOVATORS = "SS01_SUPPORT_SUMMARY_UPDATE_TO_INNOVATORS"
    SS02_SUPPORT_SUMMARY_UPDATE_TO_OTHER_ENGAGING_ACCESSORS = (
        "SS02_SUPPORT_SUMMARY_UPDATE_TO_OTHER_ENGAGING_ACCESSORS"
    )

    # Needs assessment
    NA01_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_INNOVATOR = (
        "NA01_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_INNOVATOR"
    )
    NA02_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_ASSESSMENT = (
        "NA02_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_ASSESSMENT"
    )
    NA03_NEEDS_ASSESSMENT_STARTED_TO_INNOVATOR = "NA03_NEEDS_ASSESSMENT_STARTED_TO_INNOVATOR"
    NA04_NEEDS_ASSESSMENT_COMPLETE_TO_INNOVATOR = "NA04_NEEDS_ASSESSMENT_COMPLETE_TO_INNOVATOR"
    NA06_NEEDS_ASSESSOR_REMOVED = "NA06_NEEDS_ASSESSOR_REMOVED"
    NA07_NEEDS_ASSESSOR_ASSIGNED = "NA07_NEEDS_ASSESSOR_ASSIGNED"

    # Suggestions
    OS01_UNITS_SUGGESTION_TO_SUGGESTED_UNITS_QA = "OS01_UNITS_SUGGESTION_TO_SUGGESTED_UNITS_QA"
    OS02_UNITS_SUGGESTION_NOT_SHARED_TO_INNOVATOR = "OS02_UNITS_SUGGESTION_NOT_SHARED_TO_INNOVATOR"
    OS03_INNOVATION_DELAYED_SHARED_SUGGESTION = "OS03_INNOVATION_DELAYED_SHARED_SUGGESTION"

    # Export requests
    RE01_EXPORT_REQUEST_SUBMITTED = "RE01_EXPORT_REQUEST_SUBMITTED"
    RE02_EXPORT_REQUEST_APPROVED = "RE02_EXPORT_REQUEST_APPROVED"
    RE03_EXPORT_REQUEST_REJECTED = "RE03_EXPORT_REQUEST_REJECTED"

    # Innovation management
    MC01_COLLABORATOR_INVITE_EXISTING_USER = "MC01_COLLABORATOR_INVITE_EXISTING_USER"
    MC02_COLLABORATOR_INVITE_NEW_USER = "MC02_COLLABORATOR_INVITE_NEW_USER"
    MC03_COLLABORATOR_UPDATE_CANCEL_INVITE = "MC03_COLLABORATOR_UPDATE_CANCEL_INVITE"
    MC04_COLLABORATOR_UPDATE_ACCEPTS_INVITE = "MC04_COLLABORATOR_UPDATE_ACCEPTS_INVITE"
    MC05_COLLABORATOR_UPDATE_DECLINES_INVITE = "MC05_COLLABORATOR_UPDATE_DECLINES_INVITE"
    MC06_COLLABORATOR_UPDATE_REMOVED_COLLABORATOR = "MC06_COLLABORATOR_UPDATE_REMOVED_COLLABORATOR"
    MC07_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_INNOVATORS = (
        "MC07_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_INNOVATORS"
    )
    MC08_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_SELF = "MC08_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_SELF"
    SH04_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_OWNER = (
        "SH04_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_OWNER"
    )
    SH05_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_QA_A = (
        "SH05_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_QA_A"
    )
    AI01_INNOVATION_ARCHIVED_TO_SELF = "AI01_INNOVATION_ARCHIVED_TO_SELF"
    AI02_INNOVATION_ARCHIVED_TO_COLLABORATORS = "AI02_INNOVATION_ARCHIVED_TO_COLLABORATORS"
    AI03_INNOVATION_ARCHIVED_TO_ENGAGING_QA_A = "AI03_INNOVATION_ARCHIVED_TO_ENGAGING_QA_A"
    TO01_TRANSFER_OWNERSHIP_NEW_USER = "TO01_TRANSFER_OWNERSHIP_NEW_USER"
    TO02_TRANSFER_OWNERSHIP_EXISTING_USER = "TO02_TRANSFER_OWNERSHIP_EXISTING_USER"
    TO06_TRANSFER_OWNERSHIP_ACCEPTS_PREVIOUS_OWNER = "TO06_TRANSFER_OWNERSHIP_ACCEPTS_PREVIOUS_OWNER"
    TO07_TRANSFER_OWNERSHIP_ACCEPTS_ASSIGNED_ACCESSORS = "TO07_TRANSFER_OWNERSHIP_ACCEPTS_ASSIGNED_ACCESSORS"
    TO08_TRANSFER_OWNERSHIP_DECLINES_PREVIOUS_OWNER = "TO08_TRANSFER_OWNERSHIP_DECLINES_PREVIOUS_OWNER"
    TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER = "TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER"

    # Automatic
    AU01_INNOVATOR_INCOMPLETE_RECORD = "AU01_INNOVATOR_INCOMPLETE_RECORD"
    AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT = "AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT"
    AU03_INNOVATOR_IDLE_SUPPORT = "AU03_INNOVATOR_IDLE_SUPPORT"
    AU04_SUPPORT_KPI_REMINDER = "AU04_SUPPORT_KPI_REMINDER"
    AU05_SUPPORT_KPI_OVERDUE = "AU05_SUPPORT_KPI_OVERDUE"
    AU06_ACCESSOR_IDLE_WAITING = "AU06_ACCESSOR_IDLE_WAITING"
    AU07_TRANSFER_ONE_WEEK_REMINDER_NEW_USER = "AU07_TRANSFER_ONE_WEEK_REMINDER_NEW_USER"
    AU08_TRANSFER_ONE_WEEK_REMINDER_EXISTING_USER = "AU08_TRANSFER_ONE_WEEK_REMINDER_EXISTING_USER"
    AU09_TRANSFER_EXPIRED = "AU09_TRANSFER_EXPIRED"


class EmailParams(BaseModel):
    """Base for email params: flat string values, no unknown keys."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class NoParams(EmailParams):
    pass


class InnovationNameParams(EmailParams):
    innovation_name: str


class InnovatorActionParams(EmailParams):
    innovation_name: str
    innovator_name: str


class ManageCollaboratorsParams(InnovatorActionParams):
    manage_collaborators_url: str


class DashboardParams(EmailParams):
    dashboard_url: str


class CollaboratorAccountParams(EmailParams):
    multiple_innovations: str
    innovations_name: str
    dashboard_url: str


class PendingTransferParams(EmailParams):
    innovation_name: str
    expiry_date: str
    innovation_overview_url: str


class UnitInactivatedParams(EmailParams):
    innovation_name: str
    unit_name: str


class SignInParams(EmailParams):
    sign_in_url: str


class AnnouncementParams(EmailParams):
    announcement_title: str
    announcement_body: str
    announcement_url: str


class DocumentUploadedParams(EmailParams):
    accessor_name: str
    unit_name: str
    document_url: str


class TaskCreationParams(EmailParams):
    innovation_name: str
    unit_name: str
    task_url: str


class TaskRespondedParams(EmailParams):
    innovation_name: str
    innovator_name: str
    task_status: str
    message_url: str


class TaskDoneParams(EmailParams):
    innovation_name: str
    innovator_name: str
    message: str
    message_url: str
    task_url: str


class TaskDeclinedParams(EmailParams):
    innovation_name: str
    innovator_name: str
    message: str
    message_url: str


class TaskByAccessorParams(EmailParams):
    accessor_name: str
    unit_name: str
    innovation_name: str
    message: str
    message_url: str


class ThreadFromAssignedUserParams(EmailParams):
    accessor_name: str
    unit_name: str
    thread_url: str


class ThreadFromInnovatorParams(EmailParams):
    subject: str
    innovation_name: str
    thread_url: str


class ThreadToAssignedUsersParams(EmailParams):
    innovation_name: str
    thread_url: str


class ThreadSenderParams(EmailParams):
    sender: str
    innovation_name: str
    thread_url: str


class SupportEngagingParams(EmailParams):
    accessors_name: str
    innovation_name: str
    message: str
    unit_name: str
    message_url: str


class SupportOtherParams(EmailParams):
    innovation_name: str
    message: str
    unit_name: str
    status: str
    support_summary_url: str


class SupportWaitingParams(EmailParams):
    innovation_name: str
    unit_name: str
    message: str
    support_summary_url: str


class SupportNewAccessorsParams(SupportEngagingParams):
    pass


class SupportNewQAParams(EmailParams):
    innovation_name: str
    qa_name: str
    innovation_overview_url: str


class SupportWaitingQAParams(EmailParams):
    innovation_name: str
    qa_name: str


class SupportChangeRequestParams(EmailParams):
    accessor_name: str
    innovation_name: str
    proposed_status: str
    request_comment: str
    innovation_overview_url: str


class SupportClosedParams(EmailParams):
    innovation_name: str
    message: str
    unit_name: str
    support_summary_url: str


class SupportSummaryParams(EmailParams):
    innovation_name: str
    unit_name: str
    support_summary_update_url: str


class SubmittedToInnovatorParams(EmailParams):
    innovation_name: str
    assessment_type: str


class SubmittedToAssessmentParams(EmailParams):
    innovation_name: str
    assessment_type: str
    innovation_overview_url: str


class AssessmentStartedParams(EmailParams):
    innovation_name: str
    message: str
    message_url: str


class AssessmentCompletedParams(EmailParams):
    innovation_name: str
    needs_assessment_url: str


class AssessorParams(EmailParams):
    innovation_name: str
    innovation_overview_url: str


class UnitsSuggestionParams(EmailParams):
    innovation_name: str
    comment: str
    organisation_unit: str
    innovation_overview_url: str
    showKPI: str


class NotSharedParams(EmailParams):
    innovation_name: str
    data_sharing_preferences_url: str


class InnovationOverviewParams(EmailParams):
    innovation_name: str
    innovation_overview_url: str


class ExportRequestSubmittedParams(EmailParams):
    innovation_name: str
    unit_name: str
    comment: str
    request_url: str


class ExportRequestApprovedParams(EmailParams):
    innovation_name: str
    innovator_name: str
    request_url: str


class ExportRequestRejectedParams(ExportRequestApprovedParams):
    reject_comment: str


class CollaboratorInviteExistingParams(EmailParams):
    innovation_name: str
    innovator_name: str
    invitation_url: str


class CollaboratorInviteNewParams(EmailParams):
    innovation_name: str
    innovator_name: str
    create_account_url: str


class StopSharingOwnerParams(EmailParams):
    innovation_name: str
    organisation_name: str
    data_sharing_preferences_url: str


class StopSharingAccessorParams(EmailParams):
    innovation_name: str
    organisation_name: str


class ArchivedParams(EmailParams):
    innovation_name: str
    archived_url: str


class ArchivedToAccessorParams(EmailParams):
    innovation_name: str
    archived_url: str
    comment: str


class TransferNewUserParams(EmailParams):
    innovator_name: str
    innovation_name: str
    create_account_url: str


class TransferExistingUserParams(EmailParams):
    innovator_name: str
    innovation_name: str
    dashboard_url: str


class TransferAcceptedParams(EmailParams):
    innovation_name: str
    new_innovation_owner: str


class TransferDeclinedParams(EmailParams):
    innovation_name: str
    innovator_name: str


class IncompleteRecordParams(EmailParams):
    innovation_name: str
    innovation_record_url: str


class IdleEngagingParams(EmailParams):
    innovation_name: str
    support_status_url: str
    support_summary_url: str
    thread_url: str


class IdleWaitingParams(EmailParams):
    innovation_name: str
    innovation_overview_url: str
    thread_url: str


class IdleInnovatorParams(EmailParams):
    innovation_name: str
    innovation_record_url: str
    innovation_overview_url: str
    expected_archive_date: str


class TransferReminderNewUserParams(EmailParams):
    innovation_name: str
    create_account_url: str


class TransferReminderExistingUserParams(EmailParams):
    innovation_name: str
    dashboard_url: str


class TransferExpiredParams(EmailParams):
    innovation_name: str
    manage_innovation_url: str


T = NotificationTemplate

EMAIL_TEMPLATE_PARAMS: dict[NotificationTemplate, type[EmailParams]] = {
    T.CA01_ACCOUNT_CREATION_OF_INNOVATOR: DashboardParams,
    T.CA02_ACCOUNT_CREATION_OF_COLLABORATOR: CollaboratorAccountParams,
    T.DA01_OWNER_DELETED_ACCOUNT_WITH_PENDING_TRANSFER_TO_COLLABORATOR: PendingTransferParams,
    T.AP03_USER_LOCKED_TO_LOCKED_USER: NoParams,
    T.AP07_UNIT_INACTIVATED_TO_ENGAGING_INNOVATIONS: UnitInactivatedParams,
    T.AP08_USER_EMAIL_ADDRESS_UPDATED: NoParams,
    T.AP09_NEW_SUPPORTING_ACCOUNT: SignInParams,
    T.AP10_NEW_ANNOUNCEMENT: AnnouncementParams,
    T.DC01_UPLOADED_DOCUMENT_TO_INNOVATOR: DocumentUploadedParams,
    T.TA01_TASK_CREATION_TO_INNOVATOR: TaskCreationParams,
    T.TA02_TASK_RESPONDED_TO_OTHER_INNOVATORS: TaskRespondedParams,
    T.TA03_TASK_DONE_TO_ACCESSOR_OR_ASSESSMENT: TaskDoneParams,
    T.TA04_TASK_DECLINED_TO_ACCESSOR_OR_ASSESSMENT: TaskDeclinedParams,
    T.TA05_TASK_CANCELLED_TO_INNOVATOR: TaskByAccessorParams,
    T.TA06_TASK_REOPEN_TO_INNOVATOR: TaskByAccessorParams,
    T.THREAD_CREATION_TO_INNOVATOR_FROM_ASSIGNED_USER: ThreadFromAssignedUserParams,
    T.THREAD_CREATION_TO_INNOVATOR_FROM_INNOVATOR: ThreadFromInnovatorParams,
    T.THREAD_CREATION_TO_ASSIGNED_USERS: ThreadToAssignedUsersParams,
    T.ME02_THREAD_ADD_FOLLOWERS: ThreadSenderParams,
    T.ME03_THREAD_MESSAGE_CREATION: ThreadSenderParams,
    T.ST01_SUPPORT_STATUS_TO_ENGAGING: SupportEngagingParams,
    T.ST02_SUPPORT_STATUS_TO_OTHER: SupportOtherParams,
    T.ST03_SUPPORT_STATUS_TO_WAITING: SupportWaitingParams,
    T.ST04_SUPPORT_NEW_ASSIGNED_ACCESSORS_TO_INNOVATOR: SupportNewAccessorsParams,
    T.ST05_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_NEW_QA: SupportNewQAParams,
    T.ST06_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_OLD_QA: InnovationNameParams,
    T.ST07_SUPPORT_STATUS_CHANGE_REQUEST: SupportChangeRequestParams,
    T.ST08_SUPPORT_NEW_ASSIGNED_WAITING_INNOVATION_TO_QA: SupportWaitingQAParams,
    T.ST09_SUPPORT_STATUS_TO_CLOSED: SupportClosedParams,
    T.SS01_SUPPORT_SUMMARY_UPDATE_TO_INNOVATORS: SupportSummaryParams,
    T.SS02_SUPPORT_SUMMARY_UPDATE_TO_OTHER_ENGAGING_ACCESSORS: SupportSummaryParams,
    T.NA01_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_INNOVATOR: SubmittedToInnovatorParams,
    T.NA02_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_ASSESSMENT: SubmittedToAssessmentParams,
    T.NA03_NEEDS_ASSESSMENT_STARTED_TO_INNOVATOR: AssessmentStartedParams,
    T.NA04_NEEDS_ASSESSMENT_COMPLETE_TO_INNOVATOR: AssessmentCompletedParams,
    T.NA06_NEEDS_ASSESSOR_REMOVED: AssessorParams,
    T.NA07_NEEDS_ASSESSOR_ASSIGNED: AssessorParams,
    T.OS01_UNITS_SUGGESTION_TO_SUGGESTED_UNITS_QA: UnitsSuggestionParams,
    T.OS02_UNITS_SUGGESTION_NOT_SHARED_TO_INNOVATOR: NotSharedParams,
    T.OS03_INNOVATION_DELAYED_SHARED_SUGGESTION: InnovationOverviewParams,
    T.RE01_EXPORT_REQUEST_SUBMITTED: ExportRequestSubmittedParams,
    T.RE02_EXPORT_REQUEST_APPROVED: ExportRequestApprovedParams,
    T.RE03_EXPORT_REQUEST_REJECTED: ExportRequestRejectedParams,
    T.MC01_COLLABORATOR_INVITE_EXISTING_USER: CollaboratorInviteExistingParams,
    T.MC02_COLLABORATOR_INVITE_NEW_USER: CollaboratorInviteNewParams,
    T.MC03_COLLABORATOR_UPDATE_CANCEL_INVITE: InnovatorActionParams,
    T.MC04_COLLABORATOR_UPDATE_ACCEPTS_INVITE: ManageCollaboratorsParams,
    T.MC05_COLLABORATOR_UPDATE_DECLINES_INVITE: ManageCollaboratorsParams,
    T.MC06_COLLABORATOR_UPDATE_REMOVED_COLLABORATOR: InnovatorActionParams,
    T.MC07_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_INNOVATORS: ManageCollaboratorsParams,
    T.MC08_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_SELF: InnovationNameParams,
    T.SH04_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_OWNER: StopSharingOwnerParams,
    T.SH05_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_QA_A: StopSharingAccessorParams,
    T.AI01_INNOVATION_ARCHIVED_TO_SELF: InnovationNameParams,
    T.AI02_INNOVATION_ARCHIVED_TO_COLLABORATORS: ArchivedParams,
    T.AI03_INNOVATION_ARCHIVED_TO_ENGAGING_QA_A: ArchivedToAccessorParams,
    T.TO01_TRANSFER_OWNERSHIP_NEW_USER: TransferNewUserParams,
    T.TO02_TRANSFER_OWNERSHIP_EXISTING_USER: TransferExistingUserParams,
    T.TO06_TRANSFER_OWNERSHIP_ACCEPTS_PREVIOUS_OWNER: TransferAcceptedParams,
    T.TO07_TRANSFER_OWNERSHIP_ACCEPTS_ASSIGNED_ACCESSORS: TransferAcceptedParams,
    T.TO08_TRANSFER_OWNERSHIP_DECLINES_PREVIOUS_OWNER: TransferDeclinedParams,
    T.TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER: TransferDeclinedParams,
    T.AU01_INNOVATOR_INCOMPLETE_RECORD: IncompleteRecordParams,
    T.AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT: IdleEngagingParams,
    T.AU03_INNOVATOR_IDLE_SUPPORT: IdleInnovatorParams,
    T.AU04_SUPPORT_KPI_REMINDER: InnovationOverviewParams,
    T.AU05_SUPPORT_KPI_OVERDUE: InnovationOverviewParams,
    T.AU06_ACCESSOR_IDLE_WAITING: IdleWaitingParams,
    T.AU07_TRANSFER_ONE_WEEK_REMINDER_NEW_USER: TransferReminderNewUserParams,
    T.AU08_TRANSFER_ONE_WEEK_REMINDER_EXISTING_USER: TransferReminderExistingUserParams,
    T.AU09_TRANSFER_EXPIRED: TransferExpiredParams,
}


def validate_email_params(template: NotificationTemplate, params: dict[str, str]) -> dict[str, str]:
    """Validate ``params`` against the template's schema and return them as a flat dict.

    Raises:
        KeyError: If the template is not sent by email.
        pydantic.ValidationError: On missing, unknown or non-string params.
    """
    schema = EMAIL_TEMPLATE_PARAMS[template]
    return schema.model_validate(params, strict=True).model_dump()
