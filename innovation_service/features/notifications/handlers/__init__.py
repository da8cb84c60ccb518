"""One handler per notification event kind."""

from __future__ import annotations

from innovation_service.features.notifications.handlers.account import AccountCreationHandler, AccountDeletionHandler
from innovation_service.features.notifications.handlers.admin import (
    LockUserHandler,
    NewAccountHandler,
    NewAnnouncementHandler,
    UnitInactivatedHandler,
    UserEmailAddressUpdatedHandler,
)
from innovation_service.features.notifications.handlers.automatic import (
    IdleSupportAccessorHandler,
    IdleSupportInnovatorHandler,
    IncompleteInnovationRecordHandler,
    UnitKPIHandler,
)
from innovation_service.features.notifications.handlers.base import BaseHandler, HandlerState
from innovation_service.features.notifications.handlers.documents import DocumentUploadedHandler
from innovation_service.features.notifications.handlers.export_requests import (
    ExportRequestFeedbackHandler,
    ExportRequestSubmittedHandler,
)
from innovation_service.features.notifications.handlers.innovations import (
    CollaboratorInviteHandler,
    CollaboratorUpdateHandler,
    InnovationArchiveHandler,
    InnovationStopSharingHandler,
    TransferCompletedHandler,
    TransferCreationHandler,
    TransferExpirationHandler,
    TransferReminderHandler,
)
from innovation_service.features.notifications.handlers.messages import (
    ThreadAddFollowersHandler,
    ThreadCreationHandler,
    ThreadMessageCreationHandler,
)
from innovation_service.features.notifications.handlers.needs_assessment import (
    InnovationSubmittedHandler,
    NeedsAssessmentAssessorUpdateHandler,
    NeedsAssessmentCompletedHandler,
    NeedsAssessmentStartedHandler,
)
from innovation_service.features.notifications.handlers.suggestions import (
    InnovationDelayedSharedSuggestionHandler,
    OrganisationUnitsSuggestionHandler,
)
from innovation_service.features.notifications.handlers.supports import (
    SupportNewAssignAccessorsHandler,
    SupportStatusChangeRequestHandler,
    SupportStatusUpdateHandler,
    SupportSummaryUpdateHandler,
)
from innovation_service.features.notifications.handlers.tasks import TaskCreationHandler, TaskUpdateHandler

__all__ = [
    "AccountCreationHandler",
    "AccountDeletionHandler",
    "BaseHandler",
    "CollaboratorInviteHandler",
    "CollaboratorUpdateHandler",
    "DocumentUploadedHandler",
    "ExportRequestFeedbackHandler",
    "ExportRequestSubmittedHandler",
    "HandlerState",
    "IdleSupportAccessorHandler",
    "IdleSupportInnovatorHandler",
    "IncompleteInnovationRecordHandler",
    "InnovationArchiveHandler",
    "InnovationDelayedSharedSuggestionHandler",
    "InnovationStopSharingHandler",
    "InnovationSubmittedHandler",
    "LockUserHandler",
    "NeedsAssessmentAssessorUpdateHandler",
    "NeedsAssessmentCompletedHandler",
    "NeedsAssessmentStartedHandler",
    "NewAccountHandler",
    "NewAnnouncementHandler",
    "OrganisationUnitsSuggestionHandler",
    "SupportNewAssignAccessorsHandler",
    "SupportStatusChangeRequestHandler",
    "SupportStatusUpdateHandler",
    "SupportSummaryUpdateHandler",
    "TaskCreationHandler",
    "TaskUpdateHandler",
    "ThreadAddFollowersHandler",
    "ThreadCreationHandler",
    "ThreadMessageCreationHandler",
    "TransferCompletedHandler",
    "TransferCreationHandler",
    "TransferExpirationHandler",
    "TransferReminderHandler",
    "UnitInactivatedHandler",
    "UnitKPIHandler",
    "UserEmailAddressUpdatedHandler",
]
