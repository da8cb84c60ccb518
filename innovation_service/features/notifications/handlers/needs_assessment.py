"""Handlers for the needs assessment flow."""

from __future__ import annotations

from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.schemas import (
    InnovationSubmittedPayload,
    NeedsAssessmentAssessorUpdatePayload,
    NeedsAssessmentCompletedPayload,
    NeedsAssessmentStartedPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext, InnovationInfo

NEEDS_ASSESSMENT = NotificationCategory.NEEDS_ASSESSMENT


class InnovationSubmittedHandler(BaseHandler[InnovationSubmittedPayload]):
    """An innovation was submitted (or resubmitted) for needs assessment."""

    kind = NotifierType.INNOVATION_SUBMITTED

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        assessment_type = "reassessment" if self.payload.reassessment else "assessment"
        in_app_params = {"innovationName": innovation.name, "assessmentType": assessment_type}

        innovators = await self.resolve_innovators(innovation.id)
        self.notify(
            innovators,
            T.NA01_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_INNOVATOR,
            email_params={"innovation_name": innovation.name, "assessment_type": assessment_type},
            in_app_context=InAppContext(
                type=NEEDS_ASSESSMENT,
                detail=T.NA01_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_INNOVATOR,
                id=innovation.id,
            ),
            in_app_params=in_app_params,
            preference_category=NotificationCategory.INNOVATOR_SUBMIT_IR,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
            include_self=True,
        )

        assessment_users = await self.recipients.needs_assessment_users()
        notification_id = self.new_notification_id()
        self.notify(
            assessment_users,
            T.NA02_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_ASSESSMENT,
            email_params={
                "innovation_name": innovation.name,
                "assessment_type": assessment_type,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ASSESSMENT, innovation.id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=NEEDS_ASSESSMENT,
                detail=T.NA02_INNOVATOR_SUBMITS_FOR_NEEDS_ASSESSMENT_TO_ASSESSMENT,
                id=innovation.id,
            ),
            in_app_params=in_app_params,
            preference_category=NotificationCategory.INNOVATOR_SUBMIT_IR,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class NeedsAssessmentStartedHandler(BaseHandler[NeedsAssessmentStartedPayload]):
    kind = NotifierType.NEEDS_ASSESSMENT_STARTED

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        innovators = await self.resolve_innovators(innovation.id)
        notification_id = self.new_notification_id()

        self.notify(
            innovators,
            T.NA03_NEEDS_ASSESSMENT_STARTED_TO_INNOVATOR,
            email_params={
                "innovation_name": innovation.name,
                "message": self.payload.message,
                "message_url": self.links.thread_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.thread_id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=NEEDS_ASSESSMENT,
                detail=T.NA03_NEEDS_ASSESSMENT_STARTED_TO_INNOVATOR,
                id=self.payload.assessment_id,
            ),
            in_app_params={
                "innovationName": innovation.name,
                "messageId": self.payload.message_id,
                "threadId": self.payload.thread_id,
            },
            preference_category=NEEDS_ASSESSMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class NeedsAssessmentCompletedHandler(BaseHandler[NeedsAssessmentCompletedPayload]):
    kind = NotifierType.NEEDS_ASSESSMENT_COMPLETED

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        innovators = await self.resolve_innovators(innovation.id)
        notification_id = self.new_notification_id()

        self.notify(
            innovators,
            T.NA04_NEEDS_ASSESSMENT_COMPLETE_TO_INNOVATOR,
            email_params={
                "innovation_name": innovation.name,
                "needs_assessment_url": self.links.assessment_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.assessment_id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=NEEDS_ASSESSMENT,
                detail=T.NA04_NEEDS_ASSESSMENT_COMPLETE_TO_INNOVATOR,
                id=self.payload.assessment_id,
            ),
            in_app_params={"innovationName": innovation.name, "assessmentId": self.payload.assessment_id},
            preference_category=NEEDS_ASSESSMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class NeedsAssessmentAssessorUpdateHandler(BaseHandler[NeedsAssessmentAssessorUpdatePayload]):
    """The assessor of an assessment changed; the previous and new assessors are told."""

    kind = NotifierType.NEEDS_ASSESSMENT_ASSESSOR_UPDATE

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)

        if self.payload.previous_assessor is not None:
            await self._to_assessor(innovation, self.payload.previous_assessor.id, T.NA06_NEEDS_ASSESSOR_REMOVED)
        await self._to_assessor(innovation, self.payload.new_assessor.id, T.NA07_NEEDS_ASSESSOR_ASSIGNED)

    async def _to_assessor(self, innovation: InnovationInfo, user_id: str, template: T) -> None:
        assessor = await self.recipients.resolve_by_role(user_id, ServiceRole.ASSESSMENT)
        if assessor is None:
            self.skip("Assessor has no assessment role", user_id=user_id, template=str(template))
            return
        notification_id = self.new_notification_id()
        self.notify(
            [assessor],
            template,
            email_params={
                "innovation_name": innovation.name,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ASSESSMENT, innovation.id, notification_id
                ),
            },
            in_app_context=InAppContext(type=NEEDS_ASSESSMENT, detail=template, id=self.payload.assessment_id),
            in_app_params={"innovationName": innovation.name},
            preference_category=NotificationCategory.ASSIGN_NA,
            innovation_id=innovation.id,
            notification_id=notification_id,
            include_self=True,
        )
