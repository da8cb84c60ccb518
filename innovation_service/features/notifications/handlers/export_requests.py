"""Handlers for innovation record export requests."""

from __future__ import annotations

from innovation_service.features.notifications.enums import (
    InnovationExportRequestStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import display_tag
from innovation_service.features.notifications.schemas import ExportRequestPayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext

EXPORT_REQUEST = NotificationCategory.EXPORT_REQUEST


class ExportRequestSubmittedHandler(BaseHandler[ExportRequestPayload]):
    """An accessor asked the innovators for permission to export the innovation record."""

    kind = NotifierType.EXPORT_REQUEST_SUBMITTED

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        request = await self.recipients.export_request_info(self.payload.request_id)
        innovators = await self.resolve_innovators(innovation.id)
        unit_name = display_tag(self.context.role, unit_name=self.context.unit_name)
        notification_id = self.new_notification_id()

        self.notify(
            innovators,
            T.RE01_EXPORT_REQUEST_SUBMITTED,
            email_params={
                "innovation_name": innovation.name,
                "unit_name": unit_name,
                "comment": request.request_reason,
                "request_url": self.links.export_request_url(
                    ServiceRole.INNOVATOR, innovation.id, request.id, notification_id
                ),
            },
            in_app_context=InAppContext(type=EXPORT_REQUEST, detail=T.RE01_EXPORT_REQUEST_SUBMITTED, id=request.id),
            in_app_params={
                "unitName": unit_name,
                "innovationName": innovation.name,
                "exportRequestId": request.id,
            },
            preference_category=EXPORT_REQUEST,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class ExportRequestFeedbackHandler(BaseHandler[ExportRequestPayload]):
    """The innovator approved or rejected an export request; the requester is told."""

    kind = NotifierType.EXPORT_REQUEST_FEEDBACK

    async def handle(self) -> None:
        request = await self.recipients.export_request_info(self.payload.request_id)
        requester = await self.recipients.resolve_by_role(
            request.created_by,
            [ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR, ServiceRole.ASSESSMENT],
            organisation_unit=request.unit_id,
        )
        if requester is None:
            self.skip("Export request author no longer has a matching role", request_id=request.id)
            return

        if request.status == InnovationExportRequestStatus.APPROVED:
            template = T.RE02_EXPORT_REQUEST_APPROVED
        elif request.status == InnovationExportRequestStatus.REJECTED:
            template = T.RE03_EXPORT_REQUEST_REJECTED
        else:
            self.skip("No feedback notification for export request status", request_status=request.status)
            return

        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        notification_id = self.new_notification_id()
        email_params = {
            "innovation_name": innovation.name,
            "innovator_name": await self.get_request_user_name(),
            "request_url": self.links.export_request_url(requester.role, innovation.id, request.id, notification_id),
        }
        if template == T.RE03_EXPORT_REQUEST_REJECTED:
            email_params["reject_comment"] = request.reject_reason or ""

        self.notify(
            [requester],
            template,
            email_params=email_params,
            in_app_context=InAppContext(type=EXPORT_REQUEST, detail=template, id=request.id),
            in_app_params={"innovationName": innovation.name, "exportRequestId": request.id},
            preference_category=EXPORT_REQUEST,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )
