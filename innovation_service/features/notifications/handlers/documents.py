"""Handlers for innovation documents."""

from __future__ import annotations

from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.schemas import DocumentUploadedPayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext


class DocumentUploadedHandler(BaseHandler[DocumentUploadedPayload]):
    """Innovators are told when an accessor or the assessment team uploads a document."""

    kind = NotifierType.INNOVATION_DOCUMENT_UPLOADED

    async def handle(self) -> None:
        if not (self.context.role.is_accessor_type or self.context.role == ServiceRole.ASSESSMENT):
            return

        innovation_id = self.payload.innovation_id
        document = self.payload.document
        innovators = await self.resolve_innovators(innovation_id)
        unit_name = self.get_request_unit_name()
        notification_id = self.new_notification_id()

        self.notify(
            innovators,
            T.DC01_UPLOADED_DOCUMENT_TO_INNOVATOR,
            email_params={
                "accessor_name": await self.get_request_user_name(),
                "unit_name": unit_name,
                "document_url": self.links.document_url(
                    ServiceRole.INNOVATOR, innovation_id, document.id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=NotificationCategory.DOCUMENT,
                detail=T.DC01_UPLOADED_DOCUMENT_TO_INNOVATOR,
                id=document.id,
            ),
            in_app_params={"unitName": unit_name, "fileId": document.id},
            preference_category=NotificationCategory.DOCUMENT,
            innovation_id=innovation_id,
            notification_id=notification_id,
        )
