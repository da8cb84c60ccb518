"""Handlers for account lifecycle events."""

from __future__ import annotations

from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import transform_into_bullet
from innovation_service.features.notifications.schemas import AccountDeletionPayload, EmptyPayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext


class AccountCreationHandler(BaseHandler[EmptyPayload]):
    """Welcome email for a new innovator account.

    Users who registered after a collaboration invite get the collaborator
    variant listing the innovations they were invited to.
    """

    kind = NotifierType.ACCOUNT_CREATION

    async def handle(self) -> None:
        recipient = await self.recipients.resolve_by_role(self.context.id, ServiceRole.INNOVATOR)
        if recipient is None:
            self.skip("New account has no innovator role", user_id=self.context.id)
            return

        notification_id = self.new_notification_id()
        dashboard_url = self.links.dashboard_url(ServiceRole.INNOVATOR, notification_id)
        collaborations = await self.recipients.user_collaborations(self.context.id)

        if collaborations:
            self.add_emails(
                recipient,
                T.CA02_ACCOUNT_CREATION_OF_COLLABORATOR,
                {
                    "multiple_innovations": "yes" if len(collaborations) > 1 else "no",
                    "innovations_name": transform_into_bullet(collaborations),
                    "dashboard_url": dashboard_url,
                },
                preference_category=NotificationCategory.ACCOUNT,
                include_self=True,
            )
        else:
            self.add_emails(
                recipient,
                T.CA01_ACCOUNT_CREATION_OF_INNOVATOR,
                {"dashboard_url": dashboard_url},
                preference_category=NotificationCategory.ACCOUNT,
                include_self=True,
            )


class AccountDeletionHandler(BaseHandler[AccountDeletionPayload]):
    """An owner deleted their account while transfers of their innovations were pending."""

    kind = NotifierType.ACCOUNT_DELETION

    async def handle(self) -> None:
        for innovation in self.payload.innovations:
            if innovation.transfer_expire_date is None:
                continue
            user_ids = await self.recipients.resolve_owner_and_collaborators(innovation.id)
            collaborators = await self.recipients.resolve_by_role(
                [user_id for user_id in user_ids if user_id != self.context.id],
                ServiceRole.INNOVATOR,
            )
            notification_id = self.new_notification_id()
            self.notify(
                collaborators,
                T.DA01_OWNER_DELETED_ACCOUNT_WITH_PENDING_TRANSFER_TO_COLLABORATOR,
                email_params={
                    "innovation_name": innovation.name,
                    "expiry_date": innovation.transfer_expire_date.isoformat(),
                    "innovation_overview_url": self.links.innovation_overview_url(
                        ServiceRole.INNOVATOR, innovation.id, notification_id
                    ),
                },
                in_app_context=InAppContext(
                    type=NotificationCategory.INNOVATION_MANAGEMENT,
                    detail=T.DA01_OWNER_DELETED_ACCOUNT_WITH_PENDING_TRANSFER_TO_COLLABORATOR,
                    id=self.context.id,
                ),
                in_app_params={"innovationName": innovation.name},
                preference_category=NotificationCategory.INNOVATION_MANAGEMENT,
                innovation_id=innovation.id,
                notification_id=notification_id,
            )
