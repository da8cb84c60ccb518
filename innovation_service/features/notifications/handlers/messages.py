"""Handlers for message threads."""

from __future__ import annotations

from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.handlers.base import BaseHandler, PayloadT, group_by_role
from innovation_service.features.notifications.helpers import display_tag
from innovation_service.features.notifications.schemas import (
    ThreadAddFollowersPayload,
    ThreadCreationPayload,
    ThreadMessageCreationPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext, InnovationInfo, Recipient

MESSAGE = NotificationCategory.MESSAGE


class ThreadCreationHandler(BaseHandler[ThreadCreationPayload]):
    """A new thread on an innovation.

    Threads opened by accessors or the assessment team go to the innovators.
    Threads opened by an innovator go to the assigned users and to the
    other innovators, each with their own template.
    """

    kind = NotifierType.THREAD_CREATION

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        thread = await self.recipients.thread_info(self.payload.thread_id)
        innovators = await self.resolve_innovators(innovation.id)
        in_app_params = {"subject": thread.subject, "messageId": self.payload.message_id}

        if self.context.role == ServiceRole.INNOVATOR:
            assigned = await self.recipients.resolve_assigned_recipients(innovation.id)
            notification_id = self.new_notification_id()
            for role, group in group_by_role(assigned).items():
                self.add_emails(
                    group,
                    T.THREAD_CREATION_TO_ASSIGNED_USERS,
                    {
                        "innovation_name": innovation.name,
                        "thread_url": self.links.thread_url(role, innovation.id, thread.id, notification_id),
                    },
                    preference_category=MESSAGE,
                )
            self._add_thread_in_app(innovation, assigned, in_app_params, notification_id)

            notification_id = self.new_notification_id()
            self.add_emails(
                innovators,
                T.THREAD_CREATION_TO_INNOVATOR_FROM_INNOVATOR,
                {
                    "subject": thread.subject,
                    "innovation_name": innovation.name,
                    "thread_url": self.links.thread_url(
                        ServiceRole.INNOVATOR, innovation.id, thread.id, notification_id
                    ),
                },
                preference_category=MESSAGE,
            )
            self._add_thread_in_app(innovation, innovators, in_app_params, notification_id)
            return

        if self.context.role.is_accessor_type or self.context.role == ServiceRole.ASSESSMENT:
            notification_id = self.new_notification_id()
            self.add_emails(
                innovators,
                T.THREAD_CREATION_TO_INNOVATOR_FROM_ASSIGNED_USER,
                {
                    "accessor_name": await self.get_request_user_name(),
                    "unit_name": self.get_request_unit_name(),
                    "thread_url": self.links.thread_url(
                        ServiceRole.INNOVATOR, innovation.id, thread.id, notification_id
                    ),
                },
                preference_category=MESSAGE,
            )
            self._add_thread_in_app(innovation, innovators, in_app_params, notification_id)

    def _add_thread_in_app(
        self,
        innovation: InnovationInfo,
        recipients: list[Recipient],
        params: dict[str, str],
        notification_id: str,
    ) -> None:
        self.add_in_app(
            InAppContext(type=MESSAGE, detail=T.THREAD_CREATION, id=self.payload.thread_id),
            [r for r in recipients if r.is_active],
            params,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class _ThreadSenderHandler(BaseHandler[PayloadT]):
    """Shared sender formatting for thread notifications."""

    async def sender(self, innovation: InnovationInfo) -> str:
        if self.context.role == ServiceRole.INNOVATOR:
            tag = display_tag(self.context.role, is_owner=self.context.id == innovation.owner_id)
        else:
            tag = display_tag(self.context.role, unit_name=self.context.unit_name)
        return f"{await self.get_request_user_name()} ({tag})"

    def add_thread_emails(
        self,
        recipients: list[Recipient],
        template: T,
        innovation: InnovationInfo,
        sender: str,
        notification_id: str,
    ) -> None:
        for role, group in group_by_role(recipients).items():
            self.add_emails(
                group,
                template,
                {
                    "sender": sender,
                    "innovation_name": innovation.name,
                    "thread_url": self.links.thread_url(role, innovation.id, self.payload.thread_id, notification_id),
                },
                preference_category=MESSAGE,
            )


class ThreadAddFollowersHandler(_ThreadSenderHandler[ThreadAddFollowersPayload]):
    kind = NotifierType.THREAD_ADD_FOLLOWERS

    async def handle(self) -> None:
        if not self.payload.new_followers_role_ids:
            return
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        followers = await self.recipients.resolve_by_role_ids(self.payload.new_followers_role_ids)
        notification_id = self.new_notification_id()

        self.add_thread_emails(
            followers, T.ME02_THREAD_ADD_FOLLOWERS, innovation, await self.sender(innovation), notification_id
        )
        self.add_in_app(
            InAppContext(type=MESSAGE, detail=T.ME02_THREAD_ADD_FOLLOWERS, id=self.payload.thread_id),
            followers,
            {
                "senderDisplayInformation": await self.get_request_user_name(),
                "innovationName": innovation.name,
                "threadId": self.payload.thread_id,
            },
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class ThreadMessageCreationHandler(_ThreadSenderHandler[ThreadMessageCreationPayload]):
    kind = NotifierType.THREAD_MESSAGE_CREATION

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        followers = await self.recipients.resolve_thread_followers(self.payload.thread_id)
        sender = await self.sender(innovation)
        notification_id = self.new_notification_id()

        self.add_thread_emails(followers, T.ME03_THREAD_MESSAGE_CREATION, innovation, sender, notification_id)
        self.add_in_app(
            InAppContext(type=MESSAGE, detail=T.ME03_THREAD_MESSAGE_CREATION, id=self.payload.message_id),
            followers,
            {
                "senderDisplayInformation": sender,
                "innovationName": innovation.name,
                "threadId": self.payload.thread_id,
                "messageId": self.payload.message_id,
            },
            innovation_id=innovation.id,
            notification_id=notification_id,
        )
