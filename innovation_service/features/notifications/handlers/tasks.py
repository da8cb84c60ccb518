"""Handlers for tasks raised by accessors and the assessment team."""

from __future__ import annotations

from innovation_service.features.notifications.enums import (
    InnovationTaskStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import translate_task_status
from innovation_service.features.notifications.schemas import TaskCreationPayload, TaskUpdatePayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext, InnovationInfo, Recipient

TASK = NotificationCategory.TASK


class TaskCreationHandler(BaseHandler[TaskCreationPayload]):
    kind = NotifierType.TASK_CREATION

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        innovators = await self.resolve_innovators(innovation.id)
        unit_name = self.get_request_unit_name()
        task_id = self.payload.task.id
        notification_id = self.new_notification_id()

        self.notify(
            innovators,
            T.TA01_TASK_CREATION_TO_INNOVATOR,
            email_params={
                "innovation_name": innovation.name,
                "unit_name": unit_name,
                "task_url": self.links.task_url(ServiceRole.INNOVATOR, innovation.id, task_id, notification_id),
            },
            in_app_context=InAppContext(type=TASK, detail=T.TA01_TASK_CREATION_TO_INNOVATOR, id=task_id),
            in_app_params={"innovationName": innovation.name, "unitName": unit_name, "taskId": task_id},
            preference_category=TASK,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class TaskUpdateHandler(BaseHandler[TaskUpdatePayload]):
    """Status change of a task.

    Innovators respond to tasks (DONE / DECLINED); the other innovators and
    the task owner are told. Accessors and the assessment team cancel or
    reopen them; the innovators are told.
    """

    kind = NotifierType.TASK_UPDATE

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        innovators = await self.resolve_innovators(innovation.id)
        status = self.payload.task.status

        if self.context.role == ServiceRole.INNOVATOR:
            await self._responded(innovation, innovators)
            if status in (InnovationTaskStatus.DONE, InnovationTaskStatus.DECLINED):
                task = await self.recipients.task_info(self.payload.task.id)
                if task.owner is None:
                    self.skip("Task owner not found", task_id=task.id)
                    return
                await self._to_owner(innovation, task.owner)
            return

        if status == InnovationTaskStatus.CANCELLED:
            await self._by_accessor(innovation, innovators, T.TA05_TASK_CANCELLED_TO_INNOVATOR)
        elif status == InnovationTaskStatus.OPEN:
            await self._by_accessor(innovation, innovators, T.TA06_TASK_REOPEN_TO_INNOVATOR)

    def _context(self, template: T) -> InAppContext:
        return InAppContext(type=TASK, detail=template, id=self.payload.task.id)

    async def _innovator_in_app_params(self, innovation: InnovationInfo) -> dict[str, str]:
        return {
            "requestUserName": await self.get_request_user_name(),
            "innovationName": innovation.name,
            "status": str(self.payload.task.status),
            "messageId": self.payload.message_id,
            "threadId": self.payload.thread_id,
        }

    async def _responded(self, innovation: InnovationInfo, innovators: list[Recipient]) -> None:
        notification_id = self.new_notification_id()
        self.notify(
            innovators,
            T.TA02_TASK_RESPONDED_TO_OTHER_INNOVATORS,
            email_params={
                "innovation_name": innovation.name,
                "innovator_name": await self.get_request_user_name(),
                "task_status": translate_task_status(self.payload.task.status),
                "message_url": self.links.thread_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.thread_id, notification_id
                ),
            },
            in_app_context=self._context(T.TA02_TASK_RESPONDED_TO_OTHER_INNOVATORS),
            in_app_params=await self._innovator_in_app_params(innovation),
            preference_category=TASK,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    async def _to_owner(self, innovation: InnovationInfo, owner: Recipient) -> None:
        notification_id = self.new_notification_id()
        email_params = {
            "innovation_name": innovation.name,
            "innovator_name": await self.get_request_user_name(),
            "message": self.payload.message,
            "message_url": self.links.thread_url(owner.role, innovation.id, self.payload.thread_id, notification_id),
        }
        if self.payload.task.status == InnovationTaskStatus.DONE:
            template = T.TA03_TASK_DONE_TO_ACCESSOR_OR_ASSESSMENT
            email_params["task_url"] = self.links.task_url(
                owner.role, innovation.id, self.payload.task.id, notification_id
            )
        else:
            template = T.TA04_TASK_DECLINED_TO_ACCESSOR_OR_ASSESSMENT
        self.notify(
            [owner],
            template,
            email_params=email_params,
            in_app_context=self._context(template),
            in_app_params=await self._innovator_in_app_params(innovation),
            preference_category=TASK,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    async def _by_accessor(self, innovation: InnovationInfo, innovators: list[Recipient], template: T) -> None:
        notification_id = self.new_notification_id()
        request_user_name = await self.get_request_user_name()
        unit_name = self.get_request_unit_name()
        self.notify(
            innovators,
            template,
            email_params={
                "accessor_name": request_user_name,
                "unit_name": unit_name,
                "innovation_name": innovation.name,
                "message": self.payload.message,
                "message_url": self.links.thread_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.thread_id, notification_id
                ),
            },
            in_app_context=self._context(template),
            in_app_params={
                "requestUserName": request_user_name,
                "innovationName": innovation.name,
                "unitName": unit_name,
                "messageId": self.payload.message_id,
                "threadId": self.payload.thread_id,
            },
            preference_category=TASK,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )
