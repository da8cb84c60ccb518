"""Handlers for support lifecycle events."""

from __future__ import annotations

from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import transform_into_bullet, translate_support_status
from innovation_service.features.notifications.schemas import (
    SupportNewAssignAccessorsPayload,
    SupportStatusChangeRequestPayload,
    SupportStatusUpdatePayload,
    SupportSummaryUpdatePayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext, InnovationInfo, Recipient

SUPPORT = NotificationCategory.SUPPORT


class SupportStatusUpdateHandler(BaseHandler[SupportStatusUpdatePayload]):
    """Tells the innovators that a unit changed the status of its support."""

    kind = NotifierType.SUPPORT_STATUS_UPDATE

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        innovators = await self.resolve_innovators(innovation.id)

        match self.payload.support.status:
            case InnovationSupportStatus.ENGAGING:
                await self._engaging(innovation, innovators)
            case InnovationSupportStatus.WAITING:
                self._waiting_or_unsuitable(innovation, innovators, T.ST03_SUPPORT_STATUS_TO_WAITING)
            case InnovationSupportStatus.UNSUITABLE:
                self._waiting_or_unsuitable(innovation, innovators, T.ST02_SUPPORT_STATUS_TO_OTHER)
            case InnovationSupportStatus.CLOSED:
                self._closed(innovation, innovators)
            case status:
                self.skip("No notification for support status", support_status=str(status))

    async def _accessor_names(self) -> list[str]:
        role_ids = self.payload.support.new_assigned_accessors_ids
        if not role_ids:
            return []
        accessors = await self.recipients.resolve_by_role_ids(role_ids)
        users = await self.identity.get_users_info([a.identity_id for a in accessors])
        return [users[a.identity_id].display_name for a in accessors if a.identity_id in users]

    def _context(self, template: T) -> InAppContext:
        return InAppContext(type=SUPPORT, detail=template, id=self.payload.support.id)

    async def _engaging(self, innovation: InnovationInfo, innovators: list[Recipient]) -> None:
        notification_id = self.new_notification_id()
        unit_name = self.get_request_unit_name()
        self.notify(
            innovators,
            T.ST01_SUPPORT_STATUS_TO_ENGAGING,
            email_params={
                "accessors_name": transform_into_bullet(await self._accessor_names()),
                "innovation_name": innovation.name,
                "message": self.payload.support.message,
                "unit_name": unit_name,
                "message_url": self.links.thread_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.thread_id, notification_id
                ),
            },
            in_app_context=self._context(T.ST01_SUPPORT_STATUS_TO_ENGAGING),
            in_app_params={
                "innovationName": innovation.name,
                "threadId": self.payload.thread_id,
                "unitName": unit_name,
            },
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    def _waiting_or_unsuitable(self, innovation: InnovationInfo, innovators: list[Recipient], template: T) -> None:
        notification_id = self.new_notification_id()
        unit_name = self.get_request_unit_name()
        status = self.payload.support.status
        email_params = {
            "innovation_name": innovation.name,
            "message": self.payload.support.message,
            "unit_name": unit_name,
            "support_summary_url": self.links.support_summary_url(
                ServiceRole.INNOVATOR, innovation.id, notification_id, self.context.unit_id
            ),
        }
        if template == T.ST02_SUPPORT_STATUS_TO_OTHER:
            email_params["status"] = translate_support_status(status).lower()
        self.notify(
            innovators,
            template,
            email_params=email_params,
            in_app_context=self._context(template),
            in_app_params={
                "innovationName": innovation.name,
                "status": translate_support_status(status).lower(),
                "unitId": self.context.unit_id or "",
                "unitName": unit_name,
            },
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    def _closed(self, innovation: InnovationInfo, innovators: list[Recipient]) -> None:
        notification_id = self.new_notification_id()
        unit_name = self.get_request_unit_name()
        self.notify(
            innovators,
            T.ST09_SUPPORT_STATUS_TO_CLOSED,
            email_params={
                "innovation_name": innovation.name,
                "message": self.payload.support.message,
                "unit_name": unit_name,
                "support_summary_url": self.links.support_summary_url(
                    ServiceRole.INNOVATOR, innovation.id, notification_id, self.context.unit_id
                ),
            },
            in_app_context=self._context(T.ST09_SUPPORT_STATUS_TO_CLOSED),
            in_app_params={
                "innovationName": innovation.name,
                "unitId": self.context.unit_id or "",
                "unitName": unit_name,
            },
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class SupportNewAssignAccessorsHandler(BaseHandler[SupportNewAssignAccessorsPayload]):
    """Notifies about accessors added to or removed from a support."""

    kind = NotifierType.SUPPORT_NEW_ASSIGN_ACCESSORS

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        added_ids = self.payload.new_assigned_accessors_role_ids
        removed_ids = self.payload.removed_assigned_accessors_role_ids
        accessors = await self.recipients.resolve_by_role_ids([*added_ids, *removed_ids])
        added = [a for a in accessors if a.role_id in added_ids]
        removed = [a for a in accessors if a.role_id in removed_ids]

        if added_ids:
            if not self.payload.changed_status:
                await self._to_innovators(innovation, added)
            support = await self.recipients.support_info(self.payload.support_id)
            if support.status == InnovationSupportStatus.ENGAGING:
                await self._to_new_accessors(innovation, added, T.ST05_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_NEW_QA)
            elif support.status == InnovationSupportStatus.WAITING:
                await self._to_new_accessors(
                    innovation, added, T.ST08_SUPPORT_NEW_ASSIGNED_WAITING_INNOVATION_TO_QA
                )

        if removed_ids:
            notification_id = self.new_notification_id()
            self.notify(
                removed,
                T.ST06_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_OLD_QA,
                email_params={"innovation_name": innovation.name},
                in_app_context=self._context(T.ST06_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_OLD_QA),
                in_app_params={"innovationName": innovation.name},
                preference_category=SUPPORT,
                innovation_id=innovation.id,
                notification_id=notification_id,
            )

    def _context(self, template: T) -> InAppContext:
        return InAppContext(type=SUPPORT, detail=template, id=self.payload.support_id)

    async def _to_innovators(self, innovation: InnovationInfo, added: list[Recipient]) -> None:
        innovators = await self.resolve_innovators(innovation.id)
        users = await self.identity.get_users_info([a.identity_id for a in added])
        names = [users[a.identity_id].display_name for a in added if a.identity_id in users]
        unit_name = self.get_request_unit_name()
        notification_id = self.new_notification_id()
        self.notify(
            innovators,
            T.ST04_SUPPORT_NEW_ASSIGNED_ACCESSORS_TO_INNOVATOR,
            email_params={
                "accessors_name": transform_into_bullet(names),
                "innovation_name": innovation.name,
                "message": self.payload.message,
                "unit_name": unit_name,
                "message_url": self.links.thread_url(
                    ServiceRole.INNOVATOR, innovation.id, self.payload.thread_id, notification_id
                ),
            },
            in_app_context=self._context(T.ST04_SUPPORT_NEW_ASSIGNED_ACCESSORS_TO_INNOVATOR),
            in_app_params={
                "innovationName": innovation.name,
                "threadId": self.payload.thread_id,
                "unitName": unit_name,
            },
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    async def _to_new_accessors(self, innovation: InnovationInfo, added: list[Recipient], template: T) -> None:
        notification_id = self.new_notification_id()
        email_params = {"innovation_name": innovation.name, "qa_name": await self.get_request_user_name()}
        if template == T.ST05_SUPPORT_NEW_ASSIGNED_ACCESSOR_TO_NEW_QA:
            email_params["innovation_overview_url"] = self.links.innovation_overview_url(
                ServiceRole.ACCESSOR, innovation.id, notification_id
            )
        self.notify(
            added,
            template,
            email_params=email_params,
            in_app_context=self._context(template),
            in_app_params={"innovationName": innovation.name},
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class SupportStatusChangeRequestHandler(BaseHandler[SupportStatusChangeRequestPayload]):
    """An accessor asks the qualifying accessors of their unit to change a support status."""

    kind = NotifierType.SUPPORT_STATUS_CHANGE_REQUEST

    async def handle(self) -> None:
        unit_id = self.context.unit_id
        if unit_id is None:
            self.skip("Support status change request without an actor unit")
            return

        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        qualifying_accessors = await self.recipients.resolve_unit_qualifying_accessors([unit_id])
        accessor_name = await self.get_request_user_name()
        status = translate_support_status(self.payload.proposed_status).lower()
        notification_id = self.new_notification_id()

        self.notify(
            qualifying_accessors,
            T.ST07_SUPPORT_STATUS_CHANGE_REQUEST,
            email_params={
                "accessor_name": accessor_name,
                "innovation_name": innovation.name,
                "proposed_status": status,
                "request_comment": self.payload.request_status_update_comment,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.QUALIFYING_ACCESSOR, innovation.id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=SUPPORT,
                detail=T.ST07_SUPPORT_STATUS_CHANGE_REQUEST,
                id=innovation.id,
            ),
            in_app_params={
                "accessorName": accessor_name,
                "innovationName": innovation.name,
                "status": status,
            },
            preference_category=SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class SupportSummaryUpdateHandler(BaseHandler[SupportSummaryUpdatePayload]):
    """A unit updated its support summary; innovators and other engaging units are told."""

    kind = NotifierType.SUPPORT_SUMMARY_UPDATE

    async def handle(self) -> None:
        if not self.context.role.is_accessor_type or self.context.unit_id is None:
            self.skip("Support summary updates are only notified for accessor actors")
            return

        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        unit_id = self.context.unit_id
        unit_name = self.get_request_unit_name()
        in_app_params = {"innovationName": innovation.name, "unitName": unit_name, "unitId": unit_id}

        innovators = await self.resolve_innovators(innovation.id)
        notification_id = self.new_notification_id()
        self.notify(
            innovators,
            T.SS01_SUPPORT_SUMMARY_UPDATE_TO_INNOVATORS,
            email_params={
                "innovation_name": innovation.name,
                "unit_name": unit_name,
                "support_summary_update_url": self.links.support_summary_url(
                    ServiceRole.INNOVATOR, innovation.id, notification_id, unit_id
                ),
            },
            in_app_context=self._context(T.SS01_SUPPORT_SUMMARY_UPDATE_TO_INNOVATORS),
            in_app_params=in_app_params,
            preference_category=NotificationCategory.SUPPORT_SUMMARY,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

        engaging = await self.recipients.resolve_assigned_recipients(
            innovation.id, support_statuses=[InnovationSupportStatus.ENGAGING]
        )
        other_units = [r for r in engaging if r.organisation_unit_id != unit_id]
        notification_id = self.new_notification_id()
        self.notify(
            other_units,
            T.SS02_SUPPORT_SUMMARY_UPDATE_TO_OTHER_ENGAGING_ACCESSORS,
            email_params={
                "innovation_name": innovation.name,
                "unit_name": unit_name,
                "support_summary_update_url": self.links.support_summary_url(
                    ServiceRole.ACCESSOR, innovation.id, notification_id, unit_id
                ),
            },
            in_app_context=self._context(T.SS02_SUPPORT_SUMMARY_UPDATE_TO_OTHER_ENGAGING_ACCESSORS),
            in_app_params=in_app_params,
            preference_category=NotificationCategory.SUPPORT_SUMMARY,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    def _context(self, template: T) -> InAppContext:
        return InAppContext(type=NotificationCategory.SUPPORT_SUMMARY, detail=template, id=self.payload.support_id)
