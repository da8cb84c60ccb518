"""Recurrent notifications raised by the scheduler rather than by a user action."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from innovation_service.core.settings import get_notification_settings
from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import format_date
from innovation_service.features.notifications.schemas import EmptyPayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext

if TYPE_CHECKING:
    from innovation_service.core.settings import NotificationSettings
    from innovation_service.features.notifications.types import IdleSupport, Recipient, SuggestedUnit

AUTOMATIC = NotificationCategory.AUTOMATIC


class _ScheduledHandler(BaseHandler[EmptyPayload]):
    """Reads its thresholds from ``NotificationSettings`` unless given explicitly."""

    def __init__(self, *args: Any, settings: NotificationSettings | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.settings = settings or get_notification_settings()


class IncompleteInnovationRecordHandler(_ScheduledHandler):
    """Reminds owners to finish innovation records that were never submitted."""

    kind = NotifierType.INCOMPLETE_INNOVATION_RECORD

    async def handle(self) -> None:
        innovations = await self.recipients.incomplete_innovations(
            self.settings.incomplete_record_days,
            self.settings.incomplete_record_repeat_days,
        )
        self._lazy.debug(lambda: f"incomplete innovations -> {len(innovations)}")

        for innovation in innovations:
            owner = await self.recipients.resolve_by_role(innovation.owner_id, ServiceRole.INNOVATOR)
            if owner is None:
                self.skip("Innovation owner has no innovator role", innovation_id=innovation.innovation_id)
                continue
            notification_id = self.new_notification_id()
            self.notify(
                [owner],
                T.AU01_INNOVATOR_INCOMPLETE_RECORD,
                email_params={
                    "innovation_name": innovation.innovation_name,
                    "innovation_record_url": self.links.innovation_record_url(
                        ServiceRole.INNOVATOR, innovation.innovation_id, notification_id
                    ),
                },
                in_app_context=InAppContext(
                    type=AUTOMATIC,
                    detail=T.AU01_INNOVATOR_INCOMPLETE_RECORD,
                    id=innovation.innovation_id,
                ),
                in_app_params={},
                preference_category=AUTOMATIC,
                innovation_id=innovation.innovation_id,
                notification_id=notification_id,
            )


class IdleSupportAccessorHandler(_ScheduledHandler):
    """Reminds assigned accessors about supports with no recent activity.

    Engaging and waiting supports have separate thresholds and templates.
    """

    kind = NotifierType.IDLE_SUPPORT_ACCESSOR

    async def handle(self) -> None:
        engaging = await self.recipients.idle_supports(
            self.settings.idle_support_days,
            [InnovationSupportStatus.ENGAGING],
            self.settings.idle_support_repeat_days,
        )
        for support in engaging:
            await self._idle_engaging(support)

        waiting = await self.recipients.idle_waiting_supports(
            self.settings.idle_waiting_support_days,
            self.settings.idle_waiting_support_repeat_days,
        )
        for support in waiting:
            await self._idle_waiting(support)

    async def _idle_engaging(self, support: IdleSupport) -> None:
        assigned = await self.recipients.support_assigned_recipients(support.support_id)
        notification_id = self.new_notification_id()
        self.notify(
            assigned,
            T.AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT,
            email_params={
                "innovation_name": support.innovation_name,
                "support_status_url": self.links.support_status_url(
                    ServiceRole.ACCESSOR, support.innovation_id, support.support_id, notification_id
                ),
                "support_summary_url": self.links.support_summary_url(
                    ServiceRole.ACCESSOR, support.innovation_id, notification_id, support.organisation_unit_id
                ),
                "thread_url": self.links.threads_url(ServiceRole.ACCESSOR, support.innovation_id, notification_id),
            },
            in_app_context=InAppContext(
                type=AUTOMATIC,
                detail=T.AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT,
                id=support.support_id,
            ),
            in_app_params={
                "innovationName": support.innovation_name,
                "supportId": support.support_id,
                "unitId": support.organisation_unit_id,
            },
            preference_category=AUTOMATIC,
            innovation_id=support.innovation_id,
            notification_id=notification_id,
        )

    async def _idle_waiting(self, support: IdleSupport) -> None:
        assigned = await self.recipients.support_assigned_recipients(support.support_id)
        notification_id = self.new_notification_id()
        self.notify(
            assigned,
            T.AU06_ACCESSOR_IDLE_WAITING,
            email_params={
                "innovation_name": support.innovation_name,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ACCESSOR, support.innovation_id, notification_id
                ),
                "thread_url": self.links.threads_url(ServiceRole.ACCESSOR, support.innovation_id, notification_id),
            },
            in_app_context=InAppContext(type=AUTOMATIC, detail=T.AU06_ACCESSOR_IDLE_WAITING, id=support.support_id),
            in_app_params={"innovationName": support.innovation_name, "supportId": support.support_id},
            preference_category=AUTOMATIC,
            innovation_id=support.innovation_id,
            notification_id=notification_id,
        )


class IdleSupportInnovatorHandler(_ScheduledHandler):
    """Warns innovators whose innovation has had no engaging or waiting support for a while.

    The email carries the date the innovation will be archived if nothing changes.
    """

    kind = NotifierType.IDLE_SUPPORT_INNOVATOR

    async def handle(self) -> None:
        innovations = await self.recipients.innovations_without_support(
            self.settings.idle_innovator_support_days,
            self.settings.idle_innovator_support_repeat_days,
            self.settings.innovation_auto_archive_days,
        )
        for innovation in innovations:
            innovators = await self.resolve_innovators(innovation.innovation_id)
            archive_date = format_date(innovation.expected_archive_date)
            notification_id = self.new_notification_id()
            self.notify(
                innovators,
                T.AU03_INNOVATOR_IDLE_SUPPORT,
                email_params={
                    "innovation_name": innovation.innovation_name,
                    "innovation_record_url": self.links.innovation_record_url(
                        ServiceRole.INNOVATOR, innovation.innovation_id, notification_id
                    ),
                    "innovation_overview_url": self.links.innovation_overview_url(
                        ServiceRole.INNOVATOR, innovation.innovation_id, notification_id
                    ),
                    "expected_archive_date": archive_date,
                },
                in_app_context=InAppContext(
                    type=AUTOMATIC,
                    detail=T.AU03_INNOVATOR_IDLE_SUPPORT,
                    id=innovation.innovation_id,
                ),
                in_app_params={"innovationName": innovation.innovation_name, "expectedArchiveDate": archive_date},
                preference_category=AUTOMATIC,
                innovation_id=innovation.innovation_id,
                notification_id=notification_id,
            )


class UnitKPIHandler(_ScheduledHandler):
    """Reminds suggested units that have not acted on an innovation.

    A reminder goes out when the suggestion reaches the reminder age and an
    overdue notice when it reaches the overdue age. Each (unit, innovation)
    pair gets its own in-app notification.
    """

    kind = NotifierType.UNIT_KPI

    async def handle(self) -> None:
        qualifying_accessors: dict[str, list[Recipient]] = {}
        for template, days in (
            (T.AU04_SUPPORT_KPI_REMINDER, self.settings.unit_kpi_reminder_days),
            (T.AU05_SUPPORT_KPI_OVERDUE, self.settings.unit_kpi_overdue_days),
        ):
            by_unit = await self.recipients.unit_kpi_suggestions(days)
            for unit_id, suggestions in by_unit.items():
                if unit_id not in qualifying_accessors:
                    qualifying_accessors[unit_id] = await self.recipients.resolve_unit_qualifying_accessors([unit_id])
                for suggestion in suggestions:
                    self._notify_unit(template, qualifying_accessors[unit_id], suggestion)

    def _notify_unit(self, template: T, recipients: list[Recipient], suggestion: SuggestedUnit) -> None:
        notification_id = self.new_notification_id()
        self.notify(
            recipients,
            template,
            email_params={
                "innovation_name": suggestion.innovation_name,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ACCESSOR, suggestion.innovation_id, notification_id
                ),
            },
            in_app_context=InAppContext(type=AUTOMATIC, detail=template, id=suggestion.innovation_id),
            in_app_params={"innovationName": suggestion.innovation_name},
            preference_category=AUTOMATIC,
            innovation_id=suggestion.innovation_id,
            notification_id=notification_id,
        )
