"""Handlers for organisation unit suggestions."""

from __future__ import annotations

from innovation_service.core.exceptions import UnprocessableEntityError
from innovation_service.features.notifications.enums import NotificationCategory, NotifierType, ServiceRole
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.helpers import display_tag
from innovation_service.features.notifications.schemas import (
    InnovationDelayedSharedSuggestionPayload,
    OrganisationUnitsSuggestionPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InAppContext, InnovationInfo

SUGGEST_SUPPORT = NotificationCategory.SUGGEST_SUPPORT


class OrganisationUnitsSuggestionHandler(BaseHandler[OrganisationUnitsSuggestionPayload]):
    """Units were suggested to support an innovation.

    Suggested units the innovation is shared with reach their qualifying
    accessors. Units it is not shared with cannot see the innovation, so
    the innovators are asked to review their data sharing preferences.
    """

    kind = NotifierType.ORGANISATION_UNITS_SUGGESTION

    async def handle(self) -> None:
        units_ids = self.payload.units_ids
        if not units_ids:
            raise UnprocessableEntityError(
                detail="Organisation units suggestion without units",
                type="units-suggestion-empty",
                extra={"innovation_id": self.payload.innovation_id},
            )

        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        shared_ids = {unit.unit_id for unit in await self.recipients.innovation_shared_units(innovation.id)}
        suggested_shared = [unit_id for unit_id in units_ids if unit_id in shared_ids]

        if suggested_shared:
            await self._to_suggested_units(innovation, suggested_shared)
        if len(suggested_shared) < len(units_ids):
            await self._not_shared_to_innovators(innovation)

    async def _to_suggested_units(self, innovation: InnovationInfo, unit_ids: list[str]) -> None:
        qualifying_accessors = await self.recipients.resolve_unit_qualifying_accessors(unit_ids)
        notification_id = self.new_notification_id()
        self.notify(
            qualifying_accessors,
            T.OS01_UNITS_SUGGESTION_TO_SUGGESTED_UNITS_QA,
            email_params={
                "innovation_name": innovation.name,
                "comment": self.payload.comment,
                "organisation_unit": self.get_request_unit_name(),
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ACCESSOR, innovation.id, notification_id
                ),
                "showKPI": "yes",
            },
            in_app_context=InAppContext(
                type=SUGGEST_SUPPORT,
                detail=T.OS01_UNITS_SUGGESTION_TO_SUGGESTED_UNITS_QA,
                id=innovation.id,
            ),
            in_app_params={
                "innovationName": innovation.name,
                "senderDisplayInformation": display_tag(self.context.role, unit_name=self.context.unit_name),
            },
            preference_category=SUGGEST_SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    async def _not_shared_to_innovators(self, innovation: InnovationInfo) -> None:
        innovators = await self.resolve_innovators(innovation.id)
        notification_id = self.new_notification_id()
        self.notify(
            innovators,
            T.OS02_UNITS_SUGGESTION_NOT_SHARED_TO_INNOVATOR,
            email_params={
                "innovation_name": innovation.name,
                "data_sharing_preferences_url": self.links.data_sharing_preferences_url(
                    ServiceRole.INNOVATOR, innovation.id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=SUGGEST_SUPPORT,
                detail=T.OS02_UNITS_SUGGESTION_NOT_SHARED_TO_INNOVATOR,
                id=innovation.id,
            ),
            in_app_params={},
            preference_category=SUGGEST_SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class InnovationDelayedSharedSuggestionHandler(BaseHandler[InnovationDelayedSharedSuggestionPayload]):
    """Innovators shared the innovation with organisations that had already been suggested.

    Qualifying accessors of the suggested units in those organisations are
    told the innovation is now visible to them.
    """

    kind = NotifierType.INNOVATION_DELAYED_SHARED_SUGGESTION

    async def handle(self) -> None:
        if not self.payload.new_shared_org_ids:
            return
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        suggested = await self.recipients.suggested_units_without_support(
            innovation_id=innovation.id, organisation_ids=self.payload.new_shared_org_ids
        )
        unit_ids = list(dict.fromkeys(s.organisation_unit_id for s in suggested))
        if not unit_ids:
            self.skip("No suggested unit in the newly shared organisations", innovation_id=innovation.id)
            return

        qualifying_accessors = await self.recipients.resolve_unit_qualifying_accessors(unit_ids)
        notification_id = self.new_notification_id()
        self.notify(
            qualifying_accessors,
            T.OS03_INNOVATION_DELAYED_SHARED_SUGGESTION,
            email_params={
                "innovation_name": innovation.name,
                "innovation_overview_url": self.links.innovation_overview_url(
                    ServiceRole.ACCESSOR, innovation.id, notification_id
                ),
            },
            in_app_context=InAppContext(
                type=SUGGEST_SUPPORT, detail=T.OS03_INNOVATION_DELAYED_SHARED_SUGGESTION, id=innovation.id
            ),
            in_app_params={"innovationName": innovation.name},
            preference_category=SUGGEST_SUPPORT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )
