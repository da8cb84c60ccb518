"""Handlers for administrative actions."""

from __future__ import annotations

from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler
from innovation_service.features.notifications.schemas import (
    LockUserPayload,
    NewAnnouncementPayload,
    NewSupportingAccountPayload,
    UnitInactivatedPayload,
    UserEmailAddressUpdatedPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import EmailRecipient, InAppContext

ADMIN = NotificationCategory.ADMIN
ALL_ROLES = [
    ServiceRole.INNOVATOR,
    ServiceRole.ACCESSOR,
    ServiceRole.QUALIFYING_ACCESSOR,
    ServiceRole.ASSESSMENT,
    ServiceRole.ADMIN,
]


class LockUserHandler(BaseHandler[LockUserPayload]):
    """An administrator locked a user.

    Users assigned to the locked user's innovations get one in-app per
    innovation; the locked user gets a confirmation email even though
    they are now inactive.
    """

    kind = NotifierType.LOCK_USER

    async def handle(self) -> None:
        user_id = await self.recipients.identity_id_to_user_id(self.payload.identity_id)
        if user_id is None:
            self.skip("Locked identity has no platform user", identity_id=self.payload.identity_id)
            return

        for innovation in await self.recipients.user_innovations_with_assigned_recipients(user_id):
            self.add_in_app(
                InAppContext(type=ADMIN, detail=T.AP02_INNOVATOR_LOCKED_TO_ASSIGNED_USERS, id=innovation.id),
                innovation.assigned,
                {"innovationName": innovation.name},
                innovation_id=innovation.id,
                notification_id=self.new_notification_id(),
            )

        locked = await self.recipients.resolve_by_role(
            [user_id],
            [ServiceRole.INNOVATOR, ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR, ServiceRole.ASSESSMENT],
        )
        # one email per user, not per role
        self.add_emails(
            locked[:1],
            T.AP03_USER_LOCKED_TO_LOCKED_USER,
            {},
            preference_category=ADMIN,
            include_locked=True,
        )


class UnitInactivatedHandler(BaseHandler[UnitInactivatedPayload]):
    """A unit was inactivated; innovators it was engaging with are told."""

    kind = NotifierType.UNIT_INACTIVATED

    async def handle(self) -> None:
        unit = await self.recipients.organisation_unit_info(self.payload.unit_id)
        supports = await self.recipients.unit_supports_in_status(unit.unit_id, [InnovationSupportStatus.ENGAGING])

        for support in supports:
            innovators = await self.resolve_innovators(support.innovation_id)
            self.notify(
                innovators,
                T.AP07_UNIT_INACTIVATED_TO_ENGAGING_INNOVATIONS,
                email_params={"innovation_name": support.innovation_name, "unit_name": unit.unit_name},
                in_app_context=InAppContext(
                    type=ADMIN,
                    detail=T.AP07_UNIT_INACTIVATED_TO_ENGAGING_INNOVATIONS,
                    id=support.id,
                ),
                in_app_params={"unitName": unit.unit_name, "innovationName": support.innovation_name},
                preference_category=ADMIN,
                innovation_id=support.innovation_id,
                notification_id=self.new_notification_id(),
            )


class UserEmailAddressUpdatedHandler(BaseHandler[UserEmailAddressUpdatedPayload]):
    """A user's sign-in email changed.

    The previous address is told by email so an unexpected change can be
    reported; the user gets an in-app notice on every role they hold.
    """

    kind = NotifierType.USER_EMAIL_ADDRESS_UPDATED

    async def handle(self) -> None:
        user_id = await self.recipients.identity_id_to_user_id(self.payload.identity_id)
        if user_id is None:
            self.skip("Updated identity has no platform user", identity_id=self.payload.identity_id)
            return

        self.add_emails(
            EmailRecipient(email=self.payload.old_email),
            T.AP08_USER_EMAIL_ADDRESS_UPDATED,
            {},
            preference_category=None,
        )
        roles = await self.recipients.resolve_by_role([user_id], ALL_ROLES)
        self.add_in_app(
            InAppContext(type=ADMIN, detail=T.AP08_USER_EMAIL_ADDRESS_UPDATED, id=user_id),
            roles,
            {},
            innovation_id=None,
            notification_id=self.new_notification_id(),
            include_self=True,
        )


class NewAccountHandler(BaseHandler[NewSupportingAccountPayload]):
    """An administrator created a supporting account; the new user is invited to sign in."""

    kind = NotifierType.NEW_SUPPORTING_ACCOUNT

    async def handle(self) -> None:
        self.add_emails(
            EmailRecipient(email=self.payload.recipient_email),
            T.AP09_NEW_SUPPORTING_ACCOUNT,
            {"sign_in_url": self.links.sign_in_url()},
            preference_category=None,
        )


class NewAnnouncementHandler(BaseHandler[NewAnnouncementPayload]):
    kind = NotifierType.NEW_ANNOUNCEMENT

    async def handle(self) -> None:
        users = await self.recipients.users_with_roles(self.payload.user_roles)
        self._lazy.debug(lambda: f"announcement {self.payload.announcement_id} -> {len(users)} users")
        self.add_emails(
            users,
            T.AP10_NEW_ANNOUNCEMENT,
            {
                "announcement_title": self.payload.title,
                "announcement_body": self.payload.body,
                "announcement_url": self.payload.link_url,
            },
            preference_category=ADMIN,
        )
