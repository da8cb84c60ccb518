"""Unit tests for administrative action handlers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    NotificationCategory,
    ServiceRole,
)
from innovation_service.features.notifications.handlers import (
    LockUserHandler,
    NewAccountHandler,
    NewAnnouncementHandler,
    UnitInactivatedHandler,
    UserEmailAddressUpdatedHandler,
)
from innovation_service.features.notifications.schemas import (
    LockUserPayload,
    NewAnnouncementPayload,
    NewSupportingAccountPayload,
    UnitInactivatedPayload,
    UserEmailAddressUpdatedPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import (
    EmailRecipient,
    OrganisationUnitInfo,
    OwnedInnovation,
    SupportInfo,
)


@pytest.mark.unit
class TestLockUserHandler:
    """Test notifications when an administrator locks a user."""

    @pytest.mark.asyncio
    async def test_locked_innovator_with_two_innovations(
        self, make_context, make_recipient, handler_deps, recipients_mock
    ):
        """Test that assigned users get one in-app per innovation and the locked user one email."""
        accessor_a = make_recipient(ServiceRole.ACCESSOR)
        accessor_b = make_recipient(ServiceRole.ACCESSOR)
        locked = make_recipient(ServiceRole.INNOVATOR, user_id="locked-user", is_active=False)
        recipients_mock.identity_id_to_user_id.return_value = "locked-user"
        recipients_mock.user_innovations_with_assigned_recipients.return_value = [
            OwnedInnovation(id="inn-1", name="First", assigned=[accessor_a]),
            OwnedInnovation(id="inn-2", name="Second", assigned=[accessor_a, accessor_b]),
        ]
        recipients_mock.resolve_by_role.return_value = [locked]

        handler = LockUserHandler(
            make_context(ServiceRole.ADMIN), LockUserPayload(identity_id="locked-identity"), **handler_deps
        )
        await handler.run()

        assert [item.innovation_id for item in handler.in_app] == ["inn-1", "inn-2"]
        assert handler.in_app[1].user_role_ids == (accessor_a.role_id, accessor_b.role_id)
        assert handler.in_app[0].params == {"innovationName": "First"}
        assert len(handler.emails) == 1
        email = handler.emails[0]
        assert email.to == locked
        assert email.template_id == T.AP03_USER_LOCKED_TO_LOCKED_USER
        assert email.preference_category == NotificationCategory.ADMIN
        assert email.include_locked is True

    @pytest.mark.asyncio
    async def test_one_email_per_user_with_several_roles(
        self, make_context, make_recipient, handler_deps, recipients_mock
    ):
        """Test that a user holding several roles gets a single email."""
        recipients_mock.identity_id_to_user_id.return_value = "user-1"
        recipients_mock.user_innovations_with_assigned_recipients.return_value = []
        recipients_mock.resolve_by_role.return_value = [
            make_recipient(ServiceRole.ACCESSOR, user_id="user-1", is_active=False),
            make_recipient(ServiceRole.ASSESSMENT, user_id="user-1", is_active=False),
        ]

        handler = LockUserHandler(make_context(ServiceRole.ADMIN), LockUserPayload(identity_id="i"), **handler_deps)
        await handler.run()

        assert len(handler.emails) == 1
        assert handler.in_app == ()

    @pytest.mark.asyncio
    async def test_unknown_identity_is_skipped(self, make_context, handler_deps, recipients_mock):
        """Test that an identity with no platform user queues nothing."""
        recipients_mock.identity_id_to_user_id.return_value = None

        handler = LockUserHandler(make_context(ServiceRole.ADMIN), LockUserPayload(identity_id="i"), **handler_deps)
        await handler.run()

        assert handler.emails == ()
        assert handler.in_app == ()
        recipients_mock.user_innovations_with_assigned_recipients.assert_not_awaited()


@pytest.mark.unit
class TestUnitInactivatedHandler:
    """Test notifications when a unit is inactivated."""

    @pytest.mark.asyncio
    async def test_innovators_of_engaging_supports_notified(
        self, make_context, make_recipient, handler_deps, recipients_mock
    ):
        """Test that each engaging support's innovators hear about the unit."""
        innovator = make_recipient(ServiceRole.INNOVATOR)
        recipients_mock.organisation_unit_info.return_value = OrganisationUnitInfo(
            organisation_id="org-1",
            organisation_name="Org",
            organisation_acronym=None,
            unit_id="unit-1",
            unit_name="Unit One",
            unit_acronym=None,
        )
        recipients_mock.unit_supports_in_status.return_value = [
            SupportInfo(
                id="support-1",
                innovation_id="inn-1",
                innovation_name="Innovation",
                organisation_unit_id="unit-1",
                status=InnovationSupportStatus.ENGAGING,
            )
        ]
        recipients_mock.resolve_owner_and_collaborators.return_value = [innovator.user_id]
        recipients_mock.resolve_by_role.return_value = [innovator]

        handler = UnitInactivatedHandler(
            make_context(ServiceRole.ADMIN), UnitInactivatedPayload(unit_id="unit-1"), **handler_deps
        )
        await handler.run()

        recipients_mock.unit_supports_in_status.assert_awaited_once_with("unit-1", [InnovationSupportStatus.ENGAGING])
        assert handler.emails[0].params == {"innovation_name": "Innovation", "unit_name": "Unit One"}
        assert handler.in_app[0].context.id == "support-1"
        assert handler.in_app[0].user_role_ids == (innovator.role_id,)


@pytest.mark.unit
class TestUserEmailAddressUpdatedHandler:
    PAYLOAD = UserEmailAddressUpdatedPayload(
        identity_id="actor-identity", old_email="old@example.org", new_email="new@example.org"
    )

    @pytest.mark.asyncio
    async def test_old_address_and_every_role(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that the old address gets the email and the user's own roles get the in-app."""
        roles = [
            make_recipient(ServiceRole.ACCESSOR, user_id="actor-user", role_id="actor-role"),
            make_recipient(ServiceRole.QUALIFYING_ACCESSOR, user_id="actor-user", role_id="other-role"),
        ]
        recipients_mock.identity_id_to_user_id.return_value = "actor-user"
        recipients_mock.resolve_by_role.return_value = roles

        handler = UserEmailAddressUpdatedHandler(make_context(ServiceRole.ACCESSOR), self.PAYLOAD, **handler_deps)
        await handler.run()

        [email] = handler.emails
        assert email.to == EmailRecipient(email="old@example.org")
        assert email.template_id == T.AP08_USER_EMAIL_ADDRESS_UPDATED
        assert email.preference_category is None
        [in_app] = handler.in_app
        assert in_app.user_role_ids == ("actor-role", "other-role")
        assert in_app.context.type == NotificationCategory.ADMIN

    @pytest.mark.asyncio
    async def test_unknown_identity_is_skipped(self, make_context, handler_deps, recipients_mock):
        recipients_mock.identity_id_to_user_id.return_value = None

        handler = UserEmailAddressUpdatedHandler(make_context(ServiceRole.ACCESSOR), self.PAYLOAD, **handler_deps)
        await handler.run()

        assert handler.emails == ()
        assert handler.in_app == ()


@pytest.mark.unit
class TestNewAccountHandler:
    @pytest.mark.asyncio
    async def test_sign_in_invitation(self, make_context, handler_deps):
        payload = NewSupportingAccountPayload(recipient_email="new.accessor@example.org")

        handler = NewAccountHandler(make_context(ServiceRole.ADMIN), payload, **handler_deps)
        await handler.run()

        [email] = handler.emails
        assert email.to == EmailRecipient(email="new.accessor@example.org")
        assert email.template_id == T.AP09_NEW_SUPPORTING_ACCOUNT
        assert email.params == {"sign_in_url": "https://innovation.test/signin"}
        assert handler.in_app == ()


@pytest.mark.unit
class TestNewAnnouncementHandler:
    @pytest.mark.asyncio
    async def test_users_of_targeted_roles(self, make_context, make_recipient, handler_deps, recipients_mock):
        users = [make_recipient(ServiceRole.ACCESSOR), make_recipient(ServiceRole.QUALIFYING_ACCESSOR)]
        recipients_mock.users_with_roles.return_value = users
        payload = NewAnnouncementPayload(
            announcement_id="ann-1",
            title="Service update",
            body="New features are live.",
            link_url="https://example.org/news",
            user_roles=[ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR],
        )

        handler = NewAnnouncementHandler(make_context(ServiceRole.ADMIN), payload, **handler_deps)
        await handler.run()

        recipients_mock.users_with_roles.assert_awaited_once_with(
            [ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR]
        )
        assert [e.to for e in handler.emails] == users
        assert all(e.preference_category == NotificationCategory.ADMIN for e in handler.emails)
        assert handler.emails[0].params == {
            "announcement_title": "Service update",
            "announcement_body": "New features are live.",
            "announcement_url": "https://example.org/news",
        }
        assert handler.in_app == ()

    def test_roles_required(self):
        with pytest.raises(ValidationError):
            NewAnnouncementPayload(announcement_id="ann-1", title="Empty", user_roles=[])
