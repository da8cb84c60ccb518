"""Unit tests for message thread handlers."""

from __future__ import annotations

import pytest

from innovation_service.features.notifications.enums import InnovationStatus, NotificationCategory, ServiceRole
from innovation_service.features.notifications.handlers import (
    ThreadAddFollowersHandler,
    ThreadCreationHandler,
    ThreadMessageCreationHandler,
)
from innovation_service.features.notifications.schemas import (
    ThreadAddFollowersPayload,
    ThreadCreationPayload,
    ThreadMessageCreationPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import InnovationInfo, ThreadInfo

INNOVATION = InnovationInfo(
    id="inn-1",
    name="Innovation",
    status=InnovationStatus.IN_PROGRESS,
    owner_id="owner-user",
    owner_identity_id="owner-identity",
)
PAYLOAD = ThreadCreationPayload(innovation_id="inn-1", thread_id="thr-1", message_id="msg-1")


@pytest.fixture
def thread_recipients(recipients_mock, make_recipient):
    owner = make_recipient(ServiceRole.INNOVATOR, user_id="owner-user")
    collaborator = make_recipient(ServiceRole.INNOVATOR, user_id="collaborator-user")
    recipients_mock.innovation_info.return_value = INNOVATION
    recipients_mock.thread_info.return_value = ThreadInfo(id="thr-1", subject="Subject")
    recipients_mock.resolve_owner_and_collaborators.return_value = ["owner-user", "collaborator-user"]
    recipients_mock.resolve_by_role.return_value = [owner, collaborator]
    return owner, collaborator


@pytest.mark.unit
class TestThreadCreationHandler:
    """Test who hears about a new thread."""

    @pytest.mark.asyncio
    async def test_thread_by_accessor_reaches_owner_and_collaborator(
        self, make_context, handler_deps, thread_recipients
    ):
        """Test that both innovators get an email and share one in-app."""
        owner, collaborator = thread_recipients
        context = make_context(ServiceRole.ACCESSOR, unit_name="Health Unit")

        handler = ThreadCreationHandler(context, PAYLOAD, **handler_deps)
        await handler.run()

        assert [e.to for e in handler.emails] == [owner, collaborator]
        email = handler.emails[0]
        assert email.template_id == T.THREAD_CREATION_TO_INNOVATOR_FROM_ASSIGNED_USER
        assert email.preference_category == NotificationCategory.MESSAGE
        assert email.params == {
            "accessor_name": "Name of actor-identity",
            "unit_name": "Health Unit",
            "thread_url": (
                "https://innovation.test/innovator/innovations/inn-1/threads/thr-1"
                "?dismissNotification=notification-1"
            ),
        }
        assert len(handler.in_app) == 1
        in_app = handler.in_app[0]
        assert in_app.user_role_ids == (owner.role_id, collaborator.role_id)
        assert in_app.context.detail == T.THREAD_CREATION
        assert in_app.context.id == "thr-1"
        assert in_app.params == {"subject": "Subject", "messageId": "msg-1"}

    @pytest.mark.asyncio
    async def test_thread_by_innovator_reaches_assigned_and_other_innovators(
        self, make_context, make_recipient, handler_deps, recipients_mock, thread_recipients
    ):
        """Test that assigned users and other innovators get their own templates."""
        owner, collaborator = thread_recipients
        accessor = make_recipient(ServiceRole.ACCESSOR)
        recipients_mock.resolve_assigned_recipients.return_value = [accessor]
        context = make_context(ServiceRole.INNOVATOR, identity_id=owner.identity_id, role_id=owner.role_id)

        handler = ThreadCreationHandler(context, PAYLOAD, **handler_deps)
        await handler.run()

        templates = [(e.template_id, e.to) for e in handler.emails]
        assert templates == [
            (T.THREAD_CREATION_TO_ASSIGNED_USERS, accessor),
            (T.THREAD_CREATION_TO_INNOVATOR_FROM_INNOVATOR, collaborator),
        ]
        assert "/accessor/innovations/inn-1/threads/thr-1" in handler.emails[0].params["thread_url"]
        assert [i.user_role_ids for i in handler.in_app] == [(accessor.role_id,), (collaborator.role_id,)]

    @pytest.mark.asyncio
    async def test_locked_innovators_get_nothing(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that locked innovators get neither email nor in-app."""
        locked = make_recipient(ServiceRole.INNOVATOR, is_active=False)
        recipients_mock.innovation_info.return_value = INNOVATION
        recipients_mock.thread_info.return_value = ThreadInfo(id="thr-1", subject="Subject")
        recipients_mock.resolve_owner_and_collaborators.return_value = [locked.user_id]
        recipients_mock.resolve_by_role.return_value = [locked]

        handler = ThreadCreationHandler(make_context(ServiceRole.ASSESSMENT), PAYLOAD, **handler_deps)
        await handler.run()

        assert handler.emails == ()
        assert handler.in_app == ()


@pytest.mark.unit
class TestThreadAddFollowersHandler:
    """Test notifications to new thread followers."""

    @pytest.mark.asyncio
    async def test_sender_shows_unit_for_accessors(
        self, make_context, make_recipient, handler_deps, recipients_mock
    ):
        """Test that the sender line carries the accessor's unit."""
        follower = make_recipient(ServiceRole.ACCESSOR)
        recipients_mock.innovation_info.return_value = INNOVATION
        recipients_mock.resolve_by_role_ids.return_value = [follower]
        payload = ThreadAddFollowersPayload(innovation_id="inn-1", thread_id="thr-1", new_followers_role_ids=["r"])

        handler = ThreadAddFollowersHandler(
            make_context(ServiceRole.ACCESSOR, unit_name="Unit A"), payload, **handler_deps
        )
        await handler.run()

        assert handler.emails[0].template_id == T.ME02_THREAD_ADD_FOLLOWERS
        assert handler.emails[0].params["sender"] == "Name of actor-identity (Unit A)"
        assert handler.in_app[0].user_role_ids == (follower.role_id,)

    @pytest.mark.asyncio
    async def test_no_new_followers(self, make_context, handler_deps, recipients_mock):
        """Test that an empty follower list is a no-op."""
        payload = ThreadAddFollowersPayload(innovation_id="inn-1", thread_id="thr-1")

        handler = ThreadAddFollowersHandler(make_context(), payload, **handler_deps)
        await handler.run()

        assert handler.emails == ()
        recipients_mock.innovation_info.assert_not_awaited()


@pytest.mark.unit
class TestThreadMessageCreationHandler:
    """Test notifications for a reply in an existing thread."""

    @pytest.mark.asyncio
    async def test_followers_except_sender(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that each follower role gets its own link and the sender is left out."""
        sender = make_recipient(ServiceRole.INNOVATOR, user_id="owner-user", identity_id="actor-identity")
        accessor = make_recipient(ServiceRole.ACCESSOR)
        assessor = make_recipient(ServiceRole.ASSESSMENT)
        recipients_mock.innovation_info.return_value = INNOVATION
        recipients_mock.resolve_thread_followers.return_value = [sender, accessor, assessor]
        context = make_context(ServiceRole.INNOVATOR, user_id="owner-user", role_id=sender.role_id)
        payload = ThreadMessageCreationPayload(innovation_id="inn-1", thread_id="thr-1", message_id="msg-2")

        handler = ThreadMessageCreationHandler(context, payload, **handler_deps)
        await handler.run()

        recipients_mock.resolve_thread_followers.assert_awaited_once_with("thr-1")
        assert [e.to for e in handler.emails] == [accessor, assessor]
        assert {e.template_id for e in handler.emails} == {T.ME03_THREAD_MESSAGE_CREATION}
        assert handler.emails[0].params["sender"] == "Name of actor-identity (Owner)"
        assert "/accessor/innovations/inn-1/threads/thr-1" in handler.emails[0].params["thread_url"]
        assert "/assessment/innovations/inn-1/threads/thr-1" in handler.emails[1].params["thread_url"]
        [in_app] = handler.in_app
        assert in_app.user_role_ids == (accessor.role_id, assessor.role_id)
        assert in_app.context.id == "msg-2"
        assert in_app.params["messageId"] == "msg-2"

    @pytest.mark.asyncio
    async def test_collaborator_sender_tag(self, make_context, make_recipient, handler_deps, recipients_mock):
        recipients_mock.innovation_info.return_value = INNOVATION
        recipients_mock.resolve_thread_followers.return_value = [make_recipient(ServiceRole.ACCESSOR)]
        payload = ThreadMessageCreationPayload(innovation_id="inn-1", thread_id="thr-1", message_id="msg-2")

        handler = ThreadMessageCreationHandler(
            make_context(ServiceRole.INNOVATOR, user_id="collaborator-user"), payload, **handler_deps
        )
        await handler.run()

        assert handler.emails[0].params["sender"] == "Name of actor-identity (Collaborator)"
