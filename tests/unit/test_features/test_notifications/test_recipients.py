"""Unit tests for recipient resolution against an in-memory database."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from innovation_service.core.exceptions import NotFoundError
from innovation_service.features.notifications.enums import (
    InnovationStatus,
    InnovationSupportStatus,
    NotificationCategory,
    NotificationPreferenceValue,
    ServiceRole,
)
from innovation_service.features.notifications.recipients import should_fire

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestShouldFire:
    """Test recurrent reminder scheduling."""

    @pytest.mark.parametrize(
        ("days", "threshold", "repeat", "expected"),
        [
            (30, 30, 0, True),
            (29, 30, 0, False),
            (31, 30, 0, False),
            (30, 30, 7, True),
            (37, 30, 7, True),
            (36, 30, 7, False),
            (23, 30, 7, False),
        ],
    )
    def test_should_fire(self, days, threshold, repeat, expected):
        """Test that reminders fire on the threshold and every repeat interval after."""
        assert should_fire(days, threshold, repeat) is expected


@pytest.mark.unit
class TestResolveByRole:
    """Test resolving users to role recipients."""

    @pytest.mark.asyncio
    async def test_single_user_returns_first_matching_role(self, seed, recipients_service):
        """Test that a single id resolves to one recipient or None."""
        user = await seed.user("identity-1")
        role = await seed.role(user, ServiceRole.INNOVATOR)

        recipient = await recipients_service.resolve_by_role(user.id, ServiceRole.INNOVATOR)
        missing = await recipients_service.resolve_by_role(user.id, ServiceRole.ACCESSOR)

        assert recipient is not None
        assert recipient.role_id == role.id
        assert recipient.identity_id == "identity-1"
        assert recipient.is_active is True
        assert missing is None

    @pytest.mark.asyncio
    async def test_batch_keeps_input_order(self, seed, recipients_service):
        """Test that batch results follow the order of the given user ids."""
        first = await seed.user("identity-a")
        second = await seed.user("identity-b")
        await seed.role(first, ServiceRole.INNOVATOR)
        await seed.role(second, ServiceRole.INNOVATOR)

        recipients = await recipients_service.resolve_by_role([second.id, first.id], ServiceRole.INNOVATOR)

        assert [r.user_id for r in recipients] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_locked_users_and_roles_are_flagged(self, seed, recipients_service):
        """Test that locked users and inactive roles are returned as inactive."""
        locked = await seed.user("identity-locked", locked=True)
        inactive_role_user = await seed.user("identity-inactive")
        await seed.role(locked, ServiceRole.INNOVATOR)
        await seed.role(inactive_role_user, ServiceRole.INNOVATOR, active=False)

        recipients = await recipients_service.resolve_by_role(
            [locked.id, inactive_role_user.id], ServiceRole.INNOVATOR
        )

        assert len(recipients) == 2
        assert all(r.is_active is False for r in recipients)

    @pytest.mark.asyncio
    async def test_deleted_users_excluded_by_default(self, seed, recipients_service):
        """Test that soft-deleted users only resolve with with_deleted."""
        user = await seed.user("identity-deleted", deleted=True)
        await seed.role(user, ServiceRole.INNOVATOR)

        assert await recipients_service.resolve_by_role(user.id, ServiceRole.INNOVATOR) is None
        assert await recipients_service.resolve_by_role(user.id, ServiceRole.INNOVATOR, with_deleted=True)

    @pytest.mark.asyncio
    async def test_filters_by_organisation_unit(self, seed, recipients_service):
        """Test that the unit filter selects the role of that unit only."""
        organisation = await seed.organisation("Org")
        unit_a = await seed.unit(organisation, "Unit A")
        unit_b = await seed.unit(organisation, "Unit B")
        user = await seed.user("identity-accessor")
        await seed.role(user, ServiceRole.ACCESSOR, unit=unit_a)
        role_b = await seed.role(user, ServiceRole.ACCESSOR, unit=unit_b)

        recipient = await recipients_service.resolve_by_role(
            user.id, ServiceRole.ACCESSOR, organisation_unit=unit_b.id
        )

        assert recipient is not None
        assert recipient.role_id == role_b.id
        assert recipient.organisation_unit_id == unit_b.id

    @pytest.mark.asyncio
    async def test_empty_input_returns_empty_list(self, recipients_service):
        """Test that an empty id list short-circuits."""
        assert await recipients_service.resolve_by_role([], ServiceRole.INNOVATOR) == []

    @pytest.mark.asyncio
    async def test_resolve_by_role_ids_skips_unknown(self, seed, recipients_service):
        """Test that explicit role ids resolve in order and unknown ids are dropped."""
        user = await seed.user("identity-1")
        first = await seed.role(user, ServiceRole.INNOVATOR)
        second = await seed.role(user, ServiceRole.ASSESSMENT)

        recipients = await recipients_service.resolve_by_role_ids([second.id, "unknown", first.id, second.id])

        assert [r.role_id for r in recipients] == [second.id, first.id]


@pytest.mark.unit
class TestInnovationLookups:
    """Test innovation, owner and collaborator queries."""

    @pytest.mark.asyncio
    async def test_innovation_info(self, seed, recipients_service):
        """Test that innovation info carries the owner's identity id."""
        owner = await seed.user("identity-owner")
        innovation = await seed.innovation("Innovation One", owner)

        info = await recipients_service.innovation_info(innovation.id)

        assert info.name == "Innovation One"
        assert info.owner_id == owner.id
        assert info.owner_identity_id == "identity-owner"

    @pytest.mark.asyncio
    async def test_innovation_info_not_found(self, recipients_service):
        """Test that an unknown innovation raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await recipients_service.innovation_info("missing")

    @pytest.mark.asyncio
    async def test_owner_first_then_active_collaborators(self, seed, recipients_service):
        """Test that the owner leads and pending collaborators need only_active=False."""
        owner = await seed.user("identity-owner")
        active = await seed.user("identity-active")
        pending = await seed.user("identity-pending")
        innovation = await seed.innovation("Innovation", owner)
        await seed.collaborator(innovation, "active@example.org", user=active)
        await seed.collaborator(innovation, "pending@example.org", user=pending, status="PENDING")
        await seed.collaborator(innovation, "invited@example.org")

        only_active = await recipients_service.resolve_owner_and_collaborators(innovation.id)
        with_pending = await recipients_service.resolve_owner_and_collaborators(innovation.id, only_active=False)

        assert only_active == [owner.id, active.id]
        assert with_pending == [owner.id, active.id, pending.id]

    @pytest.mark.asyncio
    async def test_shared_units_excludes_unshared_and_inactive(self, seed, recipients_service):
        """Test that only active units of shared organisations are returned."""
        owner = await seed.user("identity-owner")
        innovation = await seed.innovation("Innovation", owner)
        shared = await seed.organisation("Shared Org")
        unshared = await seed.organisation("Unshared Org")
        unit_a = await seed.unit(shared, "Unit A")
        await seed.unit(shared, "Unit Inactive", inactive=True)
        await seed.unit(unshared, "Unit B")
        await seed.share(innovation, shared)

        units = await recipients_service.innovation_shared_units(innovation.id)

        assert [u.unit_id for u in units] == [unit_a.id]
        assert units[0].organisation_name == "Shared Org"

    @pytest.mark.asyncio
    async def test_organisation_info_not_found(self, recipients_service):
        """Test that an unknown organisation raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await recipients_service.organisation_info("missing")


@pytest.mark.unit
class TestAssignedRecipients:
    """Test users assigned to supports."""

    @pytest.mark.asyncio
    async def test_assigned_recipients_only_count_support_unit_roles(self, seed, recipients_service):
        """Test that an assignment through a role of another unit is ignored."""
        owner = await seed.user("identity-owner")
        innovation = await seed.innovation("Innovation", owner)
        organisation = await seed.organisation("Org")
        unit_a = await seed.unit(organisation, "Unit A")
        unit_b = await seed.unit(organisation, "Unit B")
        accessor = await seed.user("identity-accessor")
        role_a = await seed.role(accessor, ServiceRole.ACCESSOR, unit=unit_a)
        role_b = await seed.role(accessor, ServiceRole.ACCESSOR, unit=unit_b)
        await seed.support(innovation, unit_a, InnovationSupportStatus.ENGAGING, assigned=[role_a, role_b])

        recipients = await recipients_service.resolve_assigned_recipients(innovation.id)

        assert [r.role_id for r in recipients] == [role_a.id]

    @pytest.mark.asyncio
    async def test_locked_assigned_users_are_excluded(self, seed, recipients_service):
        """Test that locked users never count as assigned."""
        owner = await seed.user("identity-owner")
        innovation = await seed.innovation("Innovation", owner)
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        locked = await seed.user("identity-locked", locked=True)
        role = await seed.role(locked, ServiceRole.ACCESSOR, unit=unit)
        support = await seed.support(innovation, unit, InnovationSupportStatus.ENGAGING, assigned=[role])

        assert await recipients_service.support_assigned_recipients(support.id) == []

    @pytest.mark.asyncio
    async def test_owned_innovations_with_assigned(self, seed, recipients_service):
        """Test that each owned innovation lists its own assigned users."""
        owner = await seed.user("identity-owner")
        first = await seed.innovation("First", owner)
        second = await seed.innovation("Second", owner)
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        accessor = await seed.user("identity-accessor")
        role = await seed.role(accessor, ServiceRole.ACCESSOR, unit=unit)
        await seed.support(first, unit, InnovationSupportStatus.ENGAGING, assigned=[role])

        owned = await recipients_service.user_innovations_with_assigned_recipients(owner.id)

        assert [i.id for i in owned] == [first.id, second.id]
        assert [r.role_id for r in owned[0].assigned] == [role.id]
        assert owned[1].assigned == []


@pytest.mark.unit
class TestIdleSupports:
    """Test idle support detection."""

    @pytest.mark.asyncio
    async def test_threshold_day_is_included_and_day_before_is_not(self, seed, recipients_service):
        """Test that a support idle exactly the threshold fires and one a day short does not."""
        owner = await seed.user("identity-owner")
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        due = await seed.support(
            await seed.innovation("Due", owner),
            unit,
            InnovationSupportStatus.ENGAGING,
            updated_at=NOW - timedelta(days=30),
        )
        await seed.support(
            await seed.innovation("Not yet", owner),
            unit,
            InnovationSupportStatus.ENGAGING,
            updated_at=NOW - timedelta(days=29),
        )

        idle = await recipients_service.idle_supports(30, [InnovationSupportStatus.ENGAGING], 0, now=NOW)

        assert [s.support_id for s in idle] == [due.id]
        assert idle[0].days_idle == 30
        assert idle[0].innovation_name == "Due"

    @pytest.mark.asyncio
    async def test_other_statuses_are_ignored(self, seed, recipients_service):
        """Test that only the requested statuses are considered."""
        owner = await seed.user("identity-owner")
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        waiting = await seed.support(
            await seed.innovation("Waiting", owner),
            unit,
            InnovationSupportStatus.WAITING,
            updated_at=NOW - timedelta(days=30),
        )

        engaging = await recipients_service.idle_supports(30, [InnovationSupportStatus.ENGAGING], now=NOW)
        waiting_idle = await recipients_service.idle_waiting_supports(30, now=NOW)

        assert engaging == []
        assert [s.support_id for s in waiting_idle] == [waiting.id]


@pytest.mark.unit
class TestEmailPreferences:
    """Test stored email preference lookup."""

    @pytest.mark.asyncio
    async def test_preferences_grouped_by_role(self, seed, recipients_service):
        """Test that stored preferences are keyed by role and category."""
        user = await seed.user("identity-1")
        role = await seed.role(user, ServiceRole.INNOVATOR)
        other = await seed.role(user, ServiceRole.ASSESSMENT)
        await seed.preference(role, NotificationCategory.MESSAGE, NotificationPreferenceValue.NO)

        preferences = await recipients_service.get_email_preferences([role.id, other.id])

        assert preferences == {role.id: {NotificationCategory.MESSAGE: NotificationPreferenceValue.NO}}


@pytest.mark.unit
class TestUserLookups:
    """Test identity mapping and collaboration queries."""

    @pytest.mark.asyncio
    async def test_identity_and_user_ids_map_both_ways(self, seed, recipients_service):
        user = await seed.user("identity-1", deleted=True)

        assert await recipients_service.identity_id_to_user_id("identity-1") == user.id
        assert await recipients_service.user_id_to_identity_id(user.id) == "identity-1"
        assert await recipients_service.identity_id_to_user_id("unknown") is None
        assert await recipients_service.user_id_to_identity_id("unknown") is None

    @pytest.mark.asyncio
    async def test_user_collaborations_pending_and_active_only(self, seed, recipients_service):
        """Test that declined collaborations are not listed."""
        owner = await seed.user("identity-owner")
        collaborator = await seed.user("identity-collaborator")
        active = await seed.innovation("Active", owner)
        pending = await seed.innovation("Pending", owner)
        declined = await seed.innovation("Declined", owner)
        await seed.collaborator(active, "c@example.org", user=collaborator)
        await seed.collaborator(pending, "c@example.org", user=collaborator, status="PENDING")
        await seed.collaborator(declined, "c@example.org", user=collaborator, status="DECLINED")

        names = await recipients_service.user_collaborations(collaborator.id)

        assert names == ["Active", "Pending"]


@pytest.mark.unit
class TestThreadFollowers:
    """Test who follows a thread."""

    @pytest.fixture
    async def thread_with_writers(self, seed):
        owner = await seed.user("identity-a")
        innovation = await seed.innovation("Innovation", owner)
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        ra = await seed.role(owner, ServiceRole.INNOVATOR)
        rb = await seed.role(await seed.user("identity-b"), ServiceRole.ACCESSOR, unit=unit)
        rc = await seed.role(await seed.user("identity-c", locked=True), ServiceRole.ACCESSOR, unit=unit)
        thread = await seed.thread(innovation, ra)
        await seed.message(thread, ra, created_at=NOW - timedelta(minutes=4))
        await seed.message(thread, rb, created_at=NOW - timedelta(minutes=3))
        await seed.message(thread, ra, created_at=NOW - timedelta(minutes=2))
        await seed.message(thread, rc, created_at=NOW - timedelta(minutes=1))
        return thread, ra, rb, rc

    @pytest.mark.asyncio
    async def test_distinct_writers_in_order(self, recipients_service, thread_with_writers):
        """Test that each writer appears once, in first-message order, locked ones dropped."""
        thread, ra, rb, _ = thread_with_writers

        followers = await recipients_service.resolve_thread_followers(thread.id)

        assert [f.role_id for f in followers] == [ra.id, rb.id]

    @pytest.mark.asyncio
    async def test_include_locked(self, recipients_service, thread_with_writers):
        thread, ra, rb, rc = thread_with_writers

        followers = await recipients_service.resolve_thread_followers(thread.id, include_locked=True)

        assert [f.role_id for f in followers] == [ra.id, rb.id, rc.id]
        assert followers[2].is_active is False

    @pytest.mark.asyncio
    async def test_deleted_messages_do_not_follow(self, seed, recipients_service):
        owner = await seed.user("identity-a")
        ra = await seed.role(owner, ServiceRole.INNOVATOR)
        rb = await seed.role(await seed.user("identity-b"), ServiceRole.ASSESSMENT)
        thread = await seed.thread(await seed.innovation("Innovation", owner), ra)
        await seed.message(thread, ra)
        await seed.message(thread, rb, deleted=True)

        followers = await recipients_service.resolve_thread_followers(thread.id)

        assert [f.role_id for f in followers] == [ra.id]


@pytest.mark.unit
class TestSoftDeletedRows:
    """Test that soft-deleted rows never count."""

    @pytest.mark.asyncio
    async def test_deleted_message_does_not_reset_idle_clock(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        innovation = await seed.innovation("Idle", owner)
        support = await seed.support(
            innovation, unit, InnovationSupportStatus.ENGAGING, updated_at=NOW - timedelta(days=30)
        )
        accessor = await seed.role(await seed.user("identity-accessor"), ServiceRole.ACCESSOR, unit=unit)
        thread = await seed.thread(innovation, accessor)
        await seed.message(thread, accessor, created_at=NOW - timedelta(days=1), deleted=True)

        idle = await recipients_service.idle_supports(30, [InnovationSupportStatus.ENGAGING], now=NOW)

        assert [s.support_id for s in idle] == [support.id]

    @pytest.mark.asyncio
    async def test_live_message_resets_idle_clock(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        innovation = await seed.innovation("Active", owner)
        await seed.support(innovation, unit, InnovationSupportStatus.ENGAGING, updated_at=NOW - timedelta(days=30))
        accessor = await seed.role(await seed.user("identity-accessor"), ServiceRole.ACCESSOR, unit=unit)
        thread = await seed.thread(innovation, accessor)
        await seed.message(thread, accessor, created_at=NOW - timedelta(days=1))

        assert await recipients_service.idle_supports(30, [InnovationSupportStatus.ENGAGING], now=NOW) == []

    @pytest.mark.asyncio
    async def test_qualifying_accessors_of_deleted_organisation(self, seed, recipients_service):
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        await seed.role(await seed.user("identity-qa"), ServiceRole.QUALIFYING_ACCESSOR, unit=unit)
        assert len(await recipients_service.resolve_unit_qualifying_accessors([unit.id])) == 1

        organisation.deleted_at = NOW
        await seed.session.commit()

        assert await recipients_service.resolve_unit_qualifying_accessors([unit.id]) == []


@pytest.mark.unit
class TestIncompleteInnovations:
    """Test detection of innovations never submitted."""

    @pytest.mark.asyncio
    async def test_only_created_innovations_past_threshold(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        due = await seed.innovation("Due", owner, updated_at=NOW - timedelta(days=30))
        await seed.innovation("Recent", owner, updated_at=NOW - timedelta(days=29))
        await seed.innovation("Submitted", owner, status="IN_PROGRESS", updated_at=NOW - timedelta(days=30))
        await seed.innovation("Orphan", None, updated_at=NOW - timedelta(days=30))

        incomplete = await recipients_service.incomplete_innovations(30, now=NOW)

        assert [(i.innovation_id, i.owner_id, i.days_idle) for i in incomplete] == [(due.id, owner.id, 30)]

    @pytest.mark.asyncio
    async def test_repeat_interval(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        await seed.innovation("Sixty days", owner, updated_at=NOW - timedelta(days=60))
        await seed.innovation("Forty five days", owner, updated_at=NOW - timedelta(days=45))

        incomplete = await recipients_service.incomplete_innovations(30, 30, now=NOW)

        assert [i.innovation_name for i in incomplete] == ["Sixty days"]

    @pytest.mark.asyncio
    async def test_deleted_owner_is_skipped(self, seed, recipients_service):
        owner = await seed.user("identity-owner", deleted=True)
        await seed.innovation("Due", owner, updated_at=NOW - timedelta(days=30))

        assert await recipients_service.incomplete_innovations(30, now=NOW) == []


@pytest.mark.unit
class TestUsersWithRoles:
    @pytest.mark.asyncio
    async def test_one_active_role_per_user(self, seed, recipients_service):
        """Test that each user appears once under their oldest matching role."""
        organisation = await seed.organisation("Org")
        unit = await seed.unit(organisation, "Unit")
        both = await seed.user("identity-both")
        accessor_role = await seed.role(both, ServiceRole.ACCESSOR, unit=unit, created_at=NOW - timedelta(days=2))
        await seed.role(both, ServiceRole.QUALIFYING_ACCESSOR, unit=unit, created_at=NOW - timedelta(days=1))
        await seed.role(await seed.user("identity-locked", locked=True), ServiceRole.ACCESSOR, unit=unit)
        await seed.role(await seed.user("identity-inactive"), ServiceRole.ACCESSOR, unit=unit, active=False)
        await seed.role(await seed.user("identity-innovator"), ServiceRole.INNOVATOR)

        users = await recipients_service.users_with_roles([ServiceRole.ACCESSOR, ServiceRole.QUALIFYING_ACCESSOR])

        assert [(u.user_id, u.role_id) for u in users] == [(both.id, accessor_role.id)]
        assert await recipients_service.users_with_roles([]) == []


@pytest.mark.unit
class TestInnovationsWithoutSupport:
    """Test detection of in-progress innovations nobody is supporting."""

    @pytest.mark.asyncio
    async def test_idle_clock_and_archive_date(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        unit = await seed.unit(await seed.organisation("Org"), "Unit")
        never = await seed.innovation(
            "Never supported", owner, status=InnovationStatus.IN_PROGRESS, updated_at=NOW - timedelta(days=30)
        )
        closed = await seed.innovation("Closed", owner, status=InnovationStatus.IN_PROGRESS, updated_at=NOW)
        await seed.support(closed, unit, InnovationSupportStatus.CLOSED, updated_at=NOW - timedelta(days=30))
        engaging = await seed.innovation(
            "Engaging", owner, status=InnovationStatus.IN_PROGRESS, updated_at=NOW - timedelta(days=30)
        )
        await seed.support(engaging, unit, InnovationSupportStatus.ENGAGING, updated_at=NOW - timedelta(days=30))
        await seed.innovation("Not submitted", owner, updated_at=NOW - timedelta(days=30))

        idle = await recipients_service.innovations_without_support(30, 0, 180, now=NOW)

        assert {i.innovation_id for i in idle} == {never.id, closed.id}
        assert {i.days_idle for i in idle} == {30}
        assert {i.expected_archive_date for i in idle} == {NOW + timedelta(days=150)}

    @pytest.mark.asyncio
    async def test_repeat_interval(self, seed, recipients_service):
        owner = await seed.user("identity-owner")
        await seed.innovation("Sixty", owner, status=InnovationStatus.IN_PROGRESS, updated_at=NOW - timedelta(days=60))
        await seed.innovation("Fifty", owner, status=InnovationStatus.IN_PROGRESS, updated_at=NOW - timedelta(days=50))

        idle = await recipients_service.innovations_without_support(30, 30, now=NOW)

        assert [i.innovation_name for i in idle] == ["Sixty"]


@pytest.mark.unit
class TestSuggestedUnits:
    """Test suggested units that have not opened a support."""

    @pytest.fixture
    async def suggestions(self, seed):
        owner = await seed.user("identity-owner")
        shared_org = await seed.organisation("Shared")
        other_org = await seed.organisation("Not shared")
        waiting_unit = await seed.unit(shared_org, "Waiting unit")
        supporting_unit = await seed.unit(shared_org, "Supporting unit")
        hidden_unit = await seed.unit(other_org, "Hidden unit")
        innovation = await seed.innovation("Innovation", owner, status=InnovationStatus.IN_PROGRESS)
        await seed.share(innovation, shared_org)
        await seed.support(innovation, supporting_unit, InnovationSupportStatus.ENGAGING)
        await seed.suggestion(
            innovation, [waiting_unit, supporting_unit, hidden_unit], created_at=NOW - timedelta(days=7)
        )
        await seed.suggestion(
            innovation, [waiting_unit], log_type="ASSESSMENT_SUGGESTION", created_at=NOW - timedelta(days=2)
        )
        return innovation, shared_org, other_org, waiting_unit

    @pytest.mark.asyncio
    async def test_only_shared_units_without_support(self, recipients_service, suggestions):
        """Test that the first suggestion dates a unit and hidden or supporting units are left out."""
        innovation, shared_org, other_org, waiting_unit = suggestions

        suggested = await recipients_service.suggested_units_without_support(innovation_id=innovation.id)
        in_other = await recipients_service.suggested_units_without_support(organisation_ids=[other_org.id])

        assert [(s.innovation_id, s.organisation_unit_id) for s in suggested] == [(innovation.id, waiting_unit.id)]
        assert suggested[0].suggested_at == NOW - timedelta(days=7)
        assert in_other == []

    @pytest.mark.asyncio
    async def test_unit_kpi_thresholds(self, recipients_service, suggestions):
        innovation, _, _, waiting_unit = suggestions

        reminders = await recipients_service.unit_kpi_suggestions(7, now=NOW)
        overdue = await recipients_service.unit_kpi_suggestions(14, now=NOW)

        assert [s.innovation_id for s in reminders[waiting_unit.id]] == [innovation.id]
        assert list(reminders) == [waiting_unit.id]
        assert overdue == {}
