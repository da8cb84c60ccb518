"""Unit tests for scheduler-raised reminders."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from innovation_service.core.settings import NotificationSettings
from innovation_service.features.notifications.enums import (
    InnovationSupportStatus,
    NotificationCategory,
    ServiceRole,
)
from innovation_service.features.notifications.handlers import (
    IdleSupportAccessorHandler,
    IdleSupportInnovatorHandler,
    IncompleteInnovationRecordHandler,
    UnitKPIHandler,
)
from innovation_service.features.notifications.schemas import EmptyPayload
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import (
    IdleSupport,
    IncompleteInnovation,
    SuggestedUnit,
    UnsupportedInnovation,
)

SETTINGS = NotificationSettings(
    idle_support_days=90,
    idle_support_repeat_days=7,
    idle_waiting_support_days=30,
    idle_waiting_support_repeat_days=0,
    incomplete_record_days=30,
    incomplete_record_repeat_days=30,
    idle_innovator_support_days=30,
    idle_innovator_support_repeat_days=15,
    innovation_auto_archive_days=180,
    unit_kpi_reminder_days=7,
    unit_kpi_overdue_days=14,
)


def _idle(support_id: str, status: InnovationSupportStatus) -> IdleSupport:
    return IdleSupport(
        support_id=support_id,
        innovation_id="inn-1",
        innovation_name="Innovation",
        organisation_unit_id="unit-1",
        status=status,
        last_activity_at=datetime(2026, 1, 1, tzinfo=UTC),
        days_idle=90,
    )


@pytest.mark.unit
class TestIncompleteInnovationRecordHandler:
    @pytest.mark.asyncio
    async def test_owners_reminded(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that each incomplete innovation's owner gets a reminder."""
        owner = make_recipient(ServiceRole.INNOVATOR, user_id="owner-user")
        recipients_mock.incomplete_innovations.return_value = [
            IncompleteInnovation(innovation_id="inn-1", innovation_name="Draft", owner_id="owner-user", days_idle=30)
        ]
        recipients_mock.resolve_by_role.return_value = owner

        handler = IncompleteInnovationRecordHandler(
            make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps
        )
        await handler.run()

        recipients_mock.incomplete_innovations.assert_awaited_once_with(30, 30)
        email = handler.emails[0]
        assert email.to == owner
        assert email.template_id == T.AU01_INNOVATOR_INCOMPLETE_RECORD
        assert email.preference_category == NotificationCategory.AUTOMATIC
        assert "/innovator/innovations/inn-1/record" in email.params["innovation_record_url"]
        assert handler.in_app[0].context.id == "inn-1"

    @pytest.mark.asyncio
    async def test_owner_without_role_is_skipped(self, make_context, handler_deps, recipients_mock):
        recipients_mock.incomplete_innovations.return_value = [
            IncompleteInnovation(innovation_id="inn-1", innovation_name="Draft", owner_id="owner-user", days_idle=30)
        ]
        recipients_mock.resolve_by_role.return_value = None

        handler = IncompleteInnovationRecordHandler(
            make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps
        )
        await handler.run()

        assert handler.emails == ()


@pytest.mark.unit
class TestIdleSupportAccessorHandler:
    @pytest.mark.asyncio
    async def test_engaging_and_waiting_supports(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that engaging and waiting supports use their own thresholds and templates."""
        accessor = make_recipient(ServiceRole.ACCESSOR, unit_id="unit-1")
        recipients_mock.idle_supports.return_value = [_idle("support-1", InnovationSupportStatus.ENGAGING)]
        recipients_mock.idle_waiting_supports.return_value = [_idle("support-2", InnovationSupportStatus.WAITING)]
        recipients_mock.support_assigned_recipients.return_value = [accessor]

        handler = IdleSupportAccessorHandler(
            make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps
        )
        await handler.run()

        recipients_mock.idle_supports.assert_awaited_once_with(90, [InnovationSupportStatus.ENGAGING], 7)
        recipients_mock.idle_waiting_supports.assert_awaited_once_with(30, 0)
        assert [e.template_id for e in handler.emails] == [
            T.AU02_ACCESSOR_IDLE_ENGAGING_SUPPORT,
            T.AU06_ACCESSOR_IDLE_WAITING,
        ]
        engaging = handler.emails[0].params
        assert "/accessor/innovations/inn-1/support/support-1" in engaging["support_status_url"]
        assert engaging["support_summary_url"].endswith("unitId=unit-1")
        assert handler.in_app[0].params == {
            "innovationName": "Innovation",
            "supportId": "support-1",
            "unitId": "unit-1",
        }
        assert handler.in_app[1].params == {"innovationName": "Innovation", "supportId": "support-2"}

    @pytest.mark.asyncio
    async def test_settings_default_to_environment(self, make_context, handler_deps, monkeypatch):
        """Test that thresholds come from the cached settings when none are given."""
        from innovation_service.core.settings import clear_all_caches

        monkeypatch.setenv("NOTIFICATIONS_IDLE_SUPPORT_DAYS", "45")
        clear_all_caches()
        try:
            handler = IdleSupportAccessorHandler(make_context(ServiceRole.ADMIN), EmptyPayload(), **handler_deps)
            assert handler.settings.idle_support_days == 45
        finally:
            monkeypatch.delenv("NOTIFICATIONS_IDLE_SUPPORT_DAYS")
            clear_all_caches()


@pytest.mark.unit
class TestIdleSupportInnovatorHandler:
    @pytest.mark.asyncio
    async def test_innovators_warned_of_archive_date(
        self, make_context, make_recipient, handler_deps, recipients_mock
    ):
        innovator = make_recipient(ServiceRole.INNOVATOR)
        recipients_mock.innovations_without_support.return_value = [
            UnsupportedInnovation(
                innovation_id="inn-1",
                innovation_name="Innovation",
                last_support_at=datetime(2026, 1, 1, tzinfo=UTC),
                days_idle=30,
                expected_archive_date=datetime(2026, 6, 30, tzinfo=UTC),
            )
        ]
        recipients_mock.resolve_owner_and_collaborators.return_value = [innovator.user_id]
        recipients_mock.resolve_by_role.return_value = [innovator]

        handler = IdleSupportInnovatorHandler(
            make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps
        )
        await handler.run()

        recipients_mock.innovations_without_support.assert_awaited_once_with(30, 15, 180)
        [email] = handler.emails
        assert email.to == innovator
        assert email.template_id == T.AU03_INNOVATOR_IDLE_SUPPORT
        assert email.preference_category == NotificationCategory.AUTOMATIC
        assert email.params["expected_archive_date"] == "30/06/2026"
        assert "/innovator/innovations/inn-1/record" in email.params["innovation_record_url"]
        assert "/innovator/innovations/inn-1/overview" in email.params["innovation_overview_url"]
        [in_app] = handler.in_app
        assert in_app.context.id == "inn-1"
        assert in_app.params == {"innovationName": "Innovation", "expectedArchiveDate": "30/06/2026"}

    @pytest.mark.asyncio
    async def test_nothing_idle(self, make_context, handler_deps, recipients_mock):
        recipients_mock.innovations_without_support.return_value = []

        handler = IdleSupportInnovatorHandler(
            make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps
        )
        await handler.run()

        assert handler.emails == ()
        assert handler.in_app == ()


def _suggested(innovation_id: str, unit_id: str) -> SuggestedUnit:
    return SuggestedUnit(
        innovation_id=innovation_id,
        innovation_name=f"Innovation {innovation_id}",
        organisation_unit_id=unit_id,
        suggested_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.mark.unit
class TestUnitKPIHandler:
    @pytest.mark.asyncio
    async def test_reminder_and_overdue(self, make_context, make_recipient, handler_deps, recipients_mock):
        """Test that each suggestion reaches its unit's QAs, who are looked up once per unit."""
        qa = make_recipient(ServiceRole.QUALIFYING_ACCESSOR, unit_id="unit-1")
        recipients_mock.unit_kpi_suggestions.side_effect = [
            {"unit-1": [_suggested("inn-1", "unit-1"), _suggested("inn-2", "unit-1")]},
            {"unit-1": [_suggested("inn-3", "unit-1")]},
        ]
        recipients_mock.resolve_unit_qualifying_accessors.return_value = [qa]

        handler = UnitKPIHandler(make_context(ServiceRole.ADMIN), EmptyPayload(), settings=SETTINGS, **handler_deps)
        await handler.run()

        assert [c.args for c in recipients_mock.unit_kpi_suggestions.await_args_list] == [(7,), (14,)]
        recipients_mock.resolve_unit_qualifying_accessors.assert_awaited_once_with(["unit-1"])
        assert [(e.template_id, e.params["innovation_name"]) for e in handler.emails] == [
            (T.AU04_SUPPORT_KPI_REMINDER, "Innovation inn-1"),
            (T.AU04_SUPPORT_KPI_REMINDER, "Innovation inn-2"),
            (T.AU05_SUPPORT_KPI_OVERDUE, "Innovation inn-3"),
        ]
        assert all(e.to == qa for e in handler.emails)
        assert "/accessor/innovations/inn-1/overview" in handler.emails[0].params["innovation_overview_url"]
        assert [i.context.id for i in handler.in_app] == ["inn-1", "inn-2", "inn-3"]
        assert handler.in_app[2].context.detail == T.AU05_SUPPORT_KPI_OVERDUE

    def test_overdue_must_follow_reminder(self):
        with pytest.raises(ValidationError):
            NotificationSettings(unit_kpi_reminder_days=14, unit_kpi_overdue_days=7)
