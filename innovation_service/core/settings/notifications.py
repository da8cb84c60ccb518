"""Notification engine settings.

Thresholds drive the recurrent notifications (idle supports, incomplete
innovation records, unit KPIs). A ``*_repeat_days`` of 0 fires once when the
threshold is crossed; a positive value repeats every N days after it.
"""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotificationSettings(BaseSettings):
    """Notification dispatch settings.

    Environment variables use NOTIFICATIONS_ prefix.
    Example: NOTIFICATIONS_WEB_BASE_TRANSACTIONAL_URL=https://innovation.example.org
    """

    web_base_transactional_url: str = Field(
        default="http://localhost:4200",
        description="Frontend base URL used to build deep links in notifications.",
    )

    idle_support_days: int = Field(
        default=90,
        ge=1,
        description="Days without activity before an engaging support is reported as idle.",
    )
    idle_support_repeat_days: int = Field(
        default=0,
        ge=0,
        description="Repeat interval for idle engaging supports (0 = once).",
    )

    idle_waiting_support_days: int = Field(
        default=30,
        ge=1,
        description="Days without activity before a waiting support is reported as idle.",
    )
    idle_waiting_support_repeat_days: int = Field(
        default=0,
        ge=0,
        description="Repeat interval for idle waiting supports (0 = once).",
    )

    incomplete_record_days: int = Field(
        default=30,
        ge=1,
        description="Days after creation before an unsubmitted innovation record is flagged.",
    )
    incomplete_record_repeat_days: int = Field(
        default=30,
        ge=0,
        description="Repeat interval for incomplete record reminders (0 = once).",
    )

    idle_innovator_support_days: int = Field(
        default=30,
        ge=1,
        description="Days without an engaging or waiting support before innovators are reminded.",
    )
    idle_innovator_support_repeat_days: int = Field(
        default=30,
        ge=0,
        description="Repeat interval for innovators without support (0 = once).",
    )
    innovation_auto_archive_days: int = Field(
        default=180,
        ge=1,
        description="Days without support after which an innovation is archived; shown to innovators.",
    )

    unit_kpi_reminder_days: int = Field(
        default=7,
        ge=1,
        description="Days after a suggestion before the suggested unit is reminded to act.",
    )
    unit_kpi_overdue_days: int = Field(
        default=14,
        ge=1,
        description="Days after a suggestion before the suggested unit is told it is overdue.",
    )

    @model_validator(mode="after")
    def overdue_after_reminder(self) -> NotificationSettings:
        if self.unit_kpi_overdue_days <= self.unit_kpi_reminder_days:
            raise ValueError("unit_kpi_overdue_days must be greater than unit_kpi_reminder_days")
        return self

    @field_validator("web_base_transactional_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
