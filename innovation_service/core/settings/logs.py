"""Logging settings (``LOG_`` prefix)."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """How and where the service writes its logs.

    Example:
        LOG_LEVEL=debug LOG_JSON=false LOG_FILE_PATH=logs/notifications.jsonl
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    service_name: str = Field(default="innovation-notifications", description="`service` field of JSON records")
    level: LogLevel = Field(default="INFO", description="Root logger level")
    # Aliased fields skip env_prefix, so the prefixed name is listed explicitly
    json_logs: bool = Field(
        default=True,
        validation_alias=AliasChoices("log_json", "json_logs"),
        description="JSON Lines output instead of key=value text",
    )

    console_enabled: bool = Field(default=True, description="Write records to stderr")
    file_path: Path | None = Field(default=None, description="Rotating log file; unset disables file output")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, description="Rotate the file past this size")
    file_backup_count: int = Field(default=5, ge=0, le=100, description="Rotated files kept")

    include_context: bool = Field(
        default=True,
        description="Copy the per-task log context (event_kind, notification_event) onto records",
    )
    capture_warnings: bool = Field(default=True, description="Route `warnings` through logging")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
