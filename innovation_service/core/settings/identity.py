"""Identity provider client settings."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentityProviderSettings(BaseSettings):
    """Connection settings for the identity provider HTTP API.

    Environment variables use IDENTITY_ prefix.
    Example: IDENTITY_BASE_URL=https://identity.internal, IDENTITY_API_KEY=...
    """

    base_url: str = Field(
        default="http://localhost:8081",
        description="Base URL of the identity provider API.",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key sent as a bearer token.",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request on transient network errors.",
    )

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
