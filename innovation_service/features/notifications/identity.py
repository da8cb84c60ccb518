"""Identity provider access.

Display names and email addresses live in the external identity provider,
keyed by ``identity_id``. Handlers only need display names; the email
transport resolves addresses itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict, Field

from innovation_service.infra.external import BaseHTTPClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    from innovation_service.core.settings import IdentityProviderSettings

logger = logging.getLogger(__name__)


class IdentityUserInfo(BaseModel):
    """User as known to the identity provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identity_id: str = Field(..., alias="identityId")
    display_name: str = Field(default="", alias="displayName")
    email: str = ""
    is_active: bool = Field(default=True, alias="isActive")


class IdentityProvider(Protocol):
    async def get_user_info(self, identity_id: str) -> IdentityUserInfo | None:
        ...

    async def get_users_info(self, identity_ids: Sequence[str]) -> dict[str, IdentityUserInfo]:
        ...

    async def get_user_info_by_email(self, email: str) -> IdentityUserInfo | None:
        ...


class IdentityProviderClient(BaseHTTPClient):
    """HTTP client for the identity provider API.

    Usage:
        async with IdentityProviderClient.from_settings(get_identity_settings()) as client:
            info = await client.get_user_info("identity-123")
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        **kwargs,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            headers=headers,
            **kwargs,
        )

    @classmethod
    def from_settings(cls, settings: IdentityProviderSettings, **kwargs) -> IdentityProviderClient:
        return cls(
            base_url=settings.base_url,
            api_key=settings.api_key.get_secret_value() if settings.api_key else None,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            **kwargs,
        )

    async def get_user_info(self, identity_id: str) -> IdentityUserInfo | None:
        """Fetch one user; ``None`` when the identity provider does not know the id.

        Raises:
            httpx.HTTPStatusError: On any other non-2xx response.
        """
        response = await self.request("GET", f"/users/{identity_id}")
        if response.status_code == 404:
            logger.debug("Identity not found", extra={"identity_id": identity_id})
            return None
        response.raise_for_status()
        return IdentityUserInfo.model_validate(response.json())

    async def get_users_info(self, identity_ids: Sequence[str]) -> dict[str, IdentityUserInfo]:
        """Fetch several users in one call; unknown ids are absent from the result."""
        unique_ids = list(dict.fromkeys(identity_ids))
        if not unique_ids:
            return {}
        data = await self.post("/users/batch", json={"identityIds": unique_ids})
        users = [IdentityUserInfo.model_validate(item) for item in data]
        return {user.identity_id: user for user in users}

    async def get_user_info_by_email(self, email: str) -> IdentityUserInfo | None:
        """Look a user up by sign-in email; ``None`` when nobody is registered with it."""
        response = await self.request("GET", "/users", params={"email": email})
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return IdentityUserInfo.model_validate(response.json())
