"""Pooled httpx client shared by upstream integrations.

Transient failures (timeouts, dropped connections, 502/503/504) are
retried with exponential backoff; every other response is handed back to
the caller unchecked.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from innovation_service.core.exceptions import ServiceUnavailableException
from innovation_service.utils.retry import retry

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({502, 503, 504})

_TRANSIENT = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    ServiceUnavailableException,
)


class BaseHTTPClient:
    """Async HTTP client with connection pooling and retries.

    Subclasses add typed methods on top of ``request``:

        class IdentityProviderClient(BaseHTTPClient):
            async def get_user_info(self, identity_id: str) -> IdentityUserInfo | None:
                response = await self.request("GET", f"/users/{identity_id}")
                ...

    Args:
        base_url: Root URL every path is joined to.
        timeout: Per-request timeout in seconds.
        max_retries: Attempts per request, first one included.
        headers: Sent with every request.
        transport: Replaces the network transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_delay: float = 0.5,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
        )
        self._send_with_retry = retry(
            max_attempts=max_retries,
            initial_delay=retry_delay,
            max_delay=10.0,
            exceptions=_TRANSIENT,
        )(self._send)

    async def __aenter__(self) -> BaseHTTPClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def _send(self, method: str, path: str, kwargs: dict[str, Any]) -> httpx.Response:
        response = await self.client.request(method, path, **kwargs)
        if response.status_code in RETRYABLE_STATUSES:
            raise ServiceUnavailableException(
                detail=f"{self.base_url} answered {response.status_code}",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
        return response

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request and return the response without status checks.

        Callers map statuses themselves (404 to "absent", for instance) and
        then call ``raise_for_status``.

        Raises:
            RetryError: Every attempt failed with a transient error.
        """
        response = await self._send_with_retry(method, path, kwargs)
        logger.debug(
            f"{method} {path} -> {response.status_code}",
            extra={"path": path, "status_code": response.status_code},
        )
        return response

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        response = await self.request("GET", path, params=params)
        response.raise_for_status()
        return response.json()

    async def post(self, path: str, json: Any = None) -> Any:
        """POST a JSON body to ``path`` and decode the JSON reply.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        response = await self.request("POST", path, json=json)
        response.raise_for_status()
        return response.json()
