"""
HTTP transport shared by all webhook strategies.

Wraps one httpx.AsyncClient so connection pooling and timeouts are
configured in a single place. Transport errors (connect, DNS, timeout)
propagate as httpx exceptions; strategies turn them into delivery errors.
"""

from typing import Mapping, Optional, Any

import httpx


USER_AGENT = "AlertNotify/1.0"

JSON_HEADERS = {
    "Content-Type": "application/json",
}


class TransportClient:
    """
    Thin async HTTP client used by channel strategies.

    Safe for concurrent use: every call builds its own request and response.
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"User-Agent": USER_AGENT},
        )

    async def post(
        self,
        url: str,
        *,
        content: Optional[str] = None,
        json: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """POST to ``url`` and return the raw response without raising on status."""
        return await self._client.post(
            url,
            content=content,
            json=json,
            headers=dict(headers) if headers else None,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "TransportClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
