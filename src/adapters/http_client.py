"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and User-Agent for every Copyleaks call.
- Implements `core.interfaces.transport.Transport`, so the retry engine never
  touches httpx clients directly and tests can swap in a mocked transport.
"""

from __future__ import annotations

from typing import Any, Collection

import httpx

from core.config import AppSettings
from core.domain.request import RequestDescriptor
from core.services.request_executor import RETRYABLE_STATUSES


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the client-wide defaults.

    Why a builder:
    - Centralizes timeouts/headers so every endpoint behaves the same way.
    - `transport` lets tests plug in `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": settings.user_agent,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """Single-attempt transport on top of a shared `httpx.AsyncClient`.

    Responses whose status is in `error_statuses` are raised as
    `httpx.HTTPStatusError` (the retry engine decides what to do with them);
    every other response is returned as-is for classification.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        error_statuses: Collection[int] = RETRYABLE_STATUSES,
    ) -> None:
        self._client = client
        self.error_statuses = frozenset(error_statuses)

    async def send(self, request: RequestDescriptor, *, base_url: str) -> httpx.Response:
        url = f"{base_url.rstrip('/')}/{request.path.lstrip('/')}"
        kwargs: dict[str, Any] = {"headers": dict(request.headers)}
        if request.params:
            kwargs["params"] = dict(request.params)
        if request.body is not None:
            kwargs["json"] = request.body
        if request.timeout is not None:
            kwargs["timeout"] = request.timeout

        response = await self._client.request(request.method, url, **kwargs)
        if response.status_code in self.error_statuses:
            raise httpx.HTTPStatusError(
                f"Server returned {response.status_code} for {request.method} {url}",
                request=response.request,
                response=response,
            )
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
