"""Transport contract used by the retry engine.

Why Protocol:
- A structural contract (duck typing) without rigid inheritance.
- The retry engine can be exercised with in-memory fakes; production code
  plugs in `adapters.http_client.HttpxTransport`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

from core.domain.request import RequestDescriptor


@runtime_checkable
class Transport(Protocol):
    """Minimal contract for sending one request attempt.

    Design rules:
    - `send` is asynchronous because it performs network I/O.
    - Failures are raised as `httpx.HTTPError` subclasses: `HTTPStatusError`
      when a response was received but treated as an error, `TimeoutException`
      when none arrived in time.
    - Any response returned (whatever its status) ends the retry loop.
    """

    async def send(self, request: RequestDescriptor, *, base_url: str) -> httpx.Response:
        """Send `request` against `base_url` and return the raw response."""

        ...
