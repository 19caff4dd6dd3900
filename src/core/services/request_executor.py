"""Resilient request execution.

One logical request = one `RequestDescriptor` sent through a `Transport`.
Transient transport failures are retried with exponential backoff; anything
else (including every *returned* response, whatever its status) goes straight
back to the caller.

Retryable:
- `httpx.HTTPStatusError` whose response status is 429, 500 or 502.
- `httpx.TimeoutException` (no response received in time).

When the budget runs out, or the error is not retryable, the original
exception is re-raised unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from core.domain.request import RequestDescriptor
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 502})
DEFAULT_MAX_RETRIES = 10
DEFAULT_INITIAL_BACKOFF_SECONDS = 2.0

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryState:
    """Remaining retries and the wait before the next one. Owned by a single call."""

    remaining: int
    backoff: float

    @property
    def exhausted(self) -> bool:
        return self.remaining < 1

    def advance(self) -> "RetryState":
        return RetryState(remaining=max(0, self.remaining - 1), backoff=self.backoff * 2)


def error_status(exc: BaseException) -> int | None:
    """Status code of the response attached to a transport error, if any."""

    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def is_retryable_error(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TimeoutException):
        return True
    status = error_status(exc)
    return status is not None and status in RETRYABLE_STATUSES


class RequestExecutor:
    """Sends requests through a transport with bounded exponential backoff.

    Holds only immutable defaults, so one executor can serve any number of
    concurrent calls; each call builds its own `RetryState`.
    """

    def __init__(
        self,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_backoff: float = DEFAULT_INITIAL_BACKOFF_SECONDS,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        _validate(max_retries, initial_backoff)
        self.max_retries = max_retries
        self.initial_backoff = initial_backoff
        self._sleep = sleep

    async def execute(
        self,
        request: RequestDescriptor,
        transport: Transport,
        *,
        base_url: str,
        max_retries: int | None = None,
        initial_backoff: float | None = None,
    ) -> httpx.Response:
        """Send `request` and return the first response the transport hands back.

        Args:
            request: Descriptor replayed verbatim on every attempt.
            transport: Collaborator performing a single attempt.
            base_url: Server the descriptor path is resolved against.
            max_retries: Extra attempts after the first (defaults to the executor's).
            initial_backoff: Seconds before the first retry, doubled after each one.

        Raises:
            httpx.HTTPError: the last transport error, unchanged, once retries are
                exhausted or as soon as a non-retryable one occurs.
        """

        max_retries = self.max_retries if max_retries is None else max_retries
        initial_backoff = self.initial_backoff if initial_backoff is None else initial_backoff
        _validate(max_retries, initial_backoff)

        state = RetryState(remaining=max_retries, backoff=initial_backoff)
        while True:
            try:
                return await transport.send(request, base_url=base_url)
            except httpx.HTTPError as exc:
                status = error_status(exc)
                logger.warning(
                    "copyleaks request error: %s %s -> %s",
                    request.method,
                    request.path,
                    status if status is not None else type(exc).__name__,
                    extra={
                        "method": request.method,
                        "path": request.path,
                        "status_code": status,
                        "error_code": type(exc).__name__,
                        "remaining_retries": state.remaining,
                        "backoff_seconds": state.backoff,
                    },
                )
                if state.exhausted:
                    logger.error(
                        "copyleaks retries exhausted for %s %s (max_retries=%d)",
                        request.method,
                        request.path,
                        max_retries,
                    )
                    raise
                if not is_retryable_error(exc):
                    raise

                logger.info(
                    "copyleaks backoff %.2fs before retrying %s %s",
                    state.backoff,
                    request.method,
                    request.path,
                )
                await self._sleep(state.backoff)
                state = state.advance()


def _validate(max_retries: int, initial_backoff: float) -> None:
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    if initial_backoff < 0:
        raise ValueError("initial_backoff must be >= 0")
