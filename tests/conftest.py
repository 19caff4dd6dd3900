from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Iterable

import httpx
import pytest
import pytest_asyncio

from adapters.copyleaks_api import CopyleaksClient
from adapters.http_client import HttpxTransport, build_async_client
from core.config import AppSettings
from core.domain.models import AuthToken
from core.domain.request import RequestDescriptor
from core.services.request_executor import RequestExecutor

API = "https://api.test.local"
IDENTITY = "https://id.test.local"


class RecordingSleep:
    """Stands in for asyncio.sleep and records every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedTransport:
    """Transport that replays a script of responses/exceptions, one per attempt."""

    def __init__(self, script: Iterable[httpx.Response | Exception]) -> None:
        self._script = list(script)
        self.calls: list[tuple[RequestDescriptor, str]] = []

    async def send(self, request: RequestDescriptor, *, base_url: str) -> httpx.Response:
        self.calls.append((request, base_url))
        step = self._script[min(len(self.calls), len(self._script)) - 1]
        if isinstance(step, Exception):
            raise step
        return step


def make_request(method: str = "GET", url: str = f"{API}/v3/test") -> httpx.Request:
    return httpx.Request(method, url)


def status_error(status: int) -> httpx.HTTPStatusError:
    request = make_request()
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


def make_token(expires: datetime | None = None, **claims: object) -> AuthToken:
    expires = expires or datetime.now(timezone.utc) + timedelta(hours=48)
    return AuthToken.model_validate(
        {"access_token": "token-abc", ".expires": expires.isoformat(), **claims}
    )


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in (
        "COPYLEAKS_API_SERVER_URI",
        "COPYLEAKS_IDENTITY_SERVER_URI",
        "COPYLEAKS_MAX_RETRIES",
        "COPYLEAKS_INITIAL_BACKOFF_SECONDS",
        "COPYLEAKS_TOKEN_SAFETY_MARGIN_MINUTES",
        "COPYLEAKS_UNDER_MAINTENANCE_STATUS",
        "COPYLEAKS_RATE_LIMIT_STATUS",
        "COPYLEAKS_EMAIL",
        "COPYLEAKS_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_server_uri=API,
        identity_server_uri=IDENTITY,
        max_retries=3,
        initial_backoff_seconds=0.5,
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def token() -> AuthToken:
    return make_token()


@pytest_asyncio.fixture
async def make_client(settings: AppSettings, sleep: RecordingSleep) -> AsyncIterator[Callable[..., CopyleaksClient]]:
    """Build clients whose HTTP traffic is served by `handler`; their transports close at teardown."""

    transports: list[HttpxTransport] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        error_statuses: Iterable[int] | None = None,
    ) -> CopyleaksClient:
        http = build_async_client(settings, transport=httpx.MockTransport(handler))
        transport = (
            HttpxTransport(http)
            if error_statuses is None
            else HttpxTransport(http, error_statuses=error_statuses)
        )
        transports.append(transport)
        executor = RequestExecutor(
            max_retries=settings.max_retries,
            initial_backoff=settings.initial_backoff_seconds,
            sleep=sleep,
        )
        return CopyleaksClient(settings, transport=transport, executor=executor)

    yield _make
    for transport in transports:
        await transport.aclose()
