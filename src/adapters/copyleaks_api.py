"""Copyleaks API endpoint operations.

Responsibility:
- Map each endpoint to a `RequestDescriptor` (method, path, body, bearer header).
- Run it through the shared pipeline: token guard -> retry engine -> classifier.
- Turn the successful response into the endpoint's return value.

Every operation may raise:
- `AuthExpiredError`: the token is expired (authenticated endpoints only).
- `UnderMaintenanceError`: servers are down for maintenance; back off and retry later.
- `RateLimitError`: too many requests; wait before calling again.
- `CommandError`: the server rejected the request; see `.response`.
- `httpx.HTTPError`: transport failure that survived the retry budget, unchanged.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import HttpxTransport, build_async_client
from core.config import AppSettings
from core.domain.errors import SubmissionError
from core.domain.models import (
    AuthToken,
    DeleteRequest,
    ExportRequest,
    FileOcrSubmission,
    FileSubmission,
    StartRequest,
    UrlSubmission,
)
from core.domain.product import Product
from core.domain.request import RequestDescriptor
from core.interfaces.transport import Transport
from core.services.request_executor import RequestExecutor
from core.services.response_classifier import classify, raise_for_outcome
from core.services.token_guard import verify_auth_token


class CopyleaksClient:
    """Async client for the Copyleaks API.

    Example:
        >>> async with CopyleaksClient() as client:
        ...     token = await client.login("me@example.com", "secret-key")
        ...     balance = await client.get_credits_balance(Product.EDUCATION, token)
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: Transport | None = None,
        executor: RequestExecutor | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(build_async_client(self._settings))
        self._executor = executor or RequestExecutor(
            max_retries=self._settings.max_retries,
            initial_backoff=self._settings.initial_backoff_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> "CopyleaksClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    # -- pipeline -----------------------------------------------------------------

    async def _call(self, request: RequestDescriptor, *, base_url: str | None = None) -> httpx.Response:
        response = await self._executor.execute(
            request,
            self._transport,
            base_url=base_url or self._settings.api_server_uri,
        )
        outcome = classify(
            response,
            under_maintenance_status=self._settings.under_maintenance_status,
            rate_limit_status=self._settings.rate_limit_status,
        )
        return raise_for_outcome(outcome)

    def _authorize(self, token: AuthToken) -> dict[str, str]:
        self.verify_auth_token(token)
        return token.bearer()

    # -- account ------------------------------------------------------------------

    async def login(self, email: str, key: str) -> AuthToken:
        """Login to the Copyleaks identity server.

        Returns a token that expires after a certain amount of time; reuse it
        until `verify_auth_token` reports it expired.
        """

        if not email or not key:
            raise ValueError("email and key are required")

        response = await self._call(
            RequestDescriptor(
                method="POST",
                path="/v3/account/login/api",
                body={"email": email, "key": key},
            ),
            base_url=self._settings.identity_server_uri,
        )
        return AuthToken.model_validate(response.json())

    def verify_auth_token(self, token: AuthToken, safety_margin_minutes: float | None = None) -> None:
        """Raise `AuthExpiredError` when `token` expires within the safety margin."""

        if safety_margin_minutes is None:
            safety_margin_minutes = self._settings.token_safety_margin_minutes
        verify_auth_token(token, safety_margin_minutes)

    # -- submissions --------------------------------------------------------------

    async def submit_file(
        self,
        product: Product | str,
        token: AuthToken,
        scan_id: str,
        submission: FileSubmission,
    ) -> None:
        """Start a new scan by providing a file (base64) to scan.

        Transport failures are raised as `SubmissionError`, chained to the
        original httpx error.
        """

        headers = self._authorize(token)
        request = RequestDescriptor(
            method="PUT",
            path=f"/v3/{Product(product).value}/submit/file/{scan_id}",
            body=submission.to_payload(),
            headers=headers,
        )
        try:
            await self._call(request)
        except httpx.HTTPError as exc:
            raise SubmissionError(scan_id) from exc

    async def submit_file_ocr(
        self,
        product: Product | str,
        token: AuthToken,
        scan_id: str,
        submission: FileOcrSubmission,
    ) -> None:
        """Start a new scan by providing an image to OCR and scan."""

        await self._call(
            RequestDescriptor(
                method="PUT",
                path=f"/v3/{Product(product).value}/submit/ocr/{scan_id}",
                body=submission.to_payload(),
                headers=self._authorize(token),
            )
        )

    async def submit_url(
        self,
        product: Product | str,
        token: AuthToken,
        scan_id: str,
        submission: UrlSubmission,
    ) -> None:
        """Start a new scan by providing a URL to scan."""

        await self._call(
            RequestDescriptor(
                method="PUT",
                path=f"/v3/{Product(product).value}/submit/url/{scan_id}",
                body=submission.to_payload(),
                headers=self._authorize(token),
            )
        )

    # -- scan lifecycle -----------------------------------------------------------

    async def export(self, token: AuthToken, scan_id: str, export_id: str, model: ExportRequest) -> None:
        """Export scan artifacts to your server; completion is reported by webhook."""

        await self._call(
            RequestDescriptor(
                method="POST",
                path=f"/v3/downloads/{scan_id}/export/{export_id}",
                body=model.to_payload(),
                headers=self._authorize(token),
            )
        )

    async def start(self, product: Product | str, token: AuthToken, model: StartRequest) -> dict[str, Any]:
        """Start scans submitted for a price-check. Returns the success/failed id lists."""

        response = await self._call(
            RequestDescriptor(
                method="PATCH",
                path=f"/v3/{Product(product).value}/start",
                body=model.to_payload(),
                headers=self._authorize(token),
            )
        )
        return response.json()

    async def delete(self, product: Product | str, token: AuthToken, model: DeleteRequest) -> None:
        """Delete scans from the server."""

        await self._call(
            RequestDescriptor(
                method="PATCH",
                path=f"/v3.1/{Product(product).value}/delete",
                body=model.to_payload(),
                headers=self._authorize(token),
            )
        )

    async def resend_webhook(self, product: Product | str, token: AuthToken, scan_id: str) -> None:
        """Resend status webhooks for an existing scan."""

        await self._call(
            RequestDescriptor(
                method="POST",
                path=f"/v3/{Product(product).value}/scans/{scan_id}/webhooks/resend",
                headers=self._authorize(token),
            )
        )

    # -- account usage ------------------------------------------------------------

    async def get_credits_balance(self, product: Product | str, token: AuthToken) -> dict[str, Any]:
        """Current credits balance of the account."""

        response = await self._call(
            RequestDescriptor(
                method="GET",
                path=f"/v3/{Product(product).value}/credits",
                headers=self._authorize(token),
            )
        )
        return response.json()

    async def get_usages_history_csv(
        self,
        product: Product | str,
        token: AuthToken,
        start_date: str,
        end_date: str,
    ) -> str:
        """Usage history between two dates (`dd-MM-yyyy`), as CSV text."""

        response = await self._call(
            RequestDescriptor(
                method="GET",
                path=f"/v3/{Product(product).value}/usages/history",
                params={"start": start_date, "end": end_date},
                headers=self._authorize(token),
            )
        )
        return response.text

    # -- public metadata ----------------------------------------------------------

    async def get_release_notes(self) -> list[dict[str, Any]]:
        response = await self._call(RequestDescriptor(method="GET", path="/v3/release-logs.json"))
        return response.json()

    async def get_supported_file_types(self) -> dict[str, Any]:
        response = await self._call(
            RequestDescriptor(method="GET", path="/v3/miscellaneous/supported-file-types")
        )
        return response.json()

    async def get_ocr_supported_languages(self) -> list[str]:
        """Languages supported by the OCR scan only (not the API as a whole)."""

        response = await self._call(
            RequestDescriptor(method="GET", path="/v3/miscellaneous/ocr-languages-list")
        )
        return response.json()
