"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge plus self-documenting fields (Field).
- Field aliases keep the Copyleaks wire names (camelCase, `.expires`) out of
  Python code while `model_dump(by_alias=True)` restores them for requests.

Note:
- These models describe *what* is sent or received, not *how*.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

# .NET style timestamps carry 7 fractional digits; Python keeps 6.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class AuthToken(BaseModel):
    """Login token issued by the Copyleaks identity server.

    Immutable; the client never stores it. Unknown claims are kept verbatim so
    the token can be dumped back to JSON and reused later.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    access_token: str = Field(
        ...,
        min_length=1,
        description="Opaque bearer token.",
    )
    expires: datetime = Field(
        ...,
        alias=".expires",
        description="Absolute expiry instant (UTC when the server omits the offset).",
    )
    issued: datetime | None = Field(
        default=None,
        alias=".issued",
        description="Issue instant, if provided.",
    )

    @field_validator("expires", "issued", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FRACTION_RE.sub(r"\1", value.strip())
        return value

    @field_validator("expires", "issued")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def bearer(self) -> dict[str, str]:
        """Authorization header for this token."""

        return {"Authorization": f"Bearer {self.access_token}"}


class _WireModel(BaseModel):
    """Base for request payloads: camelCase aliases, extra service fields allowed."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubmissionWebhooks(_WireModel):
    status: str = Field(
        ...,
        description="Status webhook URL; may contain the `{STATUS}` placeholder.",
    )
    new_result: str | None = Field(
        default=None,
        alias="newResult",
        description="Webhook called for every new result found.",
    )


class SubmissionProperties(_WireModel):
    """Scan properties shared by file, OCR and URL submissions.

    Only the common switches are typed; any other documented property can be
    passed as an extra field and is forwarded untouched.
    """

    webhooks: SubmissionWebhooks
    include_html: bool | None = Field(default=None, alias="includeHtml")
    developer_payload: str | None = Field(default=None, alias="developerPayload", max_length=512)
    sandbox: bool | None = None
    expiration: int | None = Field(default=None, ge=1, le=2880, description="Hours to keep the scan.")
    action: int | None = Field(default=None, ge=0, le=2, description="0 scan, 1 check credits, 2 index only.")
    author: dict[str, Any] | None = None
    filters: dict[str, Any] | None = None
    scanning: dict[str, Any] | None = None
    indexing: dict[str, Any] | None = None
    exclude: dict[str, Any] | None = None
    pdf: dict[str, Any] | None = None


class FileSubmission(_WireModel):
    base64: str = Field(..., min_length=1, description="File content, base64 encoded.")
    filename: str = Field(..., min_length=1, max_length=255)
    properties: SubmissionProperties


class FileOcrSubmission(FileSubmission):
    lang_code: str = Field(..., alias="langCode", min_length=2, description="OCR language code.")


class UrlSubmission(_WireModel):
    url: str = Field(..., min_length=1)
    properties: SubmissionProperties


class ExportEndpoint(_WireModel):
    endpoint: str = Field(..., min_length=1, description="URL the artifact is sent to.")
    verb: str = Field(default="POST", description="HTTP method used to deliver the artifact.")
    headers: list[list[str]] | None = Field(default=None, description="Extra [name, value] headers.")


class ExportResult(ExportEndpoint):
    id: str = Field(..., min_length=1, description="Result id to export.")


class ExportRequest(_WireModel):
    """Which scan artifacts to deliver, and where."""

    completion_webhook: str = Field(..., alias="completionWebhook")
    results: list[ExportResult] = Field(default_factory=list)
    pdf_report: ExportEndpoint | None = Field(default=None, alias="pdfReport")
    crawled_version: ExportEndpoint | None = Field(default=None, alias="crawledVersion")
    max_retries: int | None = Field(default=None, alias="maxRetries", ge=0)
    developer_payload: str | None = Field(default=None, alias="developerPayload", max_length=512)


class StartErrorHandling(IntEnum):
    CANCEL = 0
    IGNORE = 1


class StartRequest(_WireModel):
    """Starts scans that were submitted with the price-check action."""

    trigger: list[str] = Field(..., min_length=1, description="Scan ids to start.")
    error_handling: StartErrorHandling = Field(
        default=StartErrorHandling.CANCEL,
        alias="errorHandling",
    )


class DeleteScan(_WireModel):
    id: str = Field(..., min_length=1)


class DeleteRequest(_WireModel):
    scans: list[DeleteScan] = Field(..., min_length=1)
    purge: bool = Field(default=False, description="Also delete the scans from the private index.")
    completion_webhook: str | None = Field(default=None, alias="completionWebhook")

    @classmethod
    def for_ids(cls, scan_ids: list[str], *, purge: bool = False) -> "DeleteRequest":
        return cls(scans=[DeleteScan(id=scan_id) for scan_id in scan_ids], purge=purge)
