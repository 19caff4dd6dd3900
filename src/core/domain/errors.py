"""Typed failures raised by the client.

Transport errors that survive the retry engine (exhausted budget or a
non-retryable error) are *not* wrapped here: the original `httpx` exception
reaches the caller unchanged so its request/response details stay intact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class CopyleaksError(Exception):
    """Base exception for all client errors."""


class AuthExpiredError(CopyleaksError):
    """Raised when the auth token is expired (safety margin included). Login again."""

    def __init__(self, message: str = "Authentication token expired. Login again.") -> None:
        super().__init__(message)


class UnderMaintenanceError(CopyleaksError):
    """Raised when Copyleaks servers are unavailable for maintenance.

    The client does not retry this: apply your own exponential backoff.
    """

    def __init__(self, message: str = "Copyleaks servers are under maintenance.") -> None:
        super().__init__(message)


class RateLimitError(CopyleaksError):
    """Raised when a received response signals throttling. Wait before calling again."""

    def __init__(self, message: str = "Too many requests. Please wait before calling again.") -> None:
        super().__init__(message)


class CommandError(CopyleaksError):
    """Raised when the server rejected the request.

    Carries the raw response so callers can inspect status, headers and body.
    """

    def __init__(self, response: "httpx.Response") -> None:
        self.response = response
        super().__init__(f"Copyleaks command failed with status {response.status_code}")

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.response.headers)

    @property
    def body(self) -> str:
        return self.response.text


class SubmissionError(CopyleaksError):
    """Raised when a file submission failed at transport level.

    The underlying `httpx` error is available as `__cause__`.
    """

    def __init__(self, scan_id: str) -> None:
        self.scan_id = scan_id
        super().__init__(f"Failed to submit file to Copyleaks API for scan with ID '{scan_id}'.")
