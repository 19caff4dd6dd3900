"""Classification of received responses.

Only responses that reached the caller are classified here. The 429 that the
retry engine backs off on arrives as a *raised* transport error and never
gets this far; `rate_limit_status` is matched on a *returned* response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import httpx

from core.domain.errors import CommandError, RateLimitError, UnderMaintenanceError

UNDER_MAINTENANCE_STATUS = 512
RATE_LIMIT_STATUS = 513


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    UNDER_MAINTENANCE = "under_maintenance"
    RATE_LIMITED = "rate_limited"
    COMMAND_FAILURE = "command_failure"


@dataclass(frozen=True)
class ClassifiedOutcome:
    kind: OutcomeKind
    response: httpx.Response

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def is_success_status(status: int) -> bool:
    return 200 <= status <= 299


def classify_status(
    status: int,
    *,
    under_maintenance_status: int = UNDER_MAINTENANCE_STATUS,
    rate_limit_status: int = RATE_LIMIT_STATUS,
) -> OutcomeKind:
    # Success first: a configured reserved code inside 2xx must not shadow it.
    if is_success_status(status):
        return OutcomeKind.SUCCESS
    if status == under_maintenance_status:
        return OutcomeKind.UNDER_MAINTENANCE
    if status == rate_limit_status:
        return OutcomeKind.RATE_LIMITED
    return OutcomeKind.COMMAND_FAILURE


def classify(
    response: httpx.Response,
    *,
    under_maintenance_status: int = UNDER_MAINTENANCE_STATUS,
    rate_limit_status: int = RATE_LIMIT_STATUS,
) -> ClassifiedOutcome:
    kind = classify_status(
        response.status_code,
        under_maintenance_status=under_maintenance_status,
        rate_limit_status=rate_limit_status,
    )
    return ClassifiedOutcome(kind=kind, response=response)


def raise_for_outcome(outcome: ClassifiedOutcome) -> httpx.Response:
    """Return the response of a successful outcome, raise the typed failure otherwise."""

    if outcome.kind is OutcomeKind.SUCCESS:
        return outcome.response
    if outcome.kind is OutcomeKind.UNDER_MAINTENANCE:
        raise UnderMaintenanceError()
    if outcome.kind is OutcomeKind.RATE_LIMITED:
        raise RateLimitError()
    raise CommandError(outcome.response)
