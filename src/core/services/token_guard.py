"""Auth token lifecycle guard.

Every authenticated operation runs the same expiry check before touching the
network, so a token that is about to expire fails fast locally instead of
being rejected by the server halfway through a call.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.domain.errors import AuthExpiredError
from core.domain.models import AuthToken

DEFAULT_SAFETY_MARGIN_MINUTES: float = 5


def is_token_expired(
    token: AuthToken,
    safety_margin_minutes: float = DEFAULT_SAFETY_MARGIN_MINUTES,
    *,
    now: datetime | None = None,
) -> bool:
    """Return True when `token` expires at or before `now + safety_margin_minutes`."""

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    deadline = now + timedelta(minutes=safety_margin_minutes)
    return token.expires <= deadline


def verify_auth_token(
    token: AuthToken,
    safety_margin_minutes: float = DEFAULT_SAFETY_MARGIN_MINUTES,
    *,
    now: datetime | None = None,
) -> None:
    """Raise `AuthExpiredError` if the token is expired; otherwise do nothing."""

    if is_token_expired(token, safety_margin_minutes, now=now):
        raise AuthExpiredError()
