"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP transport, endpoint client) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "copyleaks"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "copyleaks"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "copyleaks"
    return Path.home() / ".config" / "copyleaks"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# Copyleaks client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central client configuration.

    Every value can be overridden with a `COPYLEAKS_*` environment variable,
    a project `.env` or the per-user `.env` written by `doctor setup`.
    """

    model_config = SettingsConfigDict(
        env_prefix="COPYLEAKS_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_server_uri: str = Field(
        default="https://api.copyleaks.com",
        min_length=8,
        description="Base URL of the Copyleaks API server.",
    )
    identity_server_uri: str = Field(
        default="https://id.copyleaks.com",
        min_length=8,
        description="Base URL of the Copyleaks identity (login) server.",
    )
    user_agent: str = Field(
        default="copyleaks-async/1.0 (+https://copyleaks.com)",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Per-attempt transport timeout (seconds).",
    )

    max_retries: int = Field(
        default=10,
        ge=0,
        description="Extra attempts after the first one for transient transport errors.",
    )
    initial_backoff_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Wait before the first retry; doubled after every retry.",
    )
    token_safety_margin_minutes: float = Field(
        default=5,
        ge=0,
        description="Tokens expiring within this many minutes are treated as expired.",
    )

    under_maintenance_status: int = Field(
        default=512,
        ge=100,
        le=599,
        description="Status code the service uses to signal planned maintenance.",
    )
    rate_limit_status: int = Field(
        default=513,
        ge=100,
        le=599,
        description="Status code of a received (non-retried) rate-limit response. Must stay outside the retried set.",
    )

    email: str | None = Field(
        default=None,
        description="Account email used by the CLI login command.",
    )
    api_key: str | None = Field(
        default=None,
        description="Account secret key used by the CLI login command.",
    )
