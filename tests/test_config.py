from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, write_user_env_vars


def test_defaults():
    settings = AppSettings(_env_file=None)

    assert settings.api_server_uri == "https://api.copyleaks.com"
    assert settings.identity_server_uri == "https://id.copyleaks.com"
    assert settings.max_retries == 10
    assert settings.initial_backoff_seconds == 2.0
    assert settings.token_safety_margin_minutes == 5
    assert settings.under_maintenance_status == 512
    assert settings.rate_limit_status == 513


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("COPYLEAKS_MAX_RETRIES", "2")
    monkeypatch.setenv("COPYLEAKS_INITIAL_BACKOFF_SECONDS", "0.1")
    monkeypatch.setenv("COPYLEAKS_API_SERVER_URI", "https://sandbox.copyleaks.local")

    settings = AppSettings(_env_file=None)

    assert settings.max_retries == 2
    assert settings.initial_backoff_seconds == 0.1
    assert settings.api_server_uri == "https://sandbox.copyleaks.local"


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("COPYLEAKS_MAX_RETRIES", "-1")

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("COPYLEAKS_EMAIL=me@example.com\nCOPYLEAKS_API_KEY=k-1\n", encoding="utf-8")

    settings = AppSettings(_env_file=env_file)

    assert settings.email == "me@example.com"
    assert settings.api_key == "k-1"


def test_write_user_env_vars_merges_existing_values(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"COPYLEAKS_EMAIL": "old@example.com", "COPYLEAKS_API_KEY": "k-1"}, env_path)

    write_user_env_vars({"COPYLEAKS_EMAIL": "new@example.com", "COPYLEAKS_API_KEY": None}, env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert "COPYLEAKS_EMAIL=new@example.com" in lines
    assert "COPYLEAKS_API_KEY=k-1" in lines


def test_user_config_dir_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_config_dir() == tmp_path / "copyleaks"
