"""Unit tests for core/config.py -- startup configuration rules.

Covers:
- missing SECRET_KEY is a startup error
- short SECRET_KEY rejected
- defaults for bcrypt cost and token lifetime; env overrides
- bcrypt cost bounds
"""

import pytest
from pydantic import ValidationError as SettingsError

from core.config import Settings, get_settings

LONG_KEY = "k" * 40


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch, tmp_path):
    """Run from an empty directory so a developer's .env cannot leak in."""
    monkeypatch.chdir(tmp_path)
    for name in ("SECRET_KEY", "BCRYPT_ROUNDS", "TOKEN_EXPIRE_SECONDS", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_missing_secret_key_fails():
    with pytest.raises(SettingsError, match="SECRET_KEY is required"):
        Settings()


def test_short_secret_key_fails(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "too-short")
    with pytest.raises(SettingsError, match="at least 32 characters"):
        Settings()


def test_defaults(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", LONG_KEY)
    settings = Settings()
    assert settings.bcrypt_rounds == 10
    assert settings.token_expire_seconds == 24 * 3600
    assert settings.database_url.startswith("sqlite:///")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", LONG_KEY)
    monkeypatch.setenv("BCRYPT_ROUNDS", "12")
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "60")
    settings = get_settings()
    assert settings.bcrypt_rounds == 12
    assert settings.token_expire_seconds == 60
    assert get_settings() is settings


@pytest.mark.parametrize("rounds", ["3", "32"])
def test_bcrypt_rounds_bounds(monkeypatch, rounds):
    monkeypatch.setenv("SECRET_KEY", LONG_KEY)
    monkeypatch.setenv("BCRYPT_ROUNDS", rounds)
    with pytest.raises(SettingsError):
        Settings()
