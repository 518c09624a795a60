"""Tests for environment-driven configuration."""

import pytest

from course_export.config import (
    LINK_EXPIRY_SECONDS,
    check_required_env_vars,
    get_export_config,
)


def test_requires_salt(monkeypatch):
    monkeypatch.delenv("EXPORT_SALT", raising=False)
    with pytest.raises(ValueError, match="EXPORT_SALT"):
        get_export_config()


def test_defaults(monkeypatch):
    monkeypatch.setenv("EXPORT_SALT", "s3cret")
    for name in (
        "EXPORT_TIME_LIMIT_SECONDS",
        "EXPORT_DELAY_MS",
        "EXPORT_INTERVAL_MINUTES",
        "SITE_URL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_export_config()

    assert config.salt == "s3cret"
    assert config.time_limit_seconds == 300
    assert config.delay_ms == 0
    assert config.interval_minutes == 5
    assert config.site_url == "http://localhost:8000"
    assert config.link_expiry_seconds == LINK_EXPIRY_SECONDS == 14400


def test_overrides(monkeypatch):
    monkeypatch.setenv("EXPORT_SALT", "s3cret")
    monkeypatch.setenv("EXPORT_TIME_LIMIT_SECONDS", "60")
    monkeypatch.setenv("EXPORT_DELAY_MS", "250")
    monkeypatch.setenv("SITE_URL", "https://learn.example.org/")

    config = get_export_config()

    assert config.time_limit_seconds == 60
    assert config.delay_ms == 250
    assert config.site_url == "https://learn.example.org"


def test_missing_required_env_var(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    ok, _ = check_required_env_vars()
    assert ok is False


def test_optional_sentry_is_only_a_warning_in_production(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/test")
    monkeypatch.setenv("JWT_SECRET", "x")
    monkeypatch.setenv("EXPORT_SALT", "y")
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    monkeypatch.delenv("DEV_MODE", raising=False)

    ok, warnings = check_required_env_vars()

    assert ok is True
    assert any("SENTRY_DSN" in w for w in warnings)
