from __future__ import annotations

from datetime import timedelta

import pytest

from waqf.core.config import (
    DEFAULT_JWT_SECRET,
    ProductionConfig,
    TestingConfig,
    get_config,
    parse_duration,
    validate_secrets,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("7d", timedelta(days=7)),
        ("30d", timedelta(days=30)),
        ("15m", timedelta(minutes=15)),
        ("2h", timedelta(hours=2)),
        ("3600", timedelta(seconds=3600)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("seven days")


def test_defaults_token_lifetimes():
    assert TestingConfig.JWT_ACCESS_TOKEN_EXPIRES == timedelta(days=7)
    assert TestingConfig.JWT_REFRESH_TOKEN_EXPIRES == timedelta(days=30)


def test_get_config_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config() is ProductionConfig
    monkeypatch.setenv("APP_ENV", "unknown")
    assert get_config().__name__ == "DevelopmentConfig"


def test_validate_secrets_refuses_placeholders_in_production():
    cfg = {"SECRET_KEY": "s", "JWT_SECRET_KEY": DEFAULT_JWT_SECRET, "JWT_REFRESH_SECRET_KEY": "r"}
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        validate_secrets(cfg)


def test_validate_secrets_requires_distinct_keys():
    with pytest.raises(RuntimeError, match="must differ"):
        validate_secrets({"SECRET_KEY": "s", "JWT_SECRET_KEY": "k", "JWT_REFRESH_SECRET_KEY": "k"})


def test_validate_secrets_skipped_when_testing():
    validate_secrets({"TESTING": True, "JWT_SECRET_KEY": "k", "JWT_REFRESH_SECRET_KEY": "k"})
