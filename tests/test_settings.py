"""Tests for configuration validation."""

import pytest
from pydantic import ValidationError

from learnease.config import Settings
from learnease.config.settings import DEV_SECRET_KEY


STRONG_SECRET = "s" * 48


def test_defaults() -> None:
    settings = Settings(environment="testing")
    assert settings.cassandra_keyspace == "learnease"
    assert settings.course_cache_enabled is True
    assert settings.course_cache_ttl_seconds == 300
    assert settings.seed_demo_on_startup is False
    assert settings.is_testing


def test_short_secret_rejected() -> None:
    with pytest.raises(ValidationError, match="at least 32"):
        Settings(auth_secret_key="too-short")


def test_log_level_case_insensitive() -> None:
    assert Settings(log_level="info").log_level == "INFO"


def test_invalid_keyspace_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(cassandra_keyspace="learn-ease")


def test_cache_ttl_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(course_cache_ttl_seconds=0)


def test_production_requires_real_secret() -> None:
    with pytest.raises(ValidationError, match="auth_secret_key must be set"):
        Settings(environment="production", debug=False, auth_secret_key=DEV_SECRET_KEY)


def test_production_requires_debug_off() -> None:
    with pytest.raises(ValidationError, match="debug"):
        Settings(environment="production", debug=True, auth_secret_key=STRONG_SECRET)


def test_production_settings_accepted() -> None:
    settings = Settings(environment="production", debug=False, auth_secret_key=STRONG_SECRET)
    assert settings.is_production
    assert not settings.is_development
