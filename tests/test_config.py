"""Tests for environment-driven configuration."""

from __future__ import annotations

from signupgate.config import GateConfig


def test_defaults():
    config = GateConfig()

    assert config.min_score == 3
    assert config.min_password_length == 12
    assert config.breach_cache_ttl_seconds == 86400
    assert config.identity_configured is False
    assert config.validate() == []


def test_from_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE", "service-secret")
    monkeypatch.setenv("SIGNUPGATE_MIN_SCORE", "4")
    monkeypatch.setenv("SIGNUPGATE_REQUEST_TIMEOUT", "not-a-number")

    config = GateConfig.from_env()

    assert config.identity_url == "https://project.supabase.co"
    assert config.identity_service_key == "service-secret"
    assert config.identity_configured is True
    assert config.min_score == 4
    assert config.request_timeout == 8.0


def test_to_dict_excludes_secrets():
    config = GateConfig(identity_service_key="service-secret", identity_anon_key="anon-secret")

    data = config.to_dict()

    assert "service-secret" not in data.values()
    assert "anon-secret" not in data.values()
    assert data["identity_service_key_set"] is True


def test_validate_reports_bad_policy():
    config = GateConfig(min_score=5, min_password_length=20, max_password_length=10)

    errors = config.validate()

    assert len(errors) == 2
