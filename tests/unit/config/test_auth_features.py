from __future__ import annotations

import pytest

import tourcheck_api.config.features.auth as auth_features
from tourcheck_api.config.features.auth import AuthSettings, get_auth_settings


def test_env_override_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_ENABLED", "yes")
    monkeypatch.setenv("AUTH_HS256_SECRET", "s3cret")
    monkeypatch.setenv("REVIEWER_SCOPE", "tours:review")

    cfg = get_auth_settings()

    assert cfg == AuthSettings(enabled=True, hs256_secret="s3cret", reviewer_scope="tours:review")


def test_falls_back_to_application_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    class _Fake:
        auth_enabled = True
        auth_hs256_secret = "from-settings"
        reviewer_scope = "staff"

    monkeypatch.setattr(auth_features, "get_settings", lambda: _Fake())

    cfg = get_auth_settings()

    assert cfg.enabled is True
    assert cfg.hs256_secret == "from-settings"
    assert cfg.reviewer_scope == "staff"


def test_env_disabled_defaults_reviewer_scope(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_ENABLED", "0")
    monkeypatch.delenv("REVIEWER_SCOPE", raising=False)

    cfg = get_auth_settings()

    assert cfg.enabled is False
    assert cfg.reviewer_scope == "admin:tours"
