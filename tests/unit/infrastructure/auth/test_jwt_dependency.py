from __future__ import annotations

from collections.abc import Mapping

import jwt
import pytest
from fastapi import HTTPException

import tourcheck_api.infrastructure.auth.jwt_dependency as jwt_dep
from tourcheck_api.config.features.auth import AuthSettings
from tourcheck_api.infrastructure.auth.jwt_dependency import Principal, auth_required

SECRET = "unit-test-secret-with-32-bytes-min!!"


class DummyRequest:
    """Minimal request-like object exposing a headers mapping."""

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self.headers = dict(headers or {})


def _bearer(claims: dict[str, object]) -> DummyRequest:
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    return DummyRequest({"Authorization": f"Bearer {token}"})


@pytest.fixture
def auth_on(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("AUTH_HS256_SECRET", SECRET)


@pytest.mark.asyncio
async def test_disabled_auth_returns_dev_principal_without_vid() -> None:
    principal = await auth_required()(DummyRequest())

    assert isinstance(principal, Principal)
    assert principal.sub == "dev-user"
    assert principal.scopes == ()
    assert principal.vid is None


@pytest.mark.asyncio
async def test_valid_token_yields_member_and_vid(auth_on: None) -> None:
    principal = await auth_required()(_bearer({"sub": "member-1", "vid": 123456}))

    assert principal.sub == "member-1"
    assert principal.vid == "123456"


@pytest.mark.asyncio
async def test_blank_vid_claim_is_none(auth_on: None) -> None:
    principal = await auth_required()(_bearer({"sub": "member-1", "vid": "  "}))

    assert principal.vid is None


@pytest.mark.asyncio
async def test_missing_subject_is_401(auth_on: None) -> None:
    with pytest.raises(HTTPException) as info:
        await auth_required()(_bearer({"vid": "1"}))

    assert info.value.status_code == 401


@pytest.mark.asyncio
async def test_reviewer_scope_required(auth_on: None) -> None:
    dep = auth_required(reviewer=True)

    with pytest.raises(HTTPException) as info:
        await dep(_bearer({"sub": "staff-1", "scopes": ["tours:read"]}))
    assert info.value.status_code == 403

    principal = await dep(_bearer({"sub": "staff-1", "scope": "tours:read admin:tours"}))
    assert principal.scopes == ("admin:tours", "tours:read")


@pytest.mark.asyncio
async def test_reviewer_scope_follows_env(auth_on: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REVIEWER_SCOPE", "staff")

    principal = await auth_required(reviewer=True)(_bearer({"sub": "s", "scopes": ["staff"]}))

    assert principal.sub == "s"


def test_extract_bearer_token_missing_header_401() -> None:
    with pytest.raises(HTTPException) as info:
        jwt_dep._extract_bearer_token(DummyRequest())  # type: ignore[arg-type]

    assert info.value.status_code == 401
    assert info.value.detail == "Missing bearer token"


def test_decode_hs256_missing_secret_raises_500() -> None:
    cfg = AuthSettings(enabled=True, hs256_secret=None)

    with pytest.raises(HTTPException) as info:
        jwt_dep._decode_hs256("token", cfg)  # noqa: S105

    assert info.value.status_code == 500


def test_decode_hs256_wrong_signature_is_401() -> None:
    token = jwt.encode({"sub": "x"}, "another-secret-of-sufficient-length!", algorithm="HS256")

    with pytest.raises(HTTPException) as info:
        jwt_dep._decode_hs256(token, AuthSettings(enabled=True, hs256_secret=SECRET))

    assert info.value.status_code == 401
    assert info.value.detail == "Invalid token"
