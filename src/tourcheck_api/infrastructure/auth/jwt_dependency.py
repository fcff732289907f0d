# src/tourcheck_api/infrastructure/auth/jwt_dependency.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""JWT (HS256) Authentication Dependency.

Feature-flagged dependency that enforces bearer authentication when enabled.
The token subject is the member id; the ``vid`` claim carries the member's
identity in the flight activity directory.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

import jwt
from fastapi import HTTPException, Request
from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tourcheck_api.config.features.auth import AuthSettings, get_auth_settings

DEV_PRINCIPAL_SUB = "dev-user"


class Principal(BaseModel):
    """Authenticated principal extracted from a verified JWT.

    Attributes:
        sub: Subject claim (member identifier).
        scopes: Normalized scopes as a tuple.
        claims: Full claims mapping for downstream uses/auditing.
    """

    model_config = ConfigDict(frozen=True)

    sub: str = ""
    scopes: tuple[str, ...] = ()
    claims: Mapping[str, Any] = Field(default_factory=dict)

    @property
    def vid(self) -> str | None:
        """Directory identity from the ``vid`` claim, if present."""
        raw = self.claims.get("vid")
        if raw is None:
            return None
        text = str(raw).strip()
        return text or None


def _extract_bearer_token(request: Request) -> str:
    """Extract a bearer token from the Authorization header.

    Raises:
        HTTPException: With 401 on missing/malformed header or empty token.
    """
    auth = (request.headers.get("Authorization") or "").strip()
    if not auth or not auth.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")
    return token


def _decode_hs256(token: str, cfg: AuthSettings) -> Mapping[str, Any]:
    """Decode and validate a JWT signed with HS256.

    Raises:
        HTTPException: If decoding fails or configuration is invalid.
    """
    if not cfg.hs256_secret:
        raise HTTPException(
            status_code=500,
            detail="Auth misconfigured (missing HS256 secret)",
        )

    try:
        return jwt.decode(
            token, cfg.hs256_secret, algorithms=["HS256"], options={"verify_aud": False}
        )
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc


def _normalize_scopes(raw_scopes: Any) -> set[str]:
    if isinstance(raw_scopes, str):
        return {s for s in raw_scopes.split() if s}
    if isinstance(raw_scopes, (list, tuple, set)):
        return {str(s) for s in raw_scopes if str(s)}
    return set()


def auth_required(
    required_scopes: str | Iterable[str] | None = None,
    *,
    reviewer: bool = False,
) -> Callable[..., Awaitable[Principal]]:
    """Create a dependency that enforces authentication and optional scope checks.

    Behavior is feature-flagged by ``AUTH_ENABLED``. When disabled, a synthetic
    dev principal is returned.

    Args:
        required_scopes: Scopes the caller must hold.
        reviewer: Also require the configured reviewer scope, resolved per
            request so env overrides apply.
    """
    if isinstance(required_scopes, str):
        required: set[str] = {s for s in required_scopes.split() if s}
    else:
        required = set(required_scopes or ())

    async def _dep(request: Request) -> Principal:
        cfg = get_auth_settings()

        if not cfg.enabled:
            return Principal(sub=DEV_PRINCIPAL_SUB, scopes=tuple(), claims={})

        token = _extract_bearer_token(request)
        claims = _decode_hs256(token, cfg)

        sub = str(claims.get("sub", ""))
        if not sub:
            raise HTTPException(status_code=401, detail="Invalid token")

        scope_set = _normalize_scopes(claims.get("scopes", claims.get("scope", "")))
        needed = set(required)
        if reviewer:
            needed.add(cfg.reviewer_scope)
        if needed and not needed.issubset(scope_set):
            raise HTTPException(status_code=403, detail="Forbidden")

        return Principal(sub=sub, scopes=tuple(sorted(scope_set)), claims=claims)

    return _dep
