# src/tourcheck_api/adapters/routers/health_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals suitable for container orchestrators and
    load balancers.

Design:
    * Liveness performs no I/O.
    * Readiness runs an injected check (``SELECT 1`` by default); a provider
      instance (`health_check_provider`) is the DI token so test overrides match by
      identity, and ``use_cache=False`` honors late overrides.
"""

from __future__ import annotations

import time
import typing as t
from enum import Enum
from typing import Annotated, Protocol

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field
from sqlalchemy import text

from tourcheck_api.adapters.schemas.http.base import BaseHTTPSchema
from tourcheck_api.infrastructure.database.session import get_sessionmaker
from tourcheck_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check."""

    name: str = Field(..., examples=["db"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    """Aggregated readiness response."""

    status: HealthState
    checks: list[CheckResult] = Field(default_factory=list)


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


class HealthCheck(Protocol):
    """Minimal, non-destructive dependency check."""

    async def db(self) -> tuple[bool, str | None]:
        """Return ``(is_ok, detail)`` for the primary database."""
        ...


class SqlAlchemyHealthCheck:
    """Check the primary database with ``SELECT 1``."""

    async def db(self) -> tuple[bool, str | None]:
        try:
            async with get_sessionmaker()() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:  # noqa: BLE001
            return False, type(exc).__name__
        return True, None


class HealthCheckProvider:
    """Dependency token object for readiness routes."""

    def __call__(self) -> HealthCheck:
        """Return the current health check implementation."""
        return SqlAlchemyHealthCheck()


health_check_provider = HealthCheckProvider()


@router.get(
    "/liveness",
    summary="Liveness",
    operation_id="health_liveness",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
)
async def liveness() -> LivenessResponse:
    """Return a fast liveness signal (no external I/O)."""
    return LivenessResponse()


@router.get(
    "/readiness",
    summary="Readiness",
    operation_id="health_readiness",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service degraded", "model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    checker: Annotated[HealthCheck, Depends(health_check_provider, use_cache=False)],
) -> ReadinessResponse:
    """Run the database check; HTTP 503 when it fails."""
    start = time.perf_counter()
    ok, detail = await checker.db()
    check = CheckResult(
        name="db",
        status="ok" if ok else "down",
        detail=detail,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    payload = ReadinessResponse(
        status=HealthState.OK if ok else HealthState.DEGRADED, checks=[check]
    )
    logger.info(
        "readiness_check",
        extra={"extra": {"overall": payload.status.value, "checks": [check.model_dump_http()]}},
    )
    return payload
