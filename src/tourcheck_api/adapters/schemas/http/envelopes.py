# src/tourcheck_api/adapters/schemas/http/envelopes.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing HTTP envelopes:
      - ErrorEnvelope
      - SuccessEnvelope[T]
      - PaginatedEnvelope[T]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from tourcheck_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "PaginatedEnvelope",
]

T = TypeVar("T")


class ErrorObject(BaseModel):
    """Structured error object inside ErrorEnvelope.

    Error codes are UPPER_SNAKE_CASE, stable across releases and testable:
        - TOUR_NOT_FOUND / TOUR_LEG_NOT_FOUND / TOUR_LEG_REPORT_NOT_FOUND (404)
        - TOUR_NOT_STARTED (409): member has not joined the tour.
        - INVALID_REVIEW_STATUS (422)
        - VALIDATION_ERROR (422), HTTP_ERROR (401/403/...), INTERNAL_ERROR (500)
    """

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "TOUR_NOT_STARTED",
                    "http_status": 409,
                    "message": "Tour not started",
                    "details": {"tour_id": "0b8d2c1e-3f4a-4b5c-9d6e-7f8091a2b3c4"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    code: str = Field(..., description="Stable machine-readable error code.")
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable error description.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional structured details safe for clients.",
    )
    trace_id: str | None = Field(
        default=None,
        description="Request correlation identifier.",
    )


class ErrorEnvelope(BaseHTTPSchema):
    r"""Canonical error envelope: {"error": ErrorObject}."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject = Field(..., description="Structured error details.")


class SuccessEnvelope(BaseHTTPSchema, Generic[T]):
    r"""Success envelope for non-paginated responses: {"data": T}."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid")

    data: T = Field(..., description="Returned resource or value.")


class PaginatedEnvelope(BaseHTTPSchema, Generic[T]):
    """Paginated success envelope."""

    model_config = ConfigDict(title="PaginatedEnvelope", extra="forbid")

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=200)
    total: int = Field(..., ge=0)
    items: Sequence[T] = Field(...)
