# src/tourcheck_api/infrastructure/http/errors.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Exception handlers producing the canonical error envelope.

Every error response has the shape
``{"error": {code, http_status, message, details?, trace_id?}}`` where
``trace_id`` is the request correlation id.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from tourcheck_api.domain.exceptions.base import DomainError

logger = logging.getLogger(__name__)

#: HTTP status per domain error code; unknown codes map to 400.
DOMAIN_STATUS_BY_CODE: Final[dict[str, int]] = {
    "TOUR_NOT_FOUND": 404,
    "TOUR_LEG_NOT_FOUND": 404,
    "TOUR_NOT_STARTED": 409,
    "TOUR_LEG_REPORT_NOT_FOUND": 404,
    "INVALID_REVIEW_STATUS": 422,
    "DIRECTORY_IDENTITY_REQUIRED": 401,
    "FLIGHT_DIRECTORY_UNAVAILABLE": 503,
    "UPSTREAM_SCHEMA_ERROR": 502,
}


def _trace_id(request: Request) -> str | None:
    state = getattr(request, "state", None)
    return getattr(state, "trace_id", None) or getattr(state, "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    status = DOMAIN_STATUS_BY_CODE.get(exc.code, 400)
    logger.info(
        "domain_error",
        extra={"extra": {"code": exc.code, "http_status": status, "path": request.url.path}},
    )
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=str(exc) or exc.code,
        details=exc.details or None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception(
        "unhandled_exception",
        exc_info=exc,
        extra={"extra": {"path": request.url.path}},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        details=None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
