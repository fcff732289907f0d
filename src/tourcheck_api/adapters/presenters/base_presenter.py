# src/tourcheck_api/adapters/presenters/base_presenter.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope and PaginatedEnvelope instances.
    * Compute strong, quoted ETags from canonical JSON material.
    * Apply standard headers such as X-Request-ID.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Response

from tourcheck_api.adapters.schemas.http.envelopes import (
    PaginatedEnvelope,
    SuccessEnvelope,
)
from tourcheck_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

T = TypeVar("T")


def _compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    digest = hashlib.sha256(material).hexdigest()
    return f'"{digest}"'


@dataclass(slots=True)
class PresentResult(Generic[T]):
    """Presentation result envelope.

    Attributes:
        body: A Pydantic envelope instance.
        headers: Extra HTTP headers to apply.
        status_code: Optional HTTP status override.
    """

    body: T
    headers: Mapping[str, str]
    status_code: int | None = None


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers.

    Provides helpers to assemble standard envelopes and headers, leaving all
    business decisions to the application layer.
    """

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        with_etag: bool = False,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope and attach headers.

        Behavior:
            * Always echoes ``X-Request-ID`` when provided.
            * Computes a quoted strong ``ETag`` from the body when requested.
        """
        body = SuccessEnvelope[Any](data=data)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        if with_etag:
            headers["ETag"] = _compute_quoted_etag(body.model_dump(mode="json"))
        return PresentResult(body=body, headers=headers)

    def present_paginated(
        self,
        *,
        items: list[Any],
        page: int,
        page_size: int,
        total: int,
        trace_id: str | None = None,
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        """Build a PaginatedEnvelope and attach optional headers."""
        body = PaginatedEnvelope[Any](page=page, page_size=page_size, total=total, items=items)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        return PresentResult(body=body, headers=headers)

    @staticmethod
    def apply_headers(result: PresentResult[Any], response: Response) -> None:
        """Apply headers and optional status code to the outgoing response."""
        try:
            response.headers.update(dict(result.headers))
        except Exception:  # pragma: no cover
            _LOGGER.exception("presenter_apply_headers_failed", extra={"headers": result.headers})

        if result.status_code is not None:
            response.status_code = result.status_code
