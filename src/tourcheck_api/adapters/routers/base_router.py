# src/tourcheck_api/adapters/routers/base_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Provide a canonical APIRouter wrapper and shared utilities for HTTP endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/tours").
      - Standard error response mapping using ErrorEnvelope.
      - Pagination query dependency with hard caps.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Query

from tourcheck_api.adapters.schemas.http.envelopes import ErrorEnvelope
from tourcheck_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


@dataclass(frozen=True)
class PageParams:
    """Validated pagination parameters.

    Attributes:
        page: 1-indexed page number.
        page_size: Items per page.
    """

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        """Return zero-based row offset."""
        return (self.page - 1) * self.page_size


class BaseRouter(APIRouter):
    """Canonical router wrapper for HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Resource path segment (e.g., "tours").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        dependencies: Optional global dependencies for all routes.
        **kwargs: Additional APIRouter kwargs.
    """

    MIN_PAGE: int = 1
    MIN_PAGE_SIZE: int = 1
    MAX_PAGE_SIZE: int = 200
    DEFAULT_PAGE_SIZE: int = 50

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        dependencies: Sequence[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            dependencies=list(dependencies) if dependencies is not None else None,
            **kwargs,
        )
        _LOGGER.debug(
            "router_initialized",
            extra={"extra": {"prefix": computed_prefix, "tags": [str(t) for t in tags or []]}},
        )

    @classmethod
    def page_params(
        cls,
        page: int | None = Query(
            default=None,
            description="1-indexed page number.",
            examples=[1],
            ge=1,
        ),
        page_size: int | None = Query(
            default=None,
            description="Items per page (bounded by MAX_PAGE_SIZE).",
            examples=[50],
            ge=1,
        ),
    ) -> PageParams:
        """Return validated pagination parameters.

        Defaults are page=1 and page_size=DEFAULT_PAGE_SIZE; page_size is
        clamped to MAX_PAGE_SIZE.
        """
        p = page if page is not None else cls.MIN_PAGE
        ps = page_size if page_size is not None else cls.DEFAULT_PAGE_SIZE
        ps = max(cls.MIN_PAGE_SIZE, min(cls.MAX_PAGE_SIZE, ps))
        return PageParams(page=max(cls.MIN_PAGE, p), page_size=ps)

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints.

        Use in routes via:

            responses=BaseRouter.std_error_responses()
        """
        return {
            401: {"model": ErrorEnvelope, "description": "Unauthorized (missing/invalid auth)."},
            403: {"model": ErrorEnvelope, "description": "Forbidden (insufficient permissions)."},
            404: {"model": ErrorEnvelope, "description": "Not found."},
            409: {"model": ErrorEnvelope, "description": "Conflict."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }
