# src/tourcheck_api/adapters/routers/api_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose and expose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount health endpoints under `/health`.
    • Mount member tour endpoints under `/v1/tours/...`.
    • Mount staff review endpoints under `/v1/admin/tour-reports/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from tourcheck_api.adapters.routers.health_router import router as health_router
from tourcheck_api.adapters.routers.tour_reports_admin_router import (
    router as tour_reports_admin_router,
)
from tourcheck_api.adapters.routers.tours_router import router as tours_router

router = APIRouter()

router.include_router(health_router, prefix="/health", tags=["Health"])

# BaseRouter already includes the /v1/tours prefix.
router.include_router(tours_router)

# BaseRouter already includes the /v1/admin/tour-reports prefix.
router.include_router(tour_reports_admin_router)
