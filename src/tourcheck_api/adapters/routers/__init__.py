# src/tourcheck_api/adapters/routers/__init__.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the application router aggregator
    (`api_router`) and the metrics router, keeping `main.py` decoupled from
    router file layout.

Layer:
    adapters/routers
"""

from __future__ import annotations

from .api_router import router as api_router
from .metrics_router import router as metrics_router

__all__ = ["api_router", "metrics_router"]
