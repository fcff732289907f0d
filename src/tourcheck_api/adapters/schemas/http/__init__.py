# src/tourcheck_api/adapters/schemas/http/__init__.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes and resource schemas used by routers and presenters; the base
    class stays internal to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from tourcheck_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    PaginatedEnvelope,
    SuccessEnvelope,
)
from tourcheck_api.adapters.schemas.http.tours import (
    EnrollmentHTTP,
    LegReportHTTP,
    PublicRuleHTTP,
    ReviewLegReportRequest,
    SubmitLegReportRequest,
    TourRulesHTTP,
)

__all__ = [
    # Envelopes
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "PaginatedEnvelope",
    # Tours
    "SubmitLegReportRequest",
    "ReviewLegReportRequest",
    "LegReportHTTP",
    "EnrollmentHTTP",
    "PublicRuleHTTP",
    "TourRulesHTTP",
]
