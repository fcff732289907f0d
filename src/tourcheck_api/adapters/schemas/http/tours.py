# src/tourcheck_api/adapters/schemas/http/tours.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour HTTP schemas (Adapters Layer).

Request bodies for submissions and reviews, and resource representations
for reports, enrollments, public rules and the pilot session picker.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from tourcheck_api.adapters.schemas.http.base import BaseHTTPSchema


class SubmitLegReportRequest(BaseHTTPSchema):
    """Body of ``POST /v1/tours/legs/{leg_id}/reports``.

    Free-text fields are stored as given (trimmed); the flight date accepts an
    ISO date or timestamp and is parsed leniently.
    """

    session_id: str | None = Field(default=None, max_length=64, examples=["53720458"])
    flight_date: str | None = Field(default=None, examples=["2024-05-01"])
    callsign: str | None = Field(default=None, max_length=32, examples=["TAP123"])
    aircraft: str | None = Field(default=None, max_length=32, examples=["A320"])
    route: str | None = Field(default=None, max_length=2000)
    online: bool = Field(default=False, description="Flight was flown online.")
    evidence_url: str | None = Field(default=None, max_length=2000)


class ReviewLegReportRequest(BaseHTTPSchema):
    """Body of ``POST /v1/admin/tour-reports/{report_id}/review``."""

    status: str = Field(..., examples=["APPROVED"], description="PENDING, APPROVED or REJECTED.")
    note: str | None = Field(default=None, max_length=2000)


class LegReportHTTP(BaseHTTPSchema):
    """Leg report resource."""

    id: UUID
    user_id: str
    tour_leg_id: UUID
    status: Literal["PENDING", "APPROVED", "REJECTED"]
    submitted_at: datetime
    reviewed_at: datetime | None = None
    reviewed_by_id: str | None = None
    review_note: str | None = None
    flight_date: datetime | None = None
    callsign: str | None = None
    aircraft: str | None = None
    route: str | None = None
    online: bool = False
    evidence_url: str | None = None
    session_id: str | None = None
    match_source: Literal["sessions", "live"] | None = None


class EnrollmentHTTP(BaseHTTPSchema):
    """Tour enrollment resource."""

    id: UUID
    user_id: str
    tour_id: UUID
    accepted_at: datetime
    status: str
    created: bool = Field(..., description="True when this call created the enrollment.")


class PublicRuleHTTP(BaseHTTPSchema):
    """Member-visible rule."""

    key: str
    label: str


class TourRulesHTTP(BaseHTTPSchema):
    """Public rules of a tour."""

    tour_id: UUID
    slug: str
    title: str
    allow_any_aircraft: bool
    rules: list[PublicRuleHTTP]


class PilotSessionHTTP(BaseHTTPSchema):
    """Directory pilot session offered by the session picker."""

    id: str | None = Field(..., examples=["53720458"], description="Directory session id.")
    callsign: str
    created_at: datetime | None = None
    completed_at: datetime | None = None
    aircraft: str | None = None
    departure: str | None = None
    arrival: str | None = None
    route: str | None = None
    flight_rules: str | None = None
    remarks: str | None = None
    cruising_speed: float | None = None
    cruising_level: float | None = Field(default=None, description="Flight level number.")
    is_military: bool | None = None


class PilotSessionsHTTP(BaseHTTPSchema):
    """Pilot sessions of one UTC day."""

    items: list[PilotSessionHTTP]
