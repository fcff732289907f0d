# src/tourcheck_api/application/schemas/dto/tours.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour DTOs (Application Layer).

Purpose:
    Inputs and outputs of the tour use cases: leg report submission and
    review, enrollment, report listing, public rule display and the pilot
    session picker.

Layer: application/schemas/dto
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from tourcheck_api.application.schemas.dto.base import BaseDTO
from tourcheck_api.domain.entities.flight import FlightPlan, TrackerSession
from tourcheck_api.domain.entities.report import TourLegReport
from tourcheck_api.domain.entities.tour import TourEnrollment


class SubmitLegReportDTO(BaseDTO):
    """Member submission for one leg; all fields but ``online`` are free text."""

    leg_id: UUID
    session_id: str | None = None
    flight_date: str | None = None
    callsign: str | None = None
    aircraft: str | None = None
    route: str | None = None
    online: bool = False
    evidence_url: str | None = None


class LegReportDTO(BaseDTO):
    """Leg report as returned to members and staff."""

    id: UUID
    user_id: str
    tour_leg_id: UUID
    status: str
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
    match_source: str | None = Field(
        default=None,
        description="Strategy that matched on this submission ('sessions' or 'live').",
    )

    @classmethod
    def from_entity(cls, report: TourLegReport, *, match_source: str | None = None) -> LegReportDTO:
        """Build the DTO from a domain report."""
        return cls(
            id=report.id,
            user_id=report.user_id,
            tour_leg_id=report.tour_leg_id,
            status=report.status.value,
            submitted_at=report.submitted_at,
            reviewed_at=report.reviewed_at,
            reviewed_by_id=report.reviewed_by_id,
            review_note=report.review_note,
            flight_date=report.flight_date,
            callsign=report.callsign,
            aircraft=report.aircraft,
            route=report.route,
            online=report.online,
            evidence_url=report.evidence_url,
            session_id=report.session_id,
            match_source=match_source,
        )


class ReviewLegReportDTO(BaseDTO):
    """Staff override of a report's status and note."""

    report_id: UUID
    status: str
    note: str | None = None


class ListLegReportsQueryDTO(BaseDTO):
    """Staff listing filter."""

    status: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)


class LegReportPageDTO(BaseDTO):
    """One page of leg reports."""

    items: list[LegReportDTO]
    total: int
    page: int
    page_size: int


class EnrollmentDTO(BaseDTO):
    """Enrollment after a join."""

    id: UUID
    user_id: str
    tour_id: UUID
    accepted_at: datetime
    status: str
    created: bool

    @classmethod
    def from_entity(cls, enrollment: TourEnrollment, *, created: bool) -> EnrollmentDTO:
        """Build the DTO from a domain enrollment."""
        return cls(
            id=enrollment.id,
            user_id=enrollment.user_id,
            tour_id=enrollment.tour_id,
            accepted_at=enrollment.accepted_at,
            status=enrollment.status.value,
            created=created,
        )


class PublicRuleDTO(BaseDTO):
    """A member-visible rule."""

    key: str
    label: str


class TourRulesDTO(BaseDTO):
    """Public rules of a tour."""

    tour_id: UUID
    slug: str
    title: str
    allow_any_aircraft: bool
    rules: list[PublicRuleDTO]


class PilotSessionDTO(BaseDTO):
    """A directory pilot session offered to prefill a leg report.

    Plan fields come from the session's first flight plan and are ``None``
    when the session has none.
    """

    id: str | None
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
    cruising_level: float | None = None
    is_military: bool | None = None

    @classmethod
    def from_entities(cls, session: TrackerSession, plan: FlightPlan | None) -> PilotSessionDTO:
        """Build the DTO from a session and its first plan, if any."""
        fp = plan if plan is not None else FlightPlan()
        return cls(
            id=session.id,
            callsign=session.callsign or "",
            created_at=session.created_at,
            completed_at=session.completed_at,
            aircraft=fp.aircraft,
            departure=fp.departure,
            arrival=fp.arrival,
            route=fp.route,
            flight_rules=fp.flight_rules,
            remarks=fp.remarks,
            cruising_speed=fp.cruising_speed,
            cruising_level=fp.cruising_level,
            is_military=session.is_military,
        )
