# src/tourcheck_api/domain/entities/report.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour leg report and audit entities.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from tourcheck_api.domain.entities.base import BaseEntity
from tourcheck_api.domain.enums.tour import AuditAction, ReportStatus


@dataclass(frozen=True, slots=True)
class TourLegReport(BaseEntity):
    """A member's report for one leg; unique per (user_id, tour_leg_id).

    Attributes:
        id: Report identifier, stable across resubmissions.
        user_id: Authoring member.
        tour_leg_id: Reported leg.
        status: Current status.
        submitted_at: Time of the latest submission.
        reviewed_at: Time of the latest automated approval or staff review.
        reviewed_by_id: Staff member who last reviewed, if any.
        review_note: Human-readable explanation of the verdict.
        flight_date: Submitted flight date.
        callsign: Submitted callsign.
        aircraft: Submitted aircraft type.
        route: Submitted route text.
        online: Member's online self-declaration.
        evidence_url: Optional evidence link.
        session_id: Optional directory session reference.
    """

    id: UUID
    user_id: str
    tour_leg_id: UUID
    status: ReportStatus
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

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-friendly snapshot used for audit before/after images."""
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "tourLegId": str(self.tour_leg_id),
            "status": self.status.value,
            "submittedAt": self.submitted_at.isoformat(),
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewedById": self.reviewed_by_id,
            "reviewNote": self.review_note,
            "flightDate": self.flight_date.isoformat() if self.flight_date else None,
            "callsign": self.callsign,
            "aircraft": self.aircraft,
            "route": self.route,
            "online": self.online,
            "evidenceUrl": self.evidence_url,
            "sessionId": self.session_id,
        }


@dataclass(frozen=True, slots=True)
class LegReportWrite(BaseEntity):
    """Field set written by a submission upsert, keyed by (user_id, tour_leg_id)."""

    user_id: str
    tour_leg_id: UUID
    status: ReportStatus
    submitted_at: datetime
    reviewed_at: datetime | None
    review_note: str | None
    flight_date: datetime | None
    callsign: str | None
    aircraft: str | None
    route: str | None
    online: bool
    evidence_url: str | None
    session_id: str | None


@dataclass(frozen=True, slots=True)
class AuditEntry(BaseEntity):
    """Before/after record of one entity write.

    Attributes:
        actor_id: Member or staff id performing the write.
        action: ``create`` or ``update``.
        entity_type: Logical entity name (e.g. ``tourLegReport``).
        entity_id: Identifier of the written entity.
        before: Snapshot before the write; ``None`` on creation.
        after: Snapshot after the write.
    """

    actor_id: str | None
    action: AuditAction
    entity_type: str
    entity_id: str
    before: dict[str, Any] | None
    after: dict[str, Any] | None
