# src/tourcheck_api/domain/entities/tour.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour, TourLeg and TourEnrollment entities.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from tourcheck_api.domain.entities.base import BaseEntity
from tourcheck_api.domain.enums.tour import EnrollmentStatus


@dataclass(frozen=True, slots=True)
class TourLeg(BaseEntity):
    """One scripted departure to arrival segment of a tour.

    Attributes:
        id: Leg identifier.
        tour_id: Owning tour.
        leg_number: Sequence position, unique within the tour (1-based).
        departure_code: Departure aerodrome code (upper-case ICAO).
        arrival_code: Arrival aerodrome code (upper-case ICAO).
    """

    id: UUID
    tour_id: UUID
    leg_number: int
    departure_code: str
    arrival_code: str

    def __post_init__(self) -> None:
        """Validate leg invariants."""
        if self.leg_number < 1:
            raise ValueError("leg_number must be >= 1")
        if not self.departure_code.strip() or not self.arrival_code.strip():
            raise ValueError("departure_code and arrival_code are required")


@dataclass(frozen=True, slots=True)
class Tour(BaseEntity):
    """A multi-leg campaign with its stored validation rules.

    Attributes:
        id: Tour identifier.
        slug: URL-safe unique handle.
        title: Display title.
        allow_any_aircraft: When true, aircraft rules are never enforced.
        validation_rules: Raw JSON text of rule tuples, as stored.
        is_published: Whether members can see the tour.
        legs: Legs ordered by ``leg_number``.
    """

    id: UUID
    slug: str
    title: str
    allow_any_aircraft: bool = False
    validation_rules: str | None = None
    is_published: bool = True
    legs: tuple[TourLeg, ...] = ()


@dataclass(frozen=True, slots=True)
class TourEnrollment(BaseEntity):
    """A member's acceptance of a tour; unique per (user_id, tour_id)."""

    id: UUID
    user_id: str
    tour_id: UUID
    accepted_at: datetime
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-friendly snapshot used for audit before/after images."""
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "tourId": str(self.tour_id),
            "acceptedAt": self.accepted_at.isoformat(),
            "status": self.status.value,
        }
