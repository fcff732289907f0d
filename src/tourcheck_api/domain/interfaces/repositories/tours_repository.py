# src/tourcheck_api/domain/interfaces/repositories/tours_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Domain-facing interfaces for tour and enrollment persistence.

Notes:
    Implementations never commit; the unit of work owns transactions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from tourcheck_api.domain.entities.tour import Tour, TourEnrollment, TourLeg


class ToursRepository(Protocol):
    """Read access to tours and their legs."""

    async def get_tour(self, tour_id: UUID) -> Tour | None:
        """Return a tour with its legs, or ``None``."""
        raise NotImplementedError

    async def get_tour_by_slug(self, slug: str) -> Tour | None:
        """Return a tour by slug with its legs, or ``None``."""
        raise NotImplementedError

    async def get_leg(self, leg_id: UUID) -> TourLeg | None:
        """Return a leg, or ``None``."""
        raise NotImplementedError


class TourEnrollmentsRepository(Protocol):
    """Enrollment lookups and upsert-on-join."""

    async def get_enrollment(self, user_id: str, tour_id: UUID) -> TourEnrollment | None:
        """Return the member's enrollment for a tour, or ``None``."""
        raise NotImplementedError

    async def upsert_enrollment(
        self, user_id: str, tour_id: UUID, *, accepted_at: datetime
    ) -> TourEnrollment:
        """Create the enrollment, or return the existing one unchanged.

        Args:
            user_id: Member id.
            tour_id: Tour id.
            accepted_at: Acceptance time used only on creation.
        """
        raise NotImplementedError
