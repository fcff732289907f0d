# src/tourcheck_api/adapters/repositories/tours_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Tours Repository (SQLAlchemy).

Purpose:
    Concrete implementation of the tour and enrollment repository contracts
    defined in the domain layer.

Layer:
    adapters

Notes:
    Satisfies ``ToursRepository`` and ``TourEnrollmentsRepository`` via
    structural typing; the unit of work registers it under both keys.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tourcheck_api.adapters.repositories.base_repository import BaseRepository
from tourcheck_api.domain.entities.tour import Tour, TourEnrollment, TourLeg
from tourcheck_api.domain.enums.tour import EnrollmentStatus
from tourcheck_api.infrastructure.database.models.tours import (
    TourEnrollmentModel,
    TourLegModel,
    TourModel,
)


class SqlAlchemyToursRepository(BaseRepository[TourModel]):
    """SQLAlchemy-backed tours, legs and enrollments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the primary database.
        """
        super().__init__(session=session)

    # ------------------------------------------------------------------
    # Tours and legs
    # ------------------------------------------------------------------

    async def get_tour(self, tour_id: UUID) -> Tour | None:
        """Return a tour with its legs, or ``None``."""
        row = await self.fetch_optional(select(TourModel).where(TourModel.id == tour_id))
        return self._map_tour(row) if row is not None else None

    async def get_tour_by_slug(self, slug: str) -> Tour | None:
        """Return a tour by slug with its legs, or ``None``."""
        row = await self.fetch_optional(select(TourModel).where(TourModel.slug == slug))
        return self._map_tour(row) if row is not None else None

    async def get_leg(self, leg_id: UUID) -> TourLeg | None:
        """Return a leg, or ``None``."""
        res = await self._session.execute(select(TourLegModel).where(TourLegModel.id == leg_id))
        row = res.scalars().first()
        return self._map_leg(row) if row is not None else None

    # ------------------------------------------------------------------
    # Enrollments
    # ------------------------------------------------------------------

    async def get_enrollment(self, user_id: str, tour_id: UUID) -> TourEnrollment | None:
        """Return the member's enrollment for a tour, or ``None``."""
        row = await self._get_enrollment_row(user_id, tour_id)
        return self._map_enrollment(row) if row is not None else None

    async def upsert_enrollment(
        self, user_id: str, tour_id: UUID, *, accepted_at: datetime
    ) -> TourEnrollment:
        """Create the enrollment, or return the existing one unchanged."""
        existing = await self._get_enrollment_row(user_id, tour_id)
        if existing is not None:
            return self._map_enrollment(existing)

        row = TourEnrollmentModel(
            user_id=user_id,
            tour_id=tour_id,
            accepted_at=accepted_at,
            status=EnrollmentStatus.ACTIVE.value,
        )
        self._session.add(row)
        try:
            await self._session.flush()
        except IntegrityError:
            # A concurrent join won the insert; the enrollment is this
            # transaction's only write.
            await self._session.rollback()
            winner = await self._get_enrollment_row(user_id, tour_id)
            if winner is None:
                raise
            return self._map_enrollment(winner)
        return self._map_enrollment(row)

    async def _get_enrollment_row(self, user_id: str, tour_id: UUID) -> TourEnrollmentModel | None:
        stmt = select(TourEnrollmentModel).where(
            TourEnrollmentModel.user_id == user_id,
            TourEnrollmentModel.tour_id == tour_id,
        )
        res = await self._session.execute(stmt)
        return res.scalars().first()

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _map_leg(row: TourLegModel) -> TourLeg:
        return TourLeg(
            id=row.id,
            tour_id=row.tour_id,
            leg_number=row.leg_number,
            departure_code=row.departure_code.upper(),
            arrival_code=row.arrival_code.upper(),
        )

    def _map_tour(self, row: TourModel) -> Tour:
        return Tour(
            id=row.id,
            slug=row.slug,
            title=row.title,
            allow_any_aircraft=bool(row.allow_any_aircraft),
            validation_rules=row.validation_rules,
            is_published=bool(row.is_published),
            legs=tuple(self._map_leg(leg) for leg in row.legs),
        )

    def _map_enrollment(self, row: TourEnrollmentModel) -> TourEnrollment:
        accepted_at = self.as_utc(row.accepted_at) or self.utc_now()
        return TourEnrollment(
            id=row.id,
            user_id=row.user_id,
            tour_id=row.tour_id,
            accepted_at=accepted_at,
            status=EnrollmentStatus(row.status),
        )
