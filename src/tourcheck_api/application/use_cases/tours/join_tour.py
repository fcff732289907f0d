# src/tourcheck_api/application/use_cases/tours/join_tour.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: Join a tour (upsert-on-join enrollment)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from tourcheck_api.application.schemas.dto.tours import EnrollmentDTO
from tourcheck_api.application.services.audit_trail import AuditTrail
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.exceptions.tour import TourNotFound
from tourcheck_api.domain.interfaces.repositories.tours_repository import (
    TourEnrollmentsRepository,
    ToursRepository,
)


class JoinTourUseCase:
    """Enroll a member in a tour; joining twice keeps the first enrollment."""

    def __init__(
        self,
        *,
        uow: UnitOfWork,
        audit: AuditTrail | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._audit = audit or AuditTrail()
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    async def execute(self, *, user_id: str, tour_id: UUID) -> EnrollmentDTO:
        """Create the member's enrollment if missing and audit the join.

        Raises:
            TourNotFound: Unknown or unpublished tour.
        """
        async with self._uow as tx:
            tours: ToursRepository = tx.get_repository(ToursRepository)
            enrollments: TourEnrollmentsRepository = tx.get_repository(TourEnrollmentsRepository)

            tour = await tours.get_tour(tour_id)
            if tour is None or not tour.is_published:
                raise TourNotFound("Tour not found", details={"tour_id": str(tour_id)})

            before = await enrollments.get_enrollment(user_id, tour_id)
            enrollment = await enrollments.upsert_enrollment(
                user_id, tour_id, accepted_at=self._clock()
            )
            await tx.commit()

            await self._audit.record(
                tx,
                actor_id=user_id,
                entity_type="tourEnrollment",
                entity_id=str(enrollment.id),
                before=before.snapshot() if before is not None else None,
                after=enrollment.snapshot(),
            )

        return EnrollmentDTO.from_entity(enrollment, created=before is None)
