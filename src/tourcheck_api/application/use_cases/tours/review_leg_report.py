# src/tourcheck_api/application/use_cases/tours/review_leg_report.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: Staff review of a tour leg report.

Purpose:
    Manual override path. Overwrites status and review note directly,
    stamping ``reviewed_at`` and the reviewer, without re-running matching or
    evaluation. This is the only path that produces ``REJECTED``.

Layer:
    application/use_cases/tours
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tourcheck_api.application.schemas.dto.tours import LegReportDTO, ReviewLegReportDTO
from tourcheck_api.application.services.audit_trail import AuditTrail
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.enums.tour import ReportStatus
from tourcheck_api.domain.exceptions.tour import InvalidReviewStatus, TourLegReportNotFound
from tourcheck_api.domain.interfaces.repositories.tour_leg_reports_repository import (
    TourLegReportsRepository,
)

logger = logging.getLogger(__name__)


def parse_report_status(raw: str) -> ReportStatus:
    """Parse a status name case-insensitively.

    Raises:
        InvalidReviewStatus: If the value is not PENDING, APPROVED or REJECTED.
    """
    try:
        return ReportStatus(raw.strip().upper())
    except ValueError as exc:
        raise InvalidReviewStatus("Invalid status", details={"status": raw}) from exc


class ReviewLegReportUseCase:
    """Apply a reviewer's status and note to an existing report."""

    def __init__(
        self,
        *,
        uow: UnitOfWork,
        audit: AuditTrail | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            uow: Unit of work resolving reports and audit log.
            audit: Optional audit trail.
            clock: Optional UTC clock, injectable for tests.
        """
        self._uow = uow
        self._audit = audit or AuditTrail()
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    async def execute(self, *, reviewer_id: str, req: ReviewLegReportDTO) -> LegReportDTO:
        """Override a report's status and note.

        Args:
            reviewer_id: Staff member performing the review.
            req: Target report, new status and optional note.

        Returns:
            The updated report.

        Raises:
            InvalidReviewStatus: Unknown status value.
            TourLegReportNotFound: Unknown report id.
        """
        status = parse_report_status(req.status)
        note = (req.note or "").strip() or None

        async with self._uow as tx:
            reports: TourLegReportsRepository = tx.get_repository(TourLegReportsRepository)
            before = await reports.get(req.report_id)
            if before is None:
                raise TourLegReportNotFound(
                    "Report not found", details={"report_id": str(req.report_id)}
                )
            updated = await reports.apply_review(
                req.report_id,
                status=status,
                review_note=note,
                reviewed_at=self._clock(),
                reviewed_by_id=reviewer_id,
            )
            if updated is None:
                raise TourLegReportNotFound(
                    "Report not found", details={"report_id": str(req.report_id)}
                )
            await tx.commit()

            await self._audit.record(
                tx,
                actor_id=reviewer_id,
                entity_type="tourLegReport",
                entity_id=str(updated.id),
                before=before.snapshot(),
                after=updated.snapshot(),
            )

        logger.info(
            "tour_leg_report.reviewed",
            extra={
                "extra": {
                    "report_id": str(updated.id),
                    "from_status": before.status.value,
                    "to_status": status.value,
                }
            },
        )
        return LegReportDTO.from_entity(updated)
