# src/tourcheck_api/domain/interfaces/repositories/tour_leg_reports_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Domain-facing interface for tour leg report persistence.

Notes:
    * Reports are unique per (user_id, tour_leg_id); submissions upsert on
      that key and never create a second row.
    * Implementations never commit; the unit of work owns transactions.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from tourcheck_api.domain.entities.report import LegReportWrite, TourLegReport
from tourcheck_api.domain.enums.tour import ReportStatus


class TourLegReportsRepository(Protocol):
    """Persistence contract for leg reports."""

    async def get(self, report_id: UUID) -> TourLegReport | None:
        """Return a report by id, or ``None``."""
        raise NotImplementedError

    async def get_by_key(self, user_id: str, tour_leg_id: UUID) -> TourLegReport | None:
        """Return the member's report for a leg, or ``None``."""
        raise NotImplementedError

    async def upsert(self, write: LegReportWrite) -> tuple[TourLegReport, TourLegReport | None]:
        """Insert or overwrite the report keyed by (user_id, tour_leg_id).

        Overwrites keep the row identity and clear ``reviewed_by_id``.

        Returns:
            The persisted report and the pre-image it overwrote, or ``None``
            when the report was created.
        """
        raise NotImplementedError

    async def apply_review(
        self,
        report_id: UUID,
        *,
        status: ReportStatus,
        review_note: str | None,
        reviewed_at: datetime,
        reviewed_by_id: str | None,
    ) -> TourLegReport | None:
        """Overwrite status and note of an existing report.

        Returns:
            The updated report, or ``None`` when it does not exist.
        """
        raise NotImplementedError

    async def list_reports(
        self,
        *,
        status: ReportStatus | None,
        page: int,
        page_size: int,
    ) -> tuple[Sequence[TourLegReport], int]:
        """Return one page of reports, newest submission first, and the total."""
        raise NotImplementedError
