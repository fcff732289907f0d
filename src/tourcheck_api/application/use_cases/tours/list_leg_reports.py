# src/tourcheck_api/application/use_cases/tours/list_leg_reports.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: List leg reports for staff, optionally filtered by status."""

from __future__ import annotations

from tourcheck_api.application.schemas.dto.tours import (
    LegReportDTO,
    LegReportPageDTO,
    ListLegReportsQueryDTO,
)
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.application.use_cases.tours.review_leg_report import parse_report_status
from tourcheck_api.domain.interfaces.repositories.tour_leg_reports_repository import (
    TourLegReportsRepository,
)


class ListLegReportsUseCase:
    """Page through leg reports, newest submission first."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, query: ListLegReportsQueryDTO) -> LegReportPageDTO:
        """Return one page of reports.

        Raises:
            InvalidReviewStatus: If ``query.status`` is not a known status.
        """
        status = parse_report_status(query.status) if query.status else None
        async with self._uow as tx:
            reports: TourLegReportsRepository = tx.get_repository(TourLegReportsRepository)
            items, total = await reports.list_reports(
                status=status, page=query.page, page_size=query.page_size
            )
        return LegReportPageDTO(
            items=[LegReportDTO.from_entity(r) for r in items],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
