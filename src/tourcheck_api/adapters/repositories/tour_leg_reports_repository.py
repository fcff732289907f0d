# src/tourcheck_api/adapters/repositories/tour_leg_reports_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Tour Leg Reports Repository (SQLAlchemy).

Purpose:
    Persist leg reports with upsert semantics on (user_id, tour_leg_id) and
    serve the staff review queue.

Layer:
    adapters

Notes:
    * Resubmissions overwrite the existing row in place; the report id is
      stable and ``reviewed_by_id`` is cleared.
    * A unique violation on insert (concurrent first submissions) rolls the
      session back and retries as an in-place update. The upsert is the only
      write in its transaction.
    * ``upsert`` returns the row state it overwrote, so the audit trail sees
      the real pre-image even after a lost insert race.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tourcheck_api.adapters.repositories.base_repository import BaseRepository
from tourcheck_api.domain.entities.report import LegReportWrite, TourLegReport
from tourcheck_api.domain.enums.tour import ReportStatus
from tourcheck_api.infrastructure.database.models.tours import TourLegReportModel


class SqlAlchemyTourLegReportsRepository(BaseRepository[TourLegReportModel]):
    """SQLAlchemy-backed implementation of the leg reports contract."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the primary database.
        """
        super().__init__(session=session)

    async def get(self, report_id: UUID) -> TourLegReport | None:
        """Return a report by id, or ``None``."""
        row = await self.fetch_optional(
            select(TourLegReportModel).where(TourLegReportModel.id == report_id)
        )
        return self._map(row) if row is not None else None

    async def get_by_key(self, user_id: str, tour_leg_id: UUID) -> TourLegReport | None:
        """Return the member's report for a leg, or ``None``."""
        row = await self._get_row_by_key(user_id, tour_leg_id)
        return self._map(row) if row is not None else None

    async def upsert(self, write: LegReportWrite) -> tuple[TourLegReport, TourLegReport | None]:
        """Insert or overwrite the report keyed by (user_id, tour_leg_id).

        Args:
            write: Full field set of the submission.

        Returns:
            The persisted report and the report it overwrote, or ``None`` when
            a new row was inserted. After a lost insert race the overwritten
            report is the concurrent winner's row.
        """
        existing = await self._get_row_by_key(write.user_id, write.tour_leg_id)
        if existing is not None:
            return await self._overwrite(existing, write)

        row = TourLegReportModel(user_id=write.user_id, tour_leg_id=write.tour_leg_id)
        self._apply(row, write)
        self._session.add(row)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            winner = await self._get_row_by_key(write.user_id, write.tour_leg_id)
            if winner is None:
                raise
            return await self._overwrite(winner, write)
        return self._map(row), None

    async def apply_review(
        self,
        report_id: UUID,
        *,
        status: ReportStatus,
        review_note: str | None,
        reviewed_at: datetime,
        reviewed_by_id: str | None,
    ) -> TourLegReport | None:
        """Overwrite status and note of an existing report."""
        row = await self.fetch_optional(
            select(TourLegReportModel).where(TourLegReportModel.id == report_id)
        )
        if row is None:
            return None
        row.status = status.value
        row.review_note = review_note
        row.reviewed_at = reviewed_at
        row.reviewed_by_id = reviewed_by_id
        await self._session.flush()
        return self._map(row)

    async def list_reports(
        self,
        *,
        status: ReportStatus | None,
        page: int,
        page_size: int,
    ) -> tuple[Sequence[TourLegReport], int]:
        """Return one page of reports, newest submission first, and the total.

        Args:
            status: Optional status filter.
            page: 1-based page index.
            page_size: Items per page.
        """
        stmt = select(TourLegReportModel)
        if status is not None:
            stmt = stmt.where(TourLegReportModel.status == status.value)

        total = await self.count(stmt)
        ordered = self.order_by_latest(
            stmt, TourLegReportModel.submitted_at, TourLegReportModel.id
        )
        rows = await self.fetch_all(ordered.offset((page - 1) * page_size).limit(page_size))
        return [self._map(r) for r in rows], total

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _get_row_by_key(self, user_id: str, tour_leg_id: UUID) -> TourLegReportModel | None:
        stmt = select(TourLegReportModel).where(
            TourLegReportModel.user_id == user_id,
            TourLegReportModel.tour_leg_id == tour_leg_id,
        )
        return await self.fetch_optional(stmt)

    async def _overwrite(
        self, row: TourLegReportModel, write: LegReportWrite
    ) -> tuple[TourLegReport, TourLegReport]:
        previous = self._map(row)
        self._apply(row, write)
        await self._session.flush()
        return self._map(row), previous

    @staticmethod
    def _apply(row: TourLegReportModel, write: LegReportWrite) -> None:
        values: dict[str, Any] = {
            "status": write.status.value,
            "submitted_at": write.submitted_at,
            "reviewed_at": write.reviewed_at,
            "reviewed_by_id": None,
            "review_note": write.review_note,
            "flight_date": write.flight_date,
            "callsign": write.callsign,
            "aircraft": write.aircraft,
            "route": write.route,
            "online": write.online,
            "evidence_url": write.evidence_url,
            "session_id": write.session_id,
        }
        for name, value in values.items():
            setattr(row, name, value)

    def _map(self, row: TourLegReportModel) -> TourLegReport:
        return TourLegReport(
            id=row.id,
            user_id=row.user_id,
            tour_leg_id=row.tour_leg_id,
            status=ReportStatus(row.status),
            submitted_at=self.as_utc(row.submitted_at) or self.utc_now(),
            reviewed_at=self.as_utc(row.reviewed_at),
            reviewed_by_id=row.reviewed_by_id,
            review_note=row.review_note,
            flight_date=self.as_utc(row.flight_date),
            callsign=row.callsign,
            aircraft=row.aircraft,
            route=row.route,
            online=bool(row.online),
            evidence_url=row.evidence_url,
            session_id=row.session_id,
        )
