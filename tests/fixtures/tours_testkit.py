# tests/fixtures/tours_testkit.py
"""In-memory fakes and builders shared by tour tests.

The fakes implement the repository and gateway Protocols structurally and
keep all state on a single :class:`InMemoryTourStore` so a test can seed
tours, run a use case and inspect what was written.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import TracebackType
from typing import Any
from uuid import UUID

from tourcheck_api.domain.entities.flight import (
    FlightPlan,
    LiveFlight,
    SessionQuery,
    TrackerSession,
)
from tourcheck_api.domain.entities.report import AuditEntry, LegReportWrite, TourLegReport
from tourcheck_api.domain.entities.tour import Tour, TourEnrollment, TourLeg
from tourcheck_api.domain.enums.tour import EnrollmentStatus, ReportStatus
from tourcheck_api.domain.interfaces.repositories.audit_log_repository import (
    AuditLogRepository,
)
from tourcheck_api.domain.interfaces.repositories.tour_leg_reports_repository import (
    TourLegReportsRepository,
)
from tourcheck_api.domain.interfaces.repositories.tours_repository import (
    TourEnrollmentsRepository,
    ToursRepository,
)

FIXED_NOW = datetime(2024, 5, 1, 18, 30, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_tour(
    *,
    rules: list[dict[str, Any]] | str | None = None,
    allow_any_aircraft: bool = False,
    is_published: bool = True,
    legs: Sequence[tuple[str, str]] = (("LPPT", "LPPR"),),
    slug: str = "portugal-tour",
) -> Tour:
    tour_id = uuid.uuid4()
    raw_rules = json.dumps(rules) if isinstance(rules, list) else rules
    return Tour(
        id=tour_id,
        slug=slug,
        title="Portugal Tour",
        allow_any_aircraft=allow_any_aircraft,
        validation_rules=raw_rules,
        is_published=is_published,
        legs=tuple(
            TourLeg(
                id=uuid.uuid4(),
                tour_id=tour_id,
                leg_number=i,
                departure_code=dep,
                arrival_code=arr,
            )
            for i, (dep, arr) in enumerate(legs, start=1)
        ),
    )


def session(
    *,
    session_id: str = "S-1",
    callsign: str = "TAP123",
    user_id: str = "123456",
    created_at: datetime | None = datetime(2024, 5, 1, 10, 0, tzinfo=UTC),
    completed_at: datetime | None = datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    plans: Sequence[FlightPlan] | None = None,
    is_military: bool | None = None,
) -> TrackerSession:
    return TrackerSession(
        id=session_id,
        callsign=callsign,
        user_id=user_id,
        created_at=created_at,
        completed_at=completed_at,
        flight_plans=tuple(plans) if plans is not None else None,
        is_military=is_military,
    )


def plan(departure: str = "LPPT", arrival: str = "LPPR", **kwargs: Any) -> FlightPlan:
    return FlightPlan(departure=departure, arrival=arrival, **kwargs)


# ---------------------------------------------------------------------------
# Store + repositories
# ---------------------------------------------------------------------------


@dataclass
class InMemoryTourStore:
    tours: dict[UUID, Tour] = field(default_factory=dict)
    enrollments: dict[tuple[str, UUID], TourEnrollment] = field(default_factory=dict)
    reports: dict[UUID, TourLegReport] = field(default_factory=dict)
    audit: list[AuditEntry] = field(default_factory=list)
    racing_reports: dict[tuple[str, UUID], TourLegReport] = field(default_factory=dict)
    commits: int = 0
    rollbacks: int = 0
    fail_audit: bool = False

    def add_tour(self, tour: Tour) -> Tour:
        self.tours[tour.id] = tour
        return tour

    def enroll(self, user_id: str, tour: Tour) -> TourEnrollment:
        enrollment = TourEnrollment(
            id=uuid.uuid4(), user_id=user_id, tour_id=tour.id, accepted_at=FIXED_NOW
        )
        self.enrollments[(user_id, tour.id)] = enrollment
        return enrollment

    def add_report(self, report: TourLegReport) -> TourLegReport:
        self.reports[report.id] = report
        return report


class FakeToursRepository:
    def __init__(self, store: InMemoryTourStore) -> None:
        self._store = store

    async def get_tour(self, tour_id: UUID) -> Tour | None:
        return self._store.tours.get(tour_id)

    async def get_tour_by_slug(self, slug: str) -> Tour | None:
        return next((t for t in self._store.tours.values() if t.slug == slug), None)

    async def get_leg(self, leg_id: UUID) -> TourLeg | None:
        for tour in self._store.tours.values():
            for leg in tour.legs:
                if leg.id == leg_id:
                    return leg
        return None

    async def get_enrollment(self, user_id: str, tour_id: UUID) -> TourEnrollment | None:
        return self._store.enrollments.get((user_id, tour_id))

    async def upsert_enrollment(
        self, user_id: str, tour_id: UUID, *, accepted_at: datetime
    ) -> TourEnrollment:
        existing = self._store.enrollments.get((user_id, tour_id))
        if existing is not None:
            return existing
        enrollment = TourEnrollment(
            id=uuid.uuid4(),
            user_id=user_id,
            tour_id=tour_id,
            accepted_at=accepted_at,
            status=EnrollmentStatus.ACTIVE,
        )
        self._store.enrollments[(user_id, tour_id)] = enrollment
        return enrollment


class FakeReportsRepository:
    def __init__(self, store: InMemoryTourStore) -> None:
        self._store = store

    async def get(self, report_id: UUID) -> TourLegReport | None:
        return self._store.reports.get(report_id)

    async def get_by_key(self, user_id: str, tour_leg_id: UUID) -> TourLegReport | None:
        return next(
            (
                r
                for r in self._store.reports.values()
                if r.user_id == user_id and r.tour_leg_id == tour_leg_id
            ),
            None,
        )

    async def upsert(self, write: LegReportWrite) -> tuple[TourLegReport, TourLegReport | None]:
        racing = self._store.racing_reports.pop((write.user_id, write.tour_leg_id), None)
        if racing is not None:
            # A concurrent first submission lands between lookup and insert.
            self._store.reports[racing.id] = racing
        existing = await self.get_by_key(write.user_id, write.tour_leg_id)
        report = TourLegReport(
            id=existing.id if existing is not None else uuid.uuid4(),
            user_id=write.user_id,
            tour_leg_id=write.tour_leg_id,
            status=write.status,
            submitted_at=write.submitted_at,
            reviewed_at=write.reviewed_at,
            reviewed_by_id=None,
            review_note=write.review_note,
            flight_date=write.flight_date,
            callsign=write.callsign,
            aircraft=write.aircraft,
            route=write.route,
            online=write.online,
            evidence_url=write.evidence_url,
            session_id=write.session_id,
        )
        self._store.reports[report.id] = report
        return report, existing

    async def apply_review(
        self,
        report_id: UUID,
        *,
        status: ReportStatus,
        review_note: str | None,
        reviewed_at: datetime,
        reviewed_by_id: str | None,
    ) -> TourLegReport | None:
        existing = self._store.reports.get(report_id)
        if existing is None:
            return None
        updated = replace(
            existing,
            status=status,
            review_note=review_note,
            reviewed_at=reviewed_at,
            reviewed_by_id=reviewed_by_id,
        )
        self._store.reports[report_id] = updated
        return updated

    async def list_reports(
        self, *, status: ReportStatus | None, page: int, page_size: int
    ) -> tuple[Sequence[TourLegReport], int]:
        rows = [r for r in self._store.reports.values() if status is None or r.status is status]
        rows.sort(key=lambda r: r.submitted_at, reverse=True)
        start = (page - 1) * page_size
        return rows[start : start + page_size], len(rows)


class FakeAuditRepository:
    def __init__(self, store: InMemoryTourStore) -> None:
        self._store = store

    async def add(self, entry: AuditEntry) -> None:
        if self._store.fail_audit:
            raise RuntimeError("audit table unavailable")
        self._store.audit.append(entry)


class FakeUnitOfWork:
    """Re-enterable unit of work over an :class:`InMemoryTourStore`."""

    def __init__(self, store: InMemoryTourStore) -> None:
        self.store = store
        self.entered = 0

    async def __aenter__(self) -> FakeUnitOfWork:
        self.entered += 1
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        if exc_type is not None:
            await self.rollback()
        return None

    async def commit(self) -> None:
        self.store.commits += 1

    async def rollback(self) -> None:
        self.store.rollbacks += 1

    def get_repository(self, repo_type: type[Any]) -> Any:
        if repo_type in (ToursRepository, TourEnrollmentsRepository):
            return FakeToursRepository(self.store)
        if repo_type is TourLegReportsRepository:
            return FakeReportsRepository(self.store)
        if repo_type is AuditLogRepository:
            return FakeAuditRepository(self.store)
        raise KeyError(repo_type)


# ---------------------------------------------------------------------------
# Flight directory
# ---------------------------------------------------------------------------


class FakeFlightDirectory:
    """Scripted flight directory; any configured exception is raised on call."""

    def __init__(
        self,
        *,
        plans: dict[str, list[FlightPlan] | Exception] | None = None,
        sessions: list[TrackerSession] | Exception | None = None,
        live: list[LiveFlight] | Exception | None = None,
    ) -> None:
        self.plans = plans or {}
        self.sessions = sessions if sessions is not None else []
        self.live = live if live is not None else []
        self.calls: list[tuple[str, Any]] = []

    async def get_session_flight_plans(self, session_id: str) -> list[FlightPlan]:
        self.calls.append(("flight_plans", session_id))
        result = self.plans.get(session_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def get_sessions(self, query: SessionQuery) -> list[TrackerSession]:
        self.calls.append(("sessions", query))
        if isinstance(self.sessions, Exception):
            raise self.sessions
        return list(self.sessions)

    async def get_live_flights(self) -> list[LiveFlight]:
        self.calls.append(("live", None))
        if isinstance(self.live, Exception):
            raise self.live
        return list(self.live)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]
