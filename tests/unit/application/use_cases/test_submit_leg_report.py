from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import pytest
from tours_testkit import (
    FIXED_NOW,
    FakeFlightDirectory,
    FakeUnitOfWork,
    InMemoryTourStore,
    fixed_clock,
    make_tour,
    plan,
    session,
)

from tourcheck_api.application.schemas.dto.tours import SubmitLegReportDTO
from tourcheck_api.application.services.flight_matcher import FlightMatcher
from tourcheck_api.application.use_cases.tours.submit_leg_report import (
    SubmitLegReportUseCase,
    build_submission,
)
from tourcheck_api.domain.entities.flight import LiveFlight
from tourcheck_api.domain.entities.report import TourLegReport
from tourcheck_api.domain.entities.tour import Tour
from tourcheck_api.domain.enums.tour import AuditAction, ReportStatus
from tourcheck_api.domain.exceptions.flight_directory import FlightDirectoryUnavailable
from tourcheck_api.domain.exceptions.tour import EnrollmentRequired, TourLegNotFound

USER = "member-1"
VID = "123456"


def _use_case(store: InMemoryTourStore, directory: FakeFlightDirectory) -> SubmitLegReportUseCase:
    return SubmitLegReportUseCase(
        uow=FakeUnitOfWork(store),
        matcher=FlightMatcher(directory),
        clock=fixed_clock,
    )


def _request(leg_id: uuid.UUID, **overrides: object) -> SubmitLegReportDTO:
    values: dict[str, object] = {
        "leg_id": leg_id,
        "flight_date": "2024-05-01T11:00:00Z",
        "callsign": " tap123 ",
        "aircraft": "A320",
        "route": "LPPT DCT LPPR",
        "online": True,
    }
    values.update(overrides)
    return SubmitLegReportDTO(**values)  # type: ignore[arg-type]


def _enrolled_tour(store: InMemoryTourStore, **tour_kwargs: Any) -> Tour:
    tour = store.add_tour(make_tour(**tour_kwargs))
    store.enroll(USER, tour)
    return tour


def test_build_submission_normalizes_fields() -> None:
    leg_id = uuid.uuid4()
    submission = build_submission(
        _request(leg_id, session_id="  ", flight_date="2024-05-01"), vid=" 123456 "
    )

    assert submission.callsign == "TAP123"
    assert submission.vid == "123456"
    assert submission.session_id is None
    assert submission.flight_date == datetime(2024, 5, 1, tzinfo=UTC)
    assert submission.online is True


@pytest.mark.asyncio
async def test_speed_violation_keeps_report_pending() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store, rules=[{"key": "maxSpeed", "value": "450"}])
    directory = FakeFlightDirectory(sessions=[session(plans=[plan(cruising_speed=480)])])

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "PENDING"
    assert dto.review_note == "Auto-validation failed: Speed 480 exceeds 450"
    assert dto.reviewed_at is None
    assert dto.match_source == "sessions"
    assert dto.callsign == "tap123"


@pytest.mark.asyncio
async def test_live_match_with_callsign_rule_is_approved() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(
        store,
        rules=[{"key": "callsign", "value": "TAP"}, {"key": "maxSpeed", "value": "300"}],
    )
    directory = FakeFlightDirectory(
        sessions=FlightDirectoryUnavailable("down"),
        live=[LiveFlight(callsign="TAP123", user_id=VID, departure="LPPT", arrival="LPPR")],
    )

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "APPROVED"
    assert dto.review_note == "Auto-approved: matched IVAO live flight."
    assert dto.match_source == "live"
    assert dto.reviewed_at == FIXED_NOW


@pytest.mark.asyncio
async def test_live_match_still_checks_callsign_prefix() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store, rules=[{"key": "callsign", "value": "RZO"}])
    directory = FakeFlightDirectory(
        live=[LiveFlight(callsign="TAP123", user_id=VID, departure="LPPT", arrival="LPPR")],
    )

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "PENDING"
    assert dto.review_note == "Auto-validation failed: Callsign does not match required prefix"


@pytest.mark.asyncio
async def test_session_match_without_rules_is_approved() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store)
    directory = FakeFlightDirectory(sessions=[session(plans=[plan()])])

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "APPROVED"
    assert dto.review_note == "Auto-approved: matched IVAO session."


@pytest.mark.asyncio
async def test_no_match_note_when_directory_has_nothing() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store)
    directory = FakeFlightDirectory(sessions=[session(plans=[plan("LPPT", "LPFR")])])

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "PENDING"
    assert dto.review_note == "Auto-validation failed: no matching session or live flight found."
    assert dto.match_source is None


@pytest.mark.asyncio
async def test_missing_vid_fails_precondition_without_directory_calls() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store)
    directory = FakeFlightDirectory(sessions=[session(plans=[plan()])])

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=None, req=_request(tour.legs[0].id)
    )

    assert dto.status == "PENDING"
    assert dto.review_note == "Auto-validation failed: user VID unavailable for matching."
    assert directory.calls == []


@pytest.mark.asyncio
async def test_resubmission_keeps_id_and_clears_reviewer() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store)
    leg = tour.legs[0]
    original = store.add_report(
        TourLegReport(
            id=uuid.uuid4(),
            user_id=USER,
            tour_leg_id=leg.id,
            status=ReportStatus.REJECTED,
            submitted_at=datetime(2024, 4, 1, tzinfo=UTC),
            reviewed_at=datetime(2024, 4, 2, tzinfo=UTC),
            reviewed_by_id="staff-1",
            review_note="Wrong aircraft",
        )
    )
    directory = FakeFlightDirectory(sessions=[session(plans=[plan()])])

    dto = await _use_case(store, directory).execute(user_id=USER, vid=VID, req=_request(leg.id))

    assert dto.id == original.id
    assert dto.reviewed_by_id is None
    assert dto.status == "APPROVED"
    assert dto.submitted_at == FIXED_NOW
    assert len(store.reports) == 1
    [entry] = store.audit
    assert entry.action is AuditAction.UPDATE
    assert entry.before is not None and entry.before["status"] == "REJECTED"


@pytest.mark.asyncio
async def test_concurrent_first_submission_is_audited_as_update() -> None:
    store = InMemoryTourStore()
    tour = _enrolled_tour(store)
    leg = tour.legs[0]
    concurrent = TourLegReport(
        id=uuid.uuid4(),
        user_id=USER,
        tour_leg_id=leg.id,
        status=ReportStatus.PENDING,
        submitted_at=datetime(2024, 5, 1, 18, 29, tzinfo=UTC),
        callsign="TAP999",
    )
    store.racing_reports[(USER, leg.id)] = concurrent
    directory = FakeFlightDirectory(sessions=[session(plans=[plan()])])

    dto = await _use_case(store, directory).execute(user_id=USER, vid=VID, req=_request(leg.id))

    assert dto.id == concurrent.id
    [entry] = store.audit
    assert entry.action is AuditAction.UPDATE
    assert entry.before is not None and entry.before["callsign"] == "TAP999"


@pytest.mark.asyncio
async def test_not_enrolled_aborts_before_matching() -> None:
    store = InMemoryTourStore()
    tour = store.add_tour(make_tour())
    directory = FakeFlightDirectory()

    with pytest.raises(EnrollmentRequired):
        await _use_case(store, directory).execute(
            user_id=USER, vid=VID, req=_request(tour.legs[0].id)
        )

    assert directory.calls == []
    assert store.reports == {}


@pytest.mark.asyncio
async def test_unknown_leg_aborts() -> None:
    store = InMemoryTourStore()
    directory = FakeFlightDirectory()

    with pytest.raises(TourLegNotFound):
        await _use_case(store, directory).execute(
            user_id=USER, vid=VID, req=_request(uuid.uuid4())
        )

    assert directory.calls == []


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_submission() -> None:
    store = InMemoryTourStore(fail_audit=True)
    tour = _enrolled_tour(store)
    directory = FakeFlightDirectory(sessions=[session(plans=[plan()])])

    dto = await _use_case(store, directory).execute(
        user_id=USER, vid=VID, req=_request(tour.legs[0].id)
    )

    assert dto.status == "APPROVED"
    assert dto.id in store.reports
    assert store.commits == 1
    assert store.audit == []
