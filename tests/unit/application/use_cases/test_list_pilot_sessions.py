from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from tours_testkit import FakeFlightDirectory, plan, session

from tourcheck_api.application.use_cases.tours.list_pilot_sessions import (
    SESSION_PICKER_LIMIT,
    ListPilotSessionsUseCase,
)
from tourcheck_api.domain.exceptions.flight_directory import (
    FlightDirectoryBadRequest,
    FlightDirectoryUnavailable,
)
from tourcheck_api.domain.exceptions.tour import DirectoryIdentityRequired

DAY = date(2024, 5, 1)
VID = "123456"


def _utc(month: int, day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, month, day, hour, minute, tzinfo=UTC)


@pytest.mark.asyncio
async def test_keeps_only_sessions_overlapping_the_day() -> None:
    directory = FakeFlightDirectory(
        sessions=[
            session(session_id="DAY", created_at=_utc(5, 1, 10), completed_at=_utc(5, 1, 12)),
            session(session_id="INTO", created_at=_utc(4, 30, 22), completed_at=_utc(5, 1, 0)),
            session(session_id="OUT", created_at=_utc(5, 1, 23), completed_at=_utc(5, 2, 2)),
            session(session_id="OPEN", created_at=_utc(5, 1, 18), completed_at=None),
            session(session_id="PREV", created_at=_utc(4, 30, 8), completed_at=_utc(4, 30, 23)),
            session(session_id="NEXT", created_at=_utc(5, 2, 0), completed_at=_utc(5, 2, 1)),
            session(session_id="UNDATED", created_at=None, completed_at=_utc(5, 1, 12)),
        ]
    )

    items = await ListPilotSessionsUseCase(gateway=directory).execute(vid=VID, day=DAY)

    assert [item.id for item in items] == ["DAY", "INTO", "OUT", "OPEN"]


@pytest.mark.asyncio
async def test_searches_pilot_sessions_by_identity_only() -> None:
    directory = FakeFlightDirectory(sessions=[])

    await ListPilotSessionsUseCase(gateway=directory).execute(vid=VID, day=DAY)

    [(name, query)] = directory.calls
    assert name == "sessions"
    assert query.user_id == VID
    assert query.callsign is None
    assert query.connection_type == "PILOT"
    assert query.page == 1
    assert query.per_page == SESSION_PICKER_LIMIT


@pytest.mark.asyncio
async def test_first_fetched_plan_describes_the_session() -> None:
    fetched = plan(
        aircraft="A320",
        route="GEMAS UN975 BUSEN",
        flight_rules="I",
        remarks="PBN/A1B1",
        cruising_speed=450,
        cruising_level=350,
    )
    directory = FakeFlightDirectory(
        sessions=[session(session_id="S-1", plans=[plan(aircraft="B738")], is_military=False)],
        plans={"S-1": [fetched, plan(aircraft="E190")]},
    )

    [item] = await ListPilotSessionsUseCase(gateway=directory).execute(vid=VID, day=DAY)

    assert item.callsign == "TAP123"
    assert item.aircraft == "A320"
    assert (item.departure, item.arrival) == ("LPPT", "LPPR")
    assert item.route == "GEMAS UN975 BUSEN"
    assert item.flight_rules == "I"
    assert item.remarks == "PBN/A1B1"
    assert item.cruising_speed == 450
    assert item.cruising_level == 350
    assert item.is_military is False


@pytest.mark.asyncio
async def test_plan_fetch_failure_falls_back_to_embedded_plans() -> None:
    directory = FakeFlightDirectory(
        sessions=[
            session(session_id="EMBEDDED", plans=[plan(aircraft="B738")]),
            session(session_id="BARE", plans=None),
        ],
        plans={
            "EMBEDDED": FlightDirectoryUnavailable("timeout"),
            "BARE": FlightDirectoryBadRequest("nope"),
        },
    )

    items = await ListPilotSessionsUseCase(gateway=directory).execute(vid=VID, day=DAY)

    by_id = {item.id: item for item in items}
    assert by_id["EMBEDDED"].aircraft == "B738"
    assert by_id["BARE"].aircraft is None
    assert by_id["BARE"].callsign == "TAP123"


@pytest.mark.asyncio
async def test_missing_identity_aborts_before_any_directory_call() -> None:
    directory = FakeFlightDirectory()

    with pytest.raises(DirectoryIdentityRequired):
        await ListPilotSessionsUseCase(gateway=directory).execute(vid=None, day=DAY)

    assert directory.calls == []


@pytest.mark.asyncio
async def test_session_search_failure_propagates() -> None:
    directory = FakeFlightDirectory(sessions=FlightDirectoryUnavailable("down"))

    with pytest.raises(FlightDirectoryUnavailable):
        await ListPilotSessionsUseCase(gateway=directory).execute(vid=VID, day=DAY)
