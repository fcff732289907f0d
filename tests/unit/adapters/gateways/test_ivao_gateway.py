from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from tourcheck_api.adapters.gateways.ivao_gateway import IvaoFlightDirectoryGateway
from tourcheck_api.domain.entities.flight import SessionQuery
from tourcheck_api.domain.exceptions.flight_directory import FlightDirectoryUnavailable


class StubTransport:
    """Returns canned raw bodies and records call arguments."""

    def __init__(self, **bodies: Any) -> None:
        self.bodies = bodies
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def session_flight_plans(self, session_id: str) -> object:
        self.calls.append(("session_flight_plans", {"session_id": session_id}))
        return self.bodies.get("plans")

    async def sessions(self, **kwargs: Any) -> object:
        self.calls.append(("sessions", kwargs))
        body = self.bodies.get("sessions")
        if isinstance(body, Exception):
            raise body
        return body

    async def live_flights(self) -> object:
        self.calls.append(("live_flights", {}))
        return self.bodies.get("live")


@pytest.mark.asyncio
async def test_flight_plans_are_normalized_and_junk_skipped() -> None:
    transport = StubTransport(
        plans=[
            {"departureId": "lppt", "arrivalId": "lppr", "aircraftId": "a320", "speed": "N0450"},
            "junk",
        ]
    )

    plans = await IvaoFlightDirectoryGateway(transport).get_session_flight_plans("S-1")

    assert len(plans) == 1
    assert plans[0].serves("LPPT", "LPPR")
    assert plans[0].aircraft == "A320"
    assert plans[0].cruising_speed == 450
    assert transport.calls == [("session_flight_plans", {"session_id": "S-1"})]


@pytest.mark.asyncio
async def test_sessions_forward_query_and_sort_newest_first() -> None:
    transport = StubTransport(
        sessions={
            "items": [
                {"id": 1, "callsign": "tap123", "userId": 7, "createdAt": "2024-05-01T08:00:00Z"},
                {"id": 2, "callsign": "TAP123", "userId": 7, "createdAt": "2024-05-01T10:00:00Z"},
                {"id": 3, "callsign": "TAP123", "userId": 7},
            ]
        }
    )
    query = SessionQuery(
        user_id="7",
        callsign="TAP123",
        per_page=10,
        from_=datetime(2024, 5, 1, tzinfo=UTC),
    )

    sessions = await IvaoFlightDirectoryGateway(transport).get_sessions(query)

    assert [s.id for s in sessions] == ["2", "1", "3"]
    assert sessions[1].callsign == "TAP123"
    assert sessions[0].flight_plans is None
    _, kwargs = transport.calls[0]
    assert kwargs["user_id"] == "7"
    assert kwargs["connection_type"] == "PILOT"
    assert kwargs["per_page"] == 10
    assert kwargs["date_from"] == "2024-05-01T00:00:00+00:00"
    assert kwargs["date_to"] is None


@pytest.mark.asyncio
async def test_live_flights_from_nested_snapshot() -> None:
    transport = StubTransport(
        live={
            "clients": {
                "pilots": [
                    {
                        "callsign": "TAP123",
                        "userId": 123456,
                        "flightPlan": {"departureId": "LPPT", "arrivalId": "LPPR"},
                    }
                ]
            }
        }
    )

    [flight] = await IvaoFlightDirectoryGateway(transport).get_live_flights()

    assert flight.callsign == "TAP123"
    assert flight.user_id == "123456"
    assert flight.serves("LPPT", "LPPR")


@pytest.mark.asyncio
async def test_unexpected_shapes_yield_empty_lists() -> None:
    gateway = IvaoFlightDirectoryGateway(StubTransport(plans={"oops": 1}, live="nope"))

    assert await gateway.get_session_flight_plans("S") == []
    assert await gateway.get_live_flights() == []


@pytest.mark.asyncio
async def test_transport_errors_propagate() -> None:
    gateway = IvaoFlightDirectoryGateway(
        StubTransport(sessions=FlightDirectoryUnavailable("down"))
    )

    with pytest.raises(FlightDirectoryUnavailable):
        await gateway.get_sessions(SessionQuery(user_id="1", callsign="X"))
