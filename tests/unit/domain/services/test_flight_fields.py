from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tourcheck_api.domain.services.flight_fields import (
    first_present,
    flight_plan_from_payload,
    format_number,
    live_flight_from_payload,
    live_flight_items,
    parse_level,
    parse_number,
    parse_timestamp,
    session_from_payload,
    session_items,
    to_code,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (450, 450.0),
        ("450", 450.0),
        ("N0450", 450.0),
        ("450kt", 450.0),
        ("M0.78", 0.78),
        (".5", 0.5),
        ("5.", 5.0),
        ("1.2.3", 1.2),
        ("..5", None),
        ("fast", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_parse_number(raw: object, expected: float | None) -> None:
    assert parse_number(raw) == expected


def test_parse_level_handles_flight_level_prefix() -> None:
    assert parse_level("FL350") == 350.0
    assert parse_level("fl 120") == 120.0
    assert parse_level(350) == 350.0
    assert parse_level(None) is None


def test_format_number_drops_integral_fraction() -> None:
    assert format_number(480.0) == "480"
    assert format_number(480.5) == "480.5"


def test_parse_timestamp_variants() -> None:
    assert parse_timestamp("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, tzinfo=UTC)
    assert parse_timestamp("2024-05-01") == datetime(2024, 5, 1, tzinfo=UTC)
    assert parse_timestamp(1714557600) == datetime(2024, 5, 1, 10, tzinfo=UTC)
    assert parse_timestamp(1714557600000) == datetime(2024, 5, 1, 10, tzinfo=UTC)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp("") is None


def test_first_present_skips_none_but_keeps_empty_string() -> None:
    record = {"departureId": None, "departure": {"icao": ""}}

    assert first_present(record, ("departureId", "departure.icao", "departure")) == ""
    assert first_present("not a mapping", ("x",)) is None


def test_to_code_normalizes_and_blanks_to_none() -> None:
    assert to_code(" lppt ") == "LPPT"
    assert to_code("   ") is None
    assert to_code({"nested": 1}) is None


def test_flight_plan_from_alternate_field_names() -> None:
    plan = flight_plan_from_payload(
        {
            "departure": {"icao": "lppt"},
            "arrival": "LPPR",
            "aircraft": {"icaoCode": "a320"},
            "speed": "N0480",
            "level": "FL350",
            "otherInfo": "tour rzo",
            "rules": "i",
            "isMilitary": False,
            "routeString": " GEMAS UN975 BUSEN ",
        }
    )

    assert plan.departure == "LPPT"
    assert plan.arrival == "LPPR"
    assert plan.aircraft == "A320"
    assert plan.cruising_speed == 480.0
    assert plan.cruising_level == 350.0
    assert plan.remarks == "TOUR RZO"
    assert plan.flight_rules == "I"
    assert plan.is_military is False
    assert plan.route == "GEMAS UN975 BUSEN"


def test_flight_plan_with_nothing_known() -> None:
    plan = flight_plan_from_payload({})

    assert plan.departure is None
    assert plan.cruising_speed is None
    assert plan.is_military is None


def test_session_payload_embedded_plans_and_completion_fallback() -> None:
    sess = session_from_payload(
        {
            "id": 9001,
            "callsign": "tap123",
            "user": {"id": 123456},
            "createdAt": "2024-05-01T10:00:00Z",
            "completedAt": "not-a-date",
            "updatedAt": "2024-05-01T12:00:00Z",
            "flightPlans": [{"departureId": "LPPT", "arrivalId": "LPPR"}, "junk"],
        }
    )

    assert sess.id == "9001"
    assert sess.callsign == "TAP123"
    assert sess.user_id == "123456"
    assert sess.completed_at == datetime(2024, 5, 1, 12, tzinfo=UTC)
    assert sess.flight_plans is not None
    assert len(sess.flight_plans) == 1


def test_session_payload_without_plans_signals_fetch() -> None:
    assert session_from_payload({"id": "1"}).flight_plans is None


def test_live_flight_identity_and_route_fallbacks() -> None:
    flight = live_flight_from_payload(
        {
            "callsign": "TAP123",
            "pilot": {"vid": 123456},
            "flight_plan": {"departureId": "lppt"},
            "destination": "lppr",
        }
    )

    assert flight.user_id == "123456"
    assert flight.departure == "LPPT"
    assert flight.arrival == "LPPR"
    assert flight.serves("LPPT", "LPPR")


def test_item_extraction_shapes() -> None:
    assert session_items({"items": [{"id": 1}, 2]}) == [{"id": 1}]
    assert session_items([{"id": 1}]) == [{"id": 1}]
    assert live_flight_items({"clients": {"pilots": [{"callsign": "A"}]}}) == [{"callsign": "A"}]
    assert live_flight_items({"data": [{"callsign": "B"}]}) == [{"callsign": "B"}]
    assert live_flight_items("garbage") == []
