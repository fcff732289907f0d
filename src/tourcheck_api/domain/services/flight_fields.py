# src/tourcheck_api/domain/services/flight_fields.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Defensive field extraction for flight directory payloads.

Purpose:
    Directory responses vary in field naming across endpoints and over time.
    Instead of trusting one schema, each attribute is read by trying an
    ordered list of candidate paths and falling back to ``None``.

Layer:
    domain/services

Notes:
    - Pure functions; no logging, no I/O.
    - Codes are trimmed and upper-cased; blanks become ``None``.
    - A candidate counts as present when it is not ``None``; an empty string
      found first wins over later candidates.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from tourcheck_api.domain.entities.flight import FlightPlan, LiveFlight, TrackerSession

__all__ = [
    "first_present",
    "flight_plan_from_payload",
    "flight_plan_items",
    "format_number",
    "live_flight_from_payload",
    "live_flight_items",
    "parse_level",
    "parse_number",
    "parse_timestamp",
    "session_from_payload",
    "session_items",
    "to_code",
    "to_text",
]

_NUMBER_TOKEN_RE = re.compile(r"[\d.]+")
# Longest leading decimal of a token; "1.2.3" reads as 1.2 and "..5" as nothing.
_LEADING_DECIMAL_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")

# Epoch values below this are seconds, above are milliseconds.
_EPOCH_MS_THRESHOLD = 1e12

SESSION_IDENTITY_PATHS = ("userId", "user.id", "id")
SESSION_COMPLETED_PATHS = ("completedAt", "updatedAt")

PLAN_DEPARTURE_PATHS = ("departureId", "departure.icao", "departure")
PLAN_ARRIVAL_PATHS = ("arrivalId", "arrival.icao", "arrival")
PLAN_AIRCRAFT_PATHS = ("aircraftId", "aircraft.icaoCode", "aircraft", "aircraftType")
PLAN_SPEED_PATHS = ("cruisingSpeed", "speed", "tas", "cruiseSpeed")
PLAN_LEVEL_PATHS = ("cruisingLevel", "level", "altitude", "cruiseAltitude")
PLAN_REMARKS_PATHS = ("remarks", "rmk", "otherInfo", "otherInformation")
PLAN_RULES_PATHS = ("flightRules", "rules", "flightRule")
PLAN_ROUTE_PATHS = ("route", "routeString", "routeRaw", "routeText")

LIVE_IDENTITY_PATHS = (
    "userId",
    "pilotId",
    "vid",
    "pilot.vid",
    "pilot.id",
    "pilot.userId",
    "id",
)
LIVE_DEPARTURE_PATHS = (
    "flightPlan.departureId",
    "flight_plan.departureId",
    "departure",
    "dep",
    "origin",
    "from",
)
LIVE_ARRIVAL_PATHS = (
    "flightPlan.arrivalId",
    "flight_plan.arrivalId",
    "arrival",
    "arr",
    "destination",
    "to",
)
LIVE_LIST_PATHS = ("flights", "data", "clients.pilots", "pilots")


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def first_present(record: Any, paths: Sequence[str]) -> Any:
    """Return the first candidate value that is not ``None``.

    Args:
        record: Payload object; non-mappings yield ``None``.
        paths: Dotted candidate paths, tried in order.

    Returns:
        The first non-``None`` value found, else ``None``.
    """
    if not isinstance(record, Mapping):
        return None
    for path in paths:
        value = _lookup(record, path)
        if value is not None:
            return value
    return None


def to_text(value: Any) -> str:
    """Render a scalar as trimmed text; containers and ``None`` become ``""``."""
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def to_code(value: Any) -> str | None:
    """Render a scalar as an upper-case code, or ``None`` when blank."""
    text = to_text(value).upper()
    return text or None


def parse_number(value: Any) -> float | None:
    """Parse the first numeric token of ``value``.

    ``"450"``, ``"N0450"`` and ``"450kt"`` all yield ``450.0``. Anything
    without a numeric token yields ``None``, as does a token such as ``"..5"``
    that does not start with a decimal number; this never raises.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    token = _NUMBER_TOKEN_RE.search(to_text(value))
    if token is None:
        return None
    match = _LEADING_DECIMAL_RE.match(token.group(0))
    if match is None:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_level(value: Any) -> float | None:
    """Parse a cruising level as a flight level number.

    A leading ``FL`` marks a flight level (``"FL350"`` yields ``350.0``);
    otherwise the first numeric token is used as-is.
    """
    if value is None:
        return None
    raw = to_text(value).upper()
    if raw.startswith("FL"):
        return parse_number(raw[2:])
    return parse_number(raw)


def format_number(value: float) -> str:
    """Render a number the way it is shown in violation messages (``480``, ``480.5``)."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch seconds/milliseconds into aware UTC.

    Naive timestamps are taken as UTC. Unparseable input yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        seconds = value / 1000 if value >= _EPOCH_MS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    text = to_text(value)
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _parse_flag(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def flight_plan_from_payload(raw: Any) -> FlightPlan:
    """Build a :class:`FlightPlan` from a loosely-shaped plan payload."""
    return FlightPlan(
        departure=to_code(first_present(raw, PLAN_DEPARTURE_PATHS)),
        arrival=to_code(first_present(raw, PLAN_ARRIVAL_PATHS)),
        aircraft=to_code(first_present(raw, PLAN_AIRCRAFT_PATHS)),
        cruising_speed=parse_number(first_present(raw, PLAN_SPEED_PATHS)),
        cruising_level=parse_level(first_present(raw, PLAN_LEVEL_PATHS)),
        remarks=to_code(first_present(raw, PLAN_REMARKS_PATHS)),
        flight_rules=to_code(first_present(raw, PLAN_RULES_PATHS)),
        is_military=_parse_flag(first_present(raw, ("isMilitary",))),
        route=to_text(first_present(raw, PLAN_ROUTE_PATHS)) or None,
    )


def session_from_payload(raw: Any) -> TrackerSession:
    """Build a :class:`TrackerSession` from a loosely-shaped session payload.

    Embedded plans are kept only when the payload carries a ``flightPlans``
    list; otherwise ``flight_plans`` is ``None`` so callers know to fetch.
    """
    embedded = first_present(raw, ("flightPlans",))
    plans = (
        tuple(flight_plan_from_payload(p) for p in embedded if isinstance(p, Mapping))
        if isinstance(embedded, list)
        else None
    )
    session_id = to_text(first_present(raw, ("id",)))
    return TrackerSession(
        id=session_id or None,
        callsign=to_code(first_present(raw, ("callsign",))),
        user_id=to_text(first_present(raw, SESSION_IDENTITY_PATHS)) or None,
        created_at=parse_timestamp(first_present(raw, ("createdAt",))),
        completed_at=_first_timestamp(raw, SESSION_COMPLETED_PATHS),
        flight_plans=plans,
        is_military=_parse_flag(first_present(raw, ("isMilitary",))),
    )


def _first_timestamp(raw: Any, paths: Sequence[str]) -> datetime | None:
    # completedAt may be present but unparseable; fall back per candidate.
    for path in paths:
        parsed = parse_timestamp(first_present(raw, (path,)))
        if parsed is not None:
            return parsed
    return None


def live_flight_from_payload(raw: Any) -> LiveFlight:
    """Build a :class:`LiveFlight` from one live snapshot entry."""
    return LiveFlight(
        callsign=to_code(first_present(raw, ("callsign",))),
        user_id=to_text(first_present(raw, LIVE_IDENTITY_PATHS)) or None,
        departure=to_code(first_present(raw, LIVE_DEPARTURE_PATHS)),
        arrival=to_code(first_present(raw, LIVE_ARRIVAL_PATHS)),
    )


def _mappings(items: Any) -> list[Mapping[str, Any]]:
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, Mapping)]


def session_items(raw: Any) -> list[Mapping[str, Any]]:
    """Return session payloads from a search response (``items`` or bare list)."""
    if isinstance(raw, list):
        return _mappings(raw)
    return _mappings(first_present(raw, ("items",)))


def flight_plan_items(raw: Any) -> list[Mapping[str, Any]]:
    """Return plan payloads from a flight plans response (bare list or ``items``)."""
    if isinstance(raw, list):
        return _mappings(raw)
    return _mappings(first_present(raw, ("items",)))


def live_flight_items(raw: Any) -> list[Mapping[str, Any]]:
    """Return entries from a live snapshot of any known shape."""
    if isinstance(raw, list):
        return _mappings(raw)
    if not isinstance(raw, Mapping):
        return []
    for path in LIVE_LIST_PATHS:
        candidate = _lookup(raw, path)
        if isinstance(candidate, list):
            return _mappings(candidate)
    return []
