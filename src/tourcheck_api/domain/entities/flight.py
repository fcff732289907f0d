# src/tourcheck_api/domain/entities/flight.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Flight activity directory records, normalized for matching.

Purpose:
    Typed views over the loosely-shaped records served by the flight
    activity directory. Every attribute is optional because upstream payloads
    routinely omit fields; ``None`` means "unknown", never "false".

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tourcheck_api.domain.entities.base import BaseEntity
from tourcheck_api.domain.enums.tour import MatchSource, PreconditionFailure


def _same_code(actual: str | None, expected: str) -> bool:
    return actual is not None and actual.strip().upper() == expected.strip().upper()


@dataclass(frozen=True, slots=True)
class FlightPlan(BaseEntity):
    """A filed flight plan.

    Attributes:
        departure: Departure aerodrome code.
        arrival: Arrival aerodrome code.
        aircraft: Aircraft type designator (e.g. ``A320``).
        cruising_speed: Cruising speed in knots.
        cruising_level: Cruising level as a flight level number.
        remarks: Remarks / other information text.
        flight_rules: Filed flight rules code (``I``, ``V``, ``IFR``...).
        is_military: Military flag, if reported.
        route: Filed route text, as entered.
    """

    departure: str | None = None
    arrival: str | None = None
    aircraft: str | None = None
    cruising_speed: float | None = None
    cruising_level: float | None = None
    remarks: str | None = None
    flight_rules: str | None = None
    is_military: bool | None = None
    route: str | None = None

    def serves(self, departure: str, arrival: str) -> bool:
        """Return True when the plan flies exactly ``departure`` to ``arrival``."""
        return _same_code(self.departure, departure) and _same_code(self.arrival, arrival)


@dataclass(frozen=True, slots=True)
class TrackerSession(BaseEntity):
    """A recorded historical connection.

    Attributes:
        id: Directory session id, if known.
        callsign: Connection callsign (upper-case).
        user_id: Directory identity (VID) of the connected member.
        created_at: Connection start (UTC).
        completed_at: Connection end (UTC).
        flight_plans: Plans embedded in the payload, or ``None`` when the
            payload did not carry them and they must be fetched separately.
        is_military: Military flag reported on the session, if any.
    """

    id: str | None = None
    callsign: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None
    flight_plans: tuple[FlightPlan, ...] | None = None
    is_military: bool | None = None

    def covers(self, moment: datetime) -> bool:
        """Return whether ``moment`` falls inside the session window.

        Sessions without both bounds never exclude a moment; otherwise the
        instant is compared against the inclusive ``[created_at, completed_at]``
        window.
        """
        if self.created_at is None or self.completed_at is None:
            return True
        return self.created_at <= moment <= self.completed_at

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Return whether the session was connected at some point in ``[start, end)``.

        A session without ``created_at`` never overlaps; one still open (no
        ``completed_at``) is treated as ending when it started.
        """
        if self.created_at is None:
            return False
        completed = self.completed_at or self.created_at
        return self.created_at < end and completed >= start


@dataclass(frozen=True, slots=True)
class LiveFlight(BaseEntity):
    """An entry of the current live activity snapshot."""

    callsign: str | None = None
    user_id: str | None = None
    departure: str | None = None
    arrival: str | None = None

    def serves(self, departure: str, arrival: str) -> bool:
        """Return True when the flight flies exactly ``departure`` to ``arrival``."""
        return _same_code(self.departure, departure) and _same_code(self.arrival, arrival)


@dataclass(frozen=True, slots=True)
class SessionQuery(BaseEntity):
    """Filter for a historical session search.

    Attributes:
        user_id: Directory identity (VID).
        callsign: Upper-case callsign; ``None`` lists every callsign.
        connection_type: Connection type; pilots only for tour matching.
        page: 1-based page index.
        per_page: Page size.
        from_: Optional lower time bound.
        to: Optional upper time bound.
    """

    user_id: str
    callsign: str | None = None
    connection_type: str = "PILOT"
    page: int = 1
    per_page: int = 25
    from_: datetime | None = None
    to: datetime | None = None


@dataclass(frozen=True, slots=True)
class Submission(BaseEntity):
    """The matcher's view of a leg report submission.

    Attributes:
        callsign: Submitted callsign, upper-cased; ``None`` when blank.
        vid: Submitting member's directory identity, if known.
        flight_date: Parsed flight date (UTC), if parseable.
        online: Member's self-declaration of an online flight.
        session_id: Optional explicit directory session reference.
    """

    callsign: str | None
    vid: str | None
    flight_date: datetime | None
    online: bool
    session_id: str | None = None


@dataclass(frozen=True, slots=True)
class FlightMatch(BaseEntity):
    """Outcome of the flight matcher.

    Attributes:
        source: Strategy family that matched, or ``None`` when unmatched.
        session: Matched session, when known.
        flight_plan: The plan that served the leg, when known. Always
            ``None`` for live matches.
        precondition: Failed precondition that stopped matching early.
    """

    source: MatchSource | None = None
    session: TrackerSession | None = None
    flight_plan: FlightPlan | None = None
    precondition: PreconditionFailure | None = None

    @property
    def matched(self) -> bool:
        """True when some strategy corroborated the submission."""
        return self.source is not None
