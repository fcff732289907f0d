# src/tourcheck_api/application/services/flight_matcher.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Flight matcher (Application Service).

Purpose:
    Locate a flight directory record that corroborates a leg report
    submission, trying three strategies in strict priority order:

        1. Direct session reference: the submission names a session id and
           one of that session's flight plans serves the leg.
        2. Historical search: sessions of the member's identity and callsign
           (pilot connections, most recent first) whose window covers the
           flight date and whose plans serve the leg.
        3. Live snapshot: a currently active flight with the same callsign,
           identity, departure and arrival.

    The first success wins. Preconditions are checked before any call.

Design:
    Every directory call is fault isolated: a failure is logged and treated
    as "no match from this step" so later strategies still run. Nothing
    raised by the gateway escapes :meth:`FlightMatcher.match`.

Layer:
    application/services
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar

from tourcheck_api.domain.entities.flight import (
    FlightMatch,
    FlightPlan,
    SessionQuery,
    Submission,
    TrackerSession,
)
from tourcheck_api.domain.entities.tour import TourLeg
from tourcheck_api.domain.enums.tour import MatchSource, PreconditionFailure
from tourcheck_api.domain.interfaces.gateways.flight_directory_gateway import (
    FlightDirectoryGateway,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PILOT_CONNECTION = "PILOT"
DEFAULT_SESSIONS_PAGE_SIZE = 25

_EPOCH = datetime.min.replace(tzinfo=UTC)


def check_preconditions(submission: Submission) -> PreconditionFailure | None:
    """Return the first failed precondition, in checking order, or ``None``.

    Order: callsign, directory identity, flight date, online declaration.
    """
    if not submission.callsign:
        return PreconditionFailure.CALLSIGN_REQUIRED
    if not submission.vid:
        return PreconditionFailure.VID_UNAVAILABLE
    if submission.flight_date is None:
        return PreconditionFailure.FLIGHT_DATE_REQUIRED
    if not submission.online:
        return PreconditionFailure.NOT_ONLINE
    return None


def _serving_plan(
    plans: tuple[FlightPlan, ...] | list[FlightPlan], leg: TourLeg
) -> FlightPlan | None:
    for plan in plans:
        if plan.serves(leg.departure_code, leg.arrival_code):
            return plan
    return None


class FlightMatcher:
    """Multi-strategy reconciliation of a submission against the directory."""

    def __init__(
        self,
        gateway: FlightDirectoryGateway,
        *,
        sessions_page_size: int = DEFAULT_SESSIONS_PAGE_SIZE,
    ) -> None:
        """Initialize the matcher.

        Args:
            gateway: Flight directory gateway.
            sessions_page_size: Page size of the historical session search.
        """
        self._gateway = gateway
        self._page_size = sessions_page_size

    async def match(self, submission: Submission, leg: TourLeg) -> FlightMatch:
        """Match a submission against the directory for one leg.

        Args:
            submission: Normalized submission (upper-case callsign).
            leg: The reported leg.

        Returns:
            The first strategy's match, an unmatched result, or a result
            carrying the failed precondition.
        """
        failure = check_preconditions(submission)
        if failure is not None:
            return FlightMatch(precondition=failure)

        strategies: tuple[
            tuple[str, Callable[[Submission, TourLeg], Awaitable[FlightMatch | None]]], ...
        ] = (
            ("direct_session", self._match_direct_session),
            ("session_history", self._match_session_history),
            ("live_snapshot", self._match_live_snapshot),
        )
        for name, strategy in strategies:
            found = await strategy(submission, leg)
            if found is not None:
                logger.info(
                    "flight_matcher.matched",
                    extra={"extra": {"strategy": name, "leg_id": str(leg.id)}},
                )
                return found

        logger.info(
            "flight_matcher.no_match",
            extra={"extra": {"leg_id": str(leg.id)}},
        )
        return FlightMatch()

    async def _guarded(self, step: str, call: Callable[[], Awaitable[T]]) -> T | None:
        """Run one directory call; log and absorb any failure."""
        try:
            return await call()
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "flight_matcher.directory_call_failed",
                extra={
                    "extra": {
                        "step": step,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    }
                },
            )
            return None

    async def _match_direct_session(
        self, submission: Submission, leg: TourLeg
    ) -> FlightMatch | None:
        session_id = submission.session_id
        if not session_id:
            return None
        plans = await self._guarded(
            "direct_session.flight_plans",
            lambda: self._gateway.get_session_flight_plans(session_id),
        )
        if not plans:
            return None
        plan = _serving_plan(plans, leg)
        if plan is None:
            return None
        return FlightMatch(
            source=MatchSource.SESSIONS,
            session=TrackerSession(id=session_id, flight_plans=tuple(plans)),
            flight_plan=plan,
        )

    async def _match_session_history(
        self, submission: Submission, leg: TourLeg
    ) -> FlightMatch | None:
        callsign, vid, flight_date = submission.callsign, submission.vid, submission.flight_date
        if not callsign or not vid or flight_date is None:
            return None
        query = SessionQuery(
            user_id=vid,
            callsign=callsign,
            connection_type=PILOT_CONNECTION,
            page=1,
            per_page=self._page_size,
        )
        sessions = await self._guarded(
            "session_history.search", lambda: self._gateway.get_sessions(query)
        )
        if not sessions:
            return None

        candidates = sorted(sessions, key=lambda s: s.created_at or _EPOCH, reverse=True)
        for session in candidates:
            if session.callsign != callsign or session.user_id != vid:
                continue
            if not session.covers(flight_date):
                continue
            plan = await self._session_plan(session, leg)
            if plan is not None:
                return FlightMatch(source=MatchSource.SESSIONS, session=session, flight_plan=plan)
        return None

    async def _session_plan(self, session: TrackerSession, leg: TourLeg) -> FlightPlan | None:
        """Return the session's plan serving the leg, fetching plans when not embedded."""
        if session.flight_plans is not None:
            return _serving_plan(session.flight_plans, leg)
        session_id = session.id
        if not session_id:
            return None
        plans = await self._guarded(
            "session_history.flight_plans",
            lambda: self._gateway.get_session_flight_plans(session_id),
        )
        return _serving_plan(plans or [], leg)

    async def _match_live_snapshot(
        self, submission: Submission, leg: TourLeg
    ) -> FlightMatch | None:
        flights = await self._guarded("live_snapshot", self._gateway.get_live_flights)
        for flight in flights or []:
            if (
                flight.callsign == submission.callsign
                and flight.user_id == submission.vid
                and flight.serves(leg.departure_code, leg.arrival_code)
            ):
                return FlightMatch(source=MatchSource.LIVE)
        return None
