# src/tourcheck_api/application/use_cases/tours/list_pilot_sessions.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: List a member's pilot sessions on one UTC day.

The leg report form offers these sessions so the member can pick the one
they flew; the chosen id becomes the report's direct session reference.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime, time, timedelta

from tourcheck_api.application.schemas.dto.tours import PilotSessionDTO
from tourcheck_api.application.services.flight_matcher import PILOT_CONNECTION
from tourcheck_api.domain.entities.flight import FlightPlan, SessionQuery, TrackerSession
from tourcheck_api.domain.exceptions.tour import DirectoryIdentityRequired
from tourcheck_api.domain.interfaces.gateways.flight_directory_gateway import (
    FlightDirectoryGateway,
)

logger = logging.getLogger(__name__)

#: Sessions requested from the directory per lookup.
SESSION_PICKER_LIMIT = 50


class ListPilotSessionsUseCase:
    """List directory pilot sessions overlapping a UTC day, with first-plan details."""

    def __init__(
        self, *, gateway: FlightDirectoryGateway, limit: int = SESSION_PICKER_LIMIT
    ) -> None:
        """Initialize the use case."""
        self._gateway = gateway
        self._limit = limit

    async def execute(self, *, vid: str | None, day: date) -> list[PilotSessionDTO]:
        """Return the member's sessions that were connected at some point on ``day``.

        Args:
            vid: Member's directory identity.
            day: UTC calendar day.

        Returns:
            Overlapping sessions in directory order. Plan details come from
            the session's fetched plans, falling back to embedded ones.

        Raises:
            DirectoryIdentityRequired: The member has no directory identity.
            FlightDirectoryError: The session search itself failed.
        """
        if not vid:
            raise DirectoryIdentityRequired("Directory identity unavailable")

        start = datetime.combine(day, time.min, tzinfo=UTC)
        end = start + timedelta(days=1)
        sessions = await self._gateway.get_sessions(
            SessionQuery(
                user_id=vid,
                connection_type=PILOT_CONNECTION,
                page=1,
                per_page=self._limit,
            )
        )
        on_day = [s for s in sessions if s.overlaps(start, end)]
        plans = await asyncio.gather(*(self._first_plan(s) for s in on_day))
        return [
            PilotSessionDTO.from_entities(session, plan)
            for session, plan in zip(on_day, plans, strict=True)
        ]

    async def _first_plan(self, session: TrackerSession) -> FlightPlan | None:
        fetched: list[FlightPlan] = []
        if session.id:
            try:
                fetched = await self._gateway.get_session_flight_plans(session.id)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "tour_sessions.flight_plans_failed",
                    extra={
                        "extra": {
                            "session_id": session.id,
                            "error_type": type(exc).__name__,
                        }
                    },
                )
        if fetched:
            return fetched[0]
        if session.flight_plans:
            return session.flight_plans[0]
        return None
