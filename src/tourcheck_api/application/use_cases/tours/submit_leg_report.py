# src/tourcheck_api/application/use_cases/tours/submit_leg_report.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: Submit (or resubmit) a tour leg report.

Purpose:
    Run the automated verdict pipeline for one member submission:

        resolve leg/tour/enrollment -> flight matcher -> compliance evaluator
        -> decision table -> upsert on (user, leg) -> commit -> audit

    Aborting conditions (unknown leg or tour, missing enrollment) raise
    before any directory call. Every other outcome, including directory
    failures and rule violations, is persisted as a normal report whose
    review note explains the verdict.

Layer:
    application/use_cases/tours
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tourcheck_api.application.schemas.dto.tours import LegReportDTO, SubmitLegReportDTO
from tourcheck_api.application.interfaces.telemetry_port import NullTelemetry, TelemetryPort
from tourcheck_api.application.services.audit_trail import AuditTrail
from tourcheck_api.application.services.flight_matcher import FlightMatcher
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.entities.flight import FlightMatch, Submission
from tourcheck_api.domain.entities.report import LegReportWrite
from tourcheck_api.domain.entities.tour import Tour, TourLeg
from tourcheck_api.domain.exceptions.tour import (
    EnrollmentRequired,
    TourLegNotFound,
    TourNotFound,
)
from tourcheck_api.domain.interfaces.repositories.tour_leg_reports_repository import (
    TourLegReportsRepository,
)
from tourcheck_api.domain.interfaces.repositories.tours_repository import (
    TourEnrollmentsRepository,
    ToursRepository,
)
from tourcheck_api.domain.services.compliance_evaluator import (
    ComplianceEvaluator,
    EvaluationContext,
)
from tourcheck_api.domain.services.decision_table import decide_verdict
from tourcheck_api.domain.services.flight_fields import parse_timestamp
from tourcheck_api.domain.services.rule_model import duplicate_rule_keys, parse_rules

logger = logging.getLogger(__name__)

REPORT_ENTITY_TYPE = "tourLegReport"


def _clean(value: str | None) -> str | None:
    text = (value or "").strip()
    return text or None


def build_submission(req: SubmitLegReportDTO, *, vid: str | None) -> Submission:
    """Normalize request fields into the matcher's submission view."""
    callsign = _clean(req.callsign)
    return Submission(
        callsign=callsign.upper() if callsign else None,
        vid=_clean(vid),
        flight_date=parse_timestamp(_clean(req.flight_date)),
        online=req.online,
        session_id=_clean(req.session_id),
    )


class SubmitLegReportUseCase:
    """Submit a leg report and derive its automated verdict.

    Args:
        uow: Unit of work resolving tours, enrollments, reports and audit log.
        matcher: Flight matcher bound to the directory gateway.
        evaluator: Optional compliance evaluator.
        audit: Optional audit trail.
        clock: Optional UTC clock, injectable for tests.
        telemetry: Optional verdict counters.
    """

    def __init__(
        self,
        *,
        uow: UnitOfWork,
        matcher: FlightMatcher,
        evaluator: ComplianceEvaluator | None = None,
        audit: AuditTrail | None = None,
        clock: Callable[[], datetime] | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._matcher = matcher
        self._evaluator = evaluator or ComplianceEvaluator()
        self._audit = audit or AuditTrail()
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._telemetry = telemetry or NullTelemetry()

    async def execute(
        self, *, user_id: str, vid: str | None, req: SubmitLegReportDTO
    ) -> LegReportDTO:
        """Run the pipeline and persist the resulting report.

        Args:
            user_id: Submitting member id.
            vid: Member's directory identity, if known.
            req: Submission fields.

        Returns:
            The persisted report, with the strategy that matched.

        Raises:
            TourLegNotFound: Unknown leg.
            TourNotFound: Leg's tour does not exist.
            EnrollmentRequired: Member has not joined the tour.
        """
        leg, tour = await self._resolve(user_id, req)

        submission = build_submission(req, vid=vid)
        match = await self._matcher.match(submission, leg)
        violations = self._evaluate(tour, match, submission)
        verdict = decide_verdict(match, violations)
        now = self._clock()

        write = LegReportWrite(
            user_id=user_id,
            tour_leg_id=leg.id,
            status=verdict.status,
            submitted_at=now,
            reviewed_at=now if verdict.approved else None,
            review_note=verdict.review_note,
            flight_date=submission.flight_date,
            callsign=_clean(req.callsign),
            aircraft=_clean(req.aircraft),
            route=_clean(req.route),
            online=req.online,
            evidence_url=_clean(req.evidence_url),
            session_id=submission.session_id,
        )

        async with self._uow as tx:
            reports: TourLegReportsRepository = tx.get_repository(TourLegReportsRepository)
            report, before = await reports.upsert(write)
            await tx.commit()

            await self._audit.record(
                tx,
                actor_id=user_id,
                entity_type=REPORT_ENTITY_TYPE,
                entity_id=str(report.id),
                before=before.snapshot() if before is not None else None,
                after=report.snapshot(),
            )

        source = match.source.value if match.source is not None else None
        self._telemetry.record_verdict(verdict.status.value, source)
        logger.info(
            "tour_leg_report.evaluated",
            extra={
                "extra": {
                    "report_id": str(report.id),
                    "leg_id": str(leg.id),
                    "status": verdict.status.value,
                    "decision": verdict.row,
                    "match_source": source,
                    "violations": len(violations),
                    "resubmission": before is not None,
                }
            },
        )
        return LegReportDTO.from_entity(report, match_source=source)

    async def _resolve(self, user_id: str, req: SubmitLegReportDTO) -> tuple[TourLeg, Tour]:
        async with self._uow as tx:
            tours: ToursRepository = tx.get_repository(ToursRepository)
            enrollments: TourEnrollmentsRepository = tx.get_repository(TourEnrollmentsRepository)

            leg = await tours.get_leg(req.leg_id)
            if leg is None:
                raise TourLegNotFound("Leg not found", details={"leg_id": str(req.leg_id)})

            tour = await tours.get_tour(leg.tour_id)
            if tour is None:
                raise TourNotFound("Tour not found", details={"tour_id": str(leg.tour_id)})

            enrollment = await enrollments.get_enrollment(user_id, tour.id)
            if enrollment is None:
                raise EnrollmentRequired("Tour not started", details={"tour_id": str(tour.id)})
        return leg, tour

    def _evaluate(self, tour: Tour, match: FlightMatch, submission: Submission) -> list[str]:
        if not match.matched:
            return []
        rules = parse_rules(tour.validation_rules)
        duplicates = duplicate_rule_keys(rules)
        if duplicates:
            logger.warning(
                "tour_rules.duplicate_keys",
                extra={"extra": {"tour_id": str(tour.id), "keys": list(duplicates)}},
            )
        return self._evaluator.evaluate(
            rules,
            match.flight_plan,
            match.session,
            context=EvaluationContext(
                callsign=submission.callsign or "",
                allow_any_aircraft=tour.allow_any_aircraft,
            ),
        )
