# src/tourcheck_api/domain/services/decision_table.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Automated verdict derivation as an ordered decision table.

Purpose:
    Derive a leg report's automated status and review note from the flight
    matcher outcome and the compliance evaluator's violations. Rows are
    evaluated top to bottom and the first row whose condition holds decides;
    rows are mutually exclusive by construction of that order.

    ====  ===============================  ==========  ===============================
    Row   Condition                        Status      Note
    ====  ===============================  ==========  ===============================
    1     a matcher precondition failed    PENDING     the precondition failure
    2     no strategy matched              PENDING     no matching flight found
    3     matched with violations          PENDING     violations joined by ``"; "``
    4     matched, no violations           APPROVED    the matching strategy
    ====  ===============================  ==========  ===============================

    The automated pipeline never produces ``REJECTED``.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from tourcheck_api.domain.entities.flight import FlightMatch
from tourcheck_api.domain.enums.tour import MatchSource, PreconditionFailure, ReportStatus

AUTO_FAILED_PREFIX = "Auto-validation failed: "

PRECONDITION_NOTES: dict[PreconditionFailure, str] = {
    PreconditionFailure.CALLSIGN_REQUIRED: "callsign is required for strict IVAO matching.",
    PreconditionFailure.VID_UNAVAILABLE: "user VID unavailable for matching.",
    PreconditionFailure.FLIGHT_DATE_REQUIRED: "flight date is required.",
    PreconditionFailure.NOT_ONLINE: "flight must be marked online.",
}

NO_MATCH_NOTE = "no matching session or live flight found."

APPROVED_NOTES: dict[MatchSource, str] = {
    MatchSource.SESSIONS: "Auto-approved: matched IVAO session.",
    MatchSource.LIVE: "Auto-approved: matched IVAO live flight.",
}


@dataclass(frozen=True, slots=True)
class VerdictInput:
    """Inputs of the decision table."""

    match: FlightMatch
    violations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of the decision table.

    Attributes:
        status: Derived status (``PENDING`` or ``APPROVED``).
        review_note: Human-readable explanation.
        row: Name of the deciding row.
    """

    status: ReportStatus
    review_note: str
    row: str

    @property
    def approved(self) -> bool:
        """True when the verdict stamps ``reviewed_at``."""
        return self.status is ReportStatus.APPROVED


@dataclass(frozen=True, slots=True)
class DecisionRow:
    """One row: a named condition and the verdict it produces."""

    name: str
    applies: Callable[[VerdictInput], bool]
    decide: Callable[[VerdictInput], Verdict]


def _precondition_verdict(inp: VerdictInput) -> Verdict:
    precondition = inp.match.precondition or PreconditionFailure.CALLSIGN_REQUIRED
    note = AUTO_FAILED_PREFIX + PRECONDITION_NOTES[precondition]
    return Verdict(ReportStatus.PENDING, note, "precondition_failed")


def _no_match_verdict(_: VerdictInput) -> Verdict:
    return Verdict(ReportStatus.PENDING, AUTO_FAILED_PREFIX + NO_MATCH_NOTE, "no_match")


def _violations_verdict(inp: VerdictInput) -> Verdict:
    note = AUTO_FAILED_PREFIX + "; ".join(inp.violations)
    return Verdict(ReportStatus.PENDING, note, "violations")


def _approved_verdict(inp: VerdictInput) -> Verdict:
    source = inp.match.source or MatchSource.SESSIONS
    return Verdict(ReportStatus.APPROVED, APPROVED_NOTES[source], "approved")


DECISION_TABLE: tuple[DecisionRow, ...] = (
    DecisionRow(
        "precondition_failed",
        lambda inp: inp.match.precondition is not None,
        _precondition_verdict,
    ),
    DecisionRow("no_match", lambda inp: not inp.match.matched, _no_match_verdict),
    DecisionRow("violations", lambda inp: bool(inp.violations), _violations_verdict),
    DecisionRow("approved", lambda inp: True, _approved_verdict),
)


def decide_verdict(
    match: FlightMatch,
    violations: Sequence[str] = (),
    *,
    table: Sequence[DecisionRow] = DECISION_TABLE,
) -> Verdict:
    """Return the verdict of the first applicable row.

    Args:
        match: Flight matcher outcome.
        violations: Compliance violations; ignored unless the flight matched.
        table: Decision rows, in priority order.

    Returns:
        The deciding row's verdict.
    """
    inp = VerdictInput(match=match, violations=tuple(violations))
    for row in table:
        if row.applies(inp):
            return row.decide(inp)
    raise LookupError("decision table has no applicable row")
