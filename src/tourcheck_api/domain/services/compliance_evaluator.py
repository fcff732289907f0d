# src/tourcheck_api/domain/services/compliance_evaluator.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Compliance evaluator (domain kernel).

Purpose:
    Evaluate a tour's rule tuples against a matched flight and return
    human-readable violation messages. An empty list means compliant.

Layer:
    domain/services

Notes:
    - Pure domain logic:
        * No logging.
        * No HTTP or transport concerns.
        * No persistence or gateways.
    - Rules are evaluated in stored order and every failure is collected;
      repeated keys produce repeated checks.
    - When no flight plan is available (live matches), plan-derived rules
      (aircraft, speed, level, remarks, flight rules) are unknown and never
      reported as violations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tourcheck_api.domain.entities.flight import FlightPlan, TrackerSession
from tourcheck_api.domain.entities.validation_rule import (
    AircraftRule,
    CallsignRule,
    FlightRulesRule,
    MaxLevelRule,
    MaxSpeedRule,
    MilitaryRule,
    RemarksRule,
    RuleTuple,
    ValidationRule,
)
from tourcheck_api.domain.services.flight_fields import format_number
from tourcheck_api.domain.services.rule_model import classify_rules


@dataclass(frozen=True, slots=True)
class EvaluationContext:
    """Submission-side inputs the rules are checked against.

    Attributes:
        callsign: Submitted callsign.
        allow_any_aircraft: Tour flag that disables aircraft rules.
    """

    callsign: str
    allow_any_aircraft: bool = False


class ComplianceEvaluator:
    """Pure evaluator of classified validation rules."""

    def evaluate(
        self,
        rules: Sequence[RuleTuple],
        flight_plan: FlightPlan | None,
        session: TrackerSession | None,
        *,
        context: EvaluationContext,
    ) -> list[str]:
        """Return violation messages for ``rules`` against the matched flight.

        Args:
            rules: Parsed rule tuples in stored order.
            flight_plan: The plan that served the leg, or ``None``.
            session: The matched session, used as military fallback.
            context: Submission-side inputs.

        Returns:
            Violation messages in rule order; ``[]`` when compliant.
        """
        failures: list[str] = []
        for rule in classify_rules(rules):
            message = self._check(rule, flight_plan, session, context)
            if message is not None:
                failures.append(message)
        return failures

    def _check(  # noqa: C901
        self,
        rule: ValidationRule,
        plan: FlightPlan | None,
        session: TrackerSession | None,
        context: EvaluationContext,
    ) -> str | None:
        if isinstance(rule, CallsignRule):
            if not context.callsign.upper().startswith(rule.prefix):
                return "Callsign does not match required prefix"
            return None

        if isinstance(rule, MilitaryRule):
            if rule.forbidden and _is_military(plan, session):
                return "Military flights are not allowed"
            return None

        if plan is None:
            return None

        if isinstance(rule, AircraftRule):
            if context.allow_any_aircraft:
                return None
            aircraft = (plan.aircraft or "").upper()
            if not aircraft or aircraft not in rule.allowed:
                return f"Aircraft not allowed ({aircraft or 'unknown'})"
            return None

        if isinstance(rule, MaxSpeedRule):
            speed = plan.cruising_speed
            if speed is not None and speed > rule.limit:
                return f"Speed {format_number(speed)} exceeds {format_number(rule.limit)}"
            return None

        if isinstance(rule, MaxLevelRule):
            level = plan.cruising_level
            if level is not None and level > rule.limit:
                return f"Level {format_number(level)} exceeds {format_number(rule.limit)}"
            return None

        if isinstance(rule, RemarksRule):
            if rule.text not in (plan.remarks or "").upper():
                return "Mandatory remark missing"
            return None

        if isinstance(rule, FlightRulesRule):
            filed = (plan.flight_rules or "").upper()
            if filed and filed not in rule.allowed:
                return f"Flight rules {filed} not allowed"
            return None

        # IgnoredRule and anything unrecognized have no effect.
        return None


def _is_military(plan: FlightPlan | None, session: TrackerSession | None) -> bool:
    if plan is not None and plan.is_military is not None:
        return plan.is_military
    if session is not None and session.is_military is not None:
        return session.is_military
    return False
