# src/tourcheck_api/domain/enums/tour.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour compliance enums.

Purpose:
    Define the closed vocabularies used by the tour compliance kernel:
    report statuses, match sources, recognized rule keys, matcher
    precondition failures and audit actions.

Layer:
    domain/enums
"""

from __future__ import annotations

from enum import Enum


class ReportStatus(str, Enum):
    """Lifecycle status of a tour leg report."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class MatchSource(str, Enum):
    """Strategy family that corroborated a submission."""

    SESSIONS = "sessions"
    LIVE = "live"


class RuleKey(str, Enum):
    """Recognized validation rule keys (wire values are camelCase)."""

    AIRCRAFT = "aircraft"
    MAX_SPEED = "maxSpeed"
    MAX_LEVEL = "maxLevel"
    CALLSIGN = "callsign"
    REMARKS = "remarks"
    FLIGHT_RULES = "flightRules"
    MILITARY = "military"


class PreconditionFailure(str, Enum):
    """Reason a submission could not be matched without any lookup."""

    CALLSIGN_REQUIRED = "CALLSIGN_REQUIRED"
    VID_UNAVAILABLE = "VID_UNAVAILABLE"
    FLIGHT_DATE_REQUIRED = "FLIGHT_DATE_REQUIRED"
    NOT_ONLINE = "NOT_ONLINE"


class EnrollmentStatus(str, Enum):
    """Status of a member's tour enrollment."""

    ACTIVE = "ACTIVE"


class AuditAction(str, Enum):
    """Audit log action names."""

    CREATE = "create"
    UPDATE = "update"


__all__ = [
    "AuditAction",
    "EnrollmentStatus",
    "MatchSource",
    "PreconditionFailure",
    "ReportStatus",
    "RuleKey",
]
