# src/tourcheck_api/domain/entities/validation_rule.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Validation rule tuples and their classified variants.

Purpose:
    ``RuleTuple`` is the loosely-shaped element of ``Tour.validation_rules``
    as stored. Classification turns each tuple into exactly one closed rule
    variant; tuples that cannot be enforced become :class:`IgnoredRule`.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass

from tourcheck_api.domain.entities.base import BaseEntity


@dataclass(frozen=True, slots=True)
class RuleTuple(BaseEntity):
    """One stored ``{key, value, public?, publicLabel?}`` element.

    Attributes:
        key: Rule key; ``None`` when missing from the stored element.
        value: Rule value as text; ``None`` when missing.
        public: Whether members may see the rule.
        public_label: Optional member-facing label.
    """

    key: str | None
    value: str | None = None
    public: bool = False
    public_label: str | None = None


@dataclass(frozen=True, slots=True)
class AircraftRule(BaseEntity):
    """Allow-list of aircraft type designators (upper-case)."""

    allowed: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MaxSpeedRule(BaseEntity):
    """Maximum cruising speed."""

    limit: float


@dataclass(frozen=True, slots=True)
class MaxLevelRule(BaseEntity):
    """Maximum cruising level, as a flight level number."""

    limit: float


@dataclass(frozen=True, slots=True)
class CallsignRule(BaseEntity):
    """Required callsign prefix (upper-case)."""

    prefix: str


@dataclass(frozen=True, slots=True)
class RemarksRule(BaseEntity):
    """Text that must appear in the flight plan remarks (upper-case)."""

    text: str


@dataclass(frozen=True, slots=True)
class FlightRulesRule(BaseEntity):
    """Allow-list of filed flight rules codes (upper-case)."""

    allowed: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MilitaryRule(BaseEntity):
    """Military policy; only ``forbidden`` is enforced."""

    forbidden: bool


@dataclass(frozen=True, slots=True)
class IgnoredRule(BaseEntity):
    """A tuple with no effect on evaluation.

    Attributes:
        key: Original key, if any.
        reason: ``missing_key``, ``unknown_key``, ``empty_value`` or
            ``unparseable_value``.
    """

    key: str | None
    reason: str


ValidationRule = (
    AircraftRule
    | MaxSpeedRule
    | MaxLevelRule
    | CallsignRule
    | RemarksRule
    | FlightRulesRule
    | MilitaryRule
    | IgnoredRule
)
