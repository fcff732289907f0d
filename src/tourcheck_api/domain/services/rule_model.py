# src/tourcheck_api/domain/services/rule_model.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Rule model: parse stored validation rules and classify them.

Purpose:
    ``Tour.validation_rules`` is stored as JSON text holding an array of
    ``{key, value?, public?, publicLabel?}`` objects. This module turns it
    into :class:`RuleTuple` values (never raising) and classifies each tuple
    into one closed rule variant for the compliance evaluator.

Layer:
    domain/services

Notes:
    - Parsing is lenient: invalid JSON or a non-array yields ``[]``.
    - Tuples without a key are kept at parse time and ignored at
      classification time.
    - Repeated keys are neither merged nor deduplicated; every tuple is
      classified and evaluated in array order.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from tourcheck_api.domain.entities.validation_rule import (
    AircraftRule,
    CallsignRule,
    FlightRulesRule,
    IgnoredRule,
    MaxLevelRule,
    MaxSpeedRule,
    MilitaryRule,
    RemarksRule,
    RuleTuple,
    ValidationRule,
)
from tourcheck_api.domain.enums.tour import RuleKey
from tourcheck_api.domain.services.flight_fields import parse_level, parse_number, to_text

__all__ = [
    "classify_rule",
    "classify_rules",
    "duplicate_rule_keys",
    "parse_rules",
    "public_label",
    "public_rules",
]

_LIST_SPLIT_RE = re.compile(r"[;, ]+")

MILITARY_FORBIDDEN = "forbidden"
MILITARY_ALLOWED = "allowed"


def _coerce_tuple(item: Any) -> RuleTuple:
    if not isinstance(item, Mapping):
        return RuleTuple(key=None)
    key = to_text(item.get("key")) or None
    raw_value = item.get("value")
    label = to_text(item.get("publicLabel")) or None
    return RuleTuple(
        key=key,
        value=None if raw_value is None else to_text(raw_value),
        public=item.get("public") is True,
        public_label=label,
    )


def parse_rules(raw: str | None) -> list[RuleTuple]:
    """Parse stored rule JSON into rule tuples.

    Args:
        raw: JSON text of the stored rule array, or ``None``.

    Returns:
        One :class:`RuleTuple` per array element, in order. ``[]`` when the
        text is empty, not valid JSON, or not an array.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(parsed, list):
        return []
    return [_coerce_tuple(item) for item in parsed]


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.upper() for part in _LIST_SPLIT_RE.split(value) if part.strip())


def classify_rule(rule: RuleTuple) -> ValidationRule:
    """Classify one tuple into its rule variant.

    Args:
        rule: Parsed tuple.

    Returns:
        The matching rule variant, or :class:`IgnoredRule` when the tuple has
        no key, an unknown key, an empty value or an unparseable numeric value.
    """
    if not rule.key:
        return IgnoredRule(key=None, reason="missing_key")
    try:
        key = RuleKey(rule.key)
    except ValueError:
        return IgnoredRule(key=rule.key, reason="unknown_key")

    value = (rule.value or "").strip()
    if not value:
        return IgnoredRule(key=rule.key, reason="empty_value")

    if key is RuleKey.AIRCRAFT:
        allowed = _split_list(value)
        return AircraftRule(allowed=allowed) if allowed else IgnoredRule(rule.key, "empty_value")
    if key is RuleKey.MAX_SPEED:
        limit = parse_number(value)
        return MaxSpeedRule(limit=limit) if limit is not None else IgnoredRule(
            rule.key, "unparseable_value"
        )
    if key is RuleKey.MAX_LEVEL:
        limit = parse_level(value)
        return MaxLevelRule(limit=limit) if limit is not None else IgnoredRule(
            rule.key, "unparseable_value"
        )
    if key is RuleKey.CALLSIGN:
        return CallsignRule(prefix=value.upper())
    if key is RuleKey.REMARKS:
        return RemarksRule(text=value.upper())
    if key is RuleKey.FLIGHT_RULES:
        allowed = _split_list(value)
        return FlightRulesRule(allowed=allowed) if allowed else IgnoredRule(
            rule.key, "empty_value"
        )
    return MilitaryRule(forbidden=value == MILITARY_FORBIDDEN)


def classify_rules(rules: Sequence[RuleTuple]) -> list[ValidationRule]:
    """Classify every tuple, preserving order and duplicates."""
    return [classify_rule(rule) for rule in rules]


def duplicate_rule_keys(rules: Sequence[RuleTuple]) -> tuple[str, ...]:
    """Return keys that appear on more than one tuple, sorted."""
    counts = Counter(rule.key for rule in rules if rule.key)
    return tuple(sorted(key for key, count in counts.items() if count > 1))


def public_label(rule: RuleTuple) -> str:
    """Return the member-facing label of a rule.

    The stored ``publicLabel`` wins; otherwise a default is derived from the
    key and value.
    """
    if rule.public_label:
        return rule.public_label
    value = rule.value or ""
    defaults: dict[str, tuple[str, str]] = {
        RuleKey.AIRCRAFT.value: ("Allowed aircraft: {}", "Allowed aircraft"),
        RuleKey.MAX_SPEED.value: ("Max speed: {}", "Max speed"),
        RuleKey.MAX_LEVEL.value: ("Max flight level: {}", "Max flight level"),
        RuleKey.CALLSIGN.value: ("Callsign prefix: {}", "Callsign prefix required"),
        RuleKey.REMARKS.value: ("Mandatory remark: {}", "Mandatory remark"),
        RuleKey.FLIGHT_RULES.value: ("Flight rules: {}", "Flight rules required"),
    }
    if rule.key == RuleKey.MILITARY.value:
        if value == MILITARY_ALLOWED:
            return "Military flights allowed"
        return "Military flights not allowed"
    if rule.key in defaults:
        with_value, bare = defaults[rule.key]
        return with_value.format(value) if value else bare
    return value or "Rule"


def public_rules(rules: Sequence[RuleTuple], *, allow_any_aircraft: bool) -> list[RuleTuple]:
    """Return the rules members may see, in stored order.

    Only tuples flagged ``public`` with a key are shown. Aircraft rules are
    hidden when the tour accepts any aircraft since they are not enforced.
    """
    visible: list[RuleTuple] = []
    for rule in rules:
        if not rule.public or not rule.key:
            continue
        if allow_any_aircraft and rule.key == RuleKey.AIRCRAFT.value:
            continue
        visible.append(rule)
    return visible
