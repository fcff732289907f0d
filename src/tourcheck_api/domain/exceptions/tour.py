# src/tourcheck_api/domain/exceptions/tour.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Tour Domain Exceptions

Purpose:
    Aborting conditions of the tour workflows. These stop processing before
    any flight matching occurs and are mapped to HTTP by adapters.

Layer: domain/exceptions
"""

from __future__ import annotations

from .base import DomainError


class TourNotFound(DomainError):
    """The referenced tour does not exist (or is not visible)."""

    code = "TOUR_NOT_FOUND"


class TourLegNotFound(DomainError):
    """The referenced tour leg does not exist."""

    code = "TOUR_LEG_NOT_FOUND"


class EnrollmentRequired(DomainError):
    """The member has not joined the tour that owns the leg."""

    code = "TOUR_NOT_STARTED"


class TourLegReportNotFound(DomainError):
    """The referenced leg report does not exist."""

    code = "TOUR_LEG_REPORT_NOT_FOUND"


class InvalidReviewStatus(DomainError):
    """A review requested a status outside PENDING/APPROVED/REJECTED."""

    code = "INVALID_REVIEW_STATUS"


class DirectoryIdentityRequired(DomainError):
    """The member has no flight directory identity (VID) to look sessions up by."""

    code = "DIRECTORY_IDENTITY_REQUIRED"
