# src/tourcheck_api/domain/exceptions/flight_directory.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Flight Directory Domain Exceptions

Purpose:
    Failures of the external flight activity directory. The flight matcher
    absorbs all of them per strategy call; only the session picker lets a
    failed session search reach its caller.

Layer: domain/exceptions
"""

from __future__ import annotations

from .base import DomainError


class FlightDirectoryError(DomainError):
    """Base class for flight directory failures."""

    code = "FLIGHT_DIRECTORY_ERROR"


class FlightDirectoryUnavailable(FlightDirectoryError):
    """Directory unreachable, timed out, rate limited or returned 5xx."""

    code = "FLIGHT_DIRECTORY_UNAVAILABLE"


class FlightDirectoryBadRequest(FlightDirectoryError):
    """Directory rejected the request (4xx other than 429)."""

    code = "FLIGHT_DIRECTORY_BAD_REQUEST"


class FlightDirectoryValidationError(FlightDirectoryError):
    """Directory returned a payload that is not JSON."""

    code = "UPSTREAM_SCHEMA_ERROR"
