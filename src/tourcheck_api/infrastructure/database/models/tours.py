# src/tourcheck_api/infrastructure/database/models/tours.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tour persistence models.

Purpose:
    SQLAlchemy models for tours, legs, enrollments and leg reports.

Layer:
    infrastructure

Notes:
    ``tour_leg_reports`` is unique on (user_id, tour_leg_id) and
    ``tour_enrollments`` on (user_id, tour_id); repositories rely on these
    constraints for upsert semantics.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import DateTime, Uuid

from tourcheck_api.infrastructure.database.models.base import (
    Base,
    IdentityMixin,
    TimestampMixin,
    qualified,
    table_args,
)


class TourModel(IdentityMixin, TimestampMixin, Base):
    """A tour and its stored validation rules."""

    __tablename__ = "tours"
    __table_args__ = table_args(UniqueConstraint("slug"))

    slug: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    allow_any_aircraft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    validation_rules: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="JSON array of {key, value?, public?, publicLabel?} objects.",
    )
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    legs: Mapped[list[TourLegModel]] = relationship(
        back_populates="tour",
        order_by="TourLegModel.leg_number",
        lazy="selectin",
    )


class TourLegModel(IdentityMixin, Base):
    """One leg of a tour."""

    __tablename__ = "tour_legs"
    __table_args__ = table_args(UniqueConstraint("tour_id", "leg_number"))

    tour_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey(f"{qualified('tours')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    leg_number: Mapped[int] = mapped_column(Integer, nullable=False)
    departure_code: Mapped[str] = mapped_column(String(8), nullable=False)
    arrival_code: Mapped[str] = mapped_column(String(8), nullable=False)

    tour: Mapped[TourModel] = relationship(back_populates="legs")


class TourEnrollmentModel(IdentityMixin, Base):
    """A member's enrollment in a tour."""

    __tablename__ = "tour_enrollments"
    __table_args__ = table_args(UniqueConstraint("user_id", "tour_id"))

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    tour_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey(f"{qualified('tours')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    accepted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ACTIVE")


class TourLegReportModel(IdentityMixin, Base):
    """A member's report for one leg."""

    __tablename__ = "tour_leg_reports"
    __table_args__ = table_args(
        UniqueConstraint("user_id", "tour_leg_id"),
        Index("ix_tour_leg_reports_status_submitted_at", "status", "submitted_at"),
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    tour_leg_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey(f"{qualified('tour_legs')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    flight_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    callsign: Mapped[str | None] = mapped_column(String(32), nullable=True)
    aircraft: Mapped[str | None] = mapped_column(String(32), nullable=True)
    route: Mapped[str | None] = mapped_column(Text, nullable=True)
    online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    evidence_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
