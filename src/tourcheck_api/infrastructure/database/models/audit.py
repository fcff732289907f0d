# src/tourcheck_api/infrastructure/database/models/audit.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Audit log persistence model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from tourcheck_api.infrastructure.database.models.base import (
    Base,
    IdentityMixin,
    JSONType,
    now_utc,
    table_args,
)


class AuditLogModel(IdentityMixin, Base):
    """Before/after record of one entity write.

    Attributes:
        actor_id: Member or staff id performing the write.
        action: ``create`` or ``update``.
        entity_type: Logical entity name.
        entity_id: Written entity identifier.
        before: Snapshot before the write, or NULL on creation.
        after: Snapshot after the write.
        created_at: UTC time of the audit record.
    """

    __tablename__ = "audit_logs"
    __table_args__ = table_args(
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    actor_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    before: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    after: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
