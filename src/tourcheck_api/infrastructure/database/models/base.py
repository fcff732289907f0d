# src/tourcheck_api/infrastructure/database/models/base.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Declarative Base and canonical persistence mixins.

This module defines:
    - A project-wide SQLAlchemy Declarative Base with deterministic naming
      conventions (for stable Alembic diffs).
    - Persistence mixins for identity (UUIDv4) and audit timestamps (UTC).
    - Helpers for schema-qualified table arguments and foreign keys.

Notes:
    * Column types are dialect-portable (``Uuid``, ``JSON`` with a JSONB
      variant on PostgreSQL) so repositories can be exercised on SQLite.
    * The default schema comes from ``DB_SCHEMA`` (default ``public``); an
      empty value disables schema qualification.
"""

from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime, Uuid

__all__ = [
    "metadata",
    "Base",
    "IdentityMixin",
    "TimestampMixin",
    "JSONType",
    "DEFAULT_DB_SCHEMA",
    "qualified",
    "table_args",
    "now_utc",
]

#: Default database schema for all tables (env ``DB_SCHEMA``).
DEFAULT_DB_SCHEMA: str | None = os.getenv("DB_SCHEMA", "public") or None

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS)

#: JSON column type; JSONB on PostgreSQL.
JSONType = JSON().with_variant(JSONB(), "postgresql")


def now_utc() -> datetime:
    """Return the current UTC time with timezone info."""
    return datetime.now(UTC)


def qualified(table: str) -> str:
    """Return ``table`` qualified with the default schema, for ForeignKey targets."""
    return f"{DEFAULT_DB_SCHEMA}.{table}" if DEFAULT_DB_SCHEMA else table


def table_args(*items: Any) -> tuple[Any, ...]:
    """Build ``__table_args__`` from constraints/indexes plus the default schema."""
    if DEFAULT_DB_SCHEMA:
        return (*items, {"schema": DEFAULT_DB_SCHEMA})
    return items


class Base(DeclarativeBase):
    """Declarative Base for all ORM models.

    Attaches the metadata with stable naming conventions and configures the
    default schema via ``DEFAULT_DB_SCHEMA``. Models that declare their own
    constraints build ``__table_args__`` with :func:`table_args`.
    """

    metadata = metadata

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        """Attach default schema when configured."""
        return table_args()


class IdentityMixin:
    """Mixin providing a UUIDv4 primary key ``id`` column."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """Mixin providing ``created_at`` and ``updated_at`` timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
        server_default=func.now(),
    )
