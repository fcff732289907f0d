"""Create tours, legs, enrollments, leg reports and audit logs.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

This migration:
  * Creates ``tours`` with the stored validation rule list.
  * Creates ``tour_legs`` (unique per tour and leg number).
  * Creates ``tour_enrollments`` (unique per member and tour).
  * Creates ``tour_leg_reports`` (unique per member and leg) with the
    review queue index on (status, submitted_at).
  * Creates ``audit_logs``.

Notes:
  - Tables land in ``DB_SCHEMA`` (default ``public``).
"""

from __future__ import annotations

import os
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

SCHEMA = os.getenv("DB_SCHEMA", "public") or None


def _fk(table: str) -> str:
    return f"{SCHEMA}.{table}.id" if SCHEMA else f"{table}.id"


def _timestamp(name: str, *, nullable: bool = False, server_now: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=nullable,
        server_default=sa.text("now()") if server_now else None,
    )


def upgrade() -> None:
    """Apply the migration."""
    json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

    op.create_table(
        "tours",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("allow_any_aircraft", sa.Boolean(), nullable=False),
        sa.Column("validation_rules", sa.Text(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        _timestamp("created_at", server_now=True),
        _timestamp("updated_at", server_now=True),
        sa.PrimaryKeyConstraint("id", name="pk_tours"),
        sa.UniqueConstraint("slug", name="uq_tours_slug"),
        schema=SCHEMA,
    )
    op.create_table(
        "tour_legs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tour_id", sa.Uuid(), nullable=False),
        sa.Column("leg_number", sa.Integer(), nullable=False),
        sa.Column("departure_code", sa.String(8), nullable=False),
        sa.Column("arrival_code", sa.String(8), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tour_legs"),
        sa.ForeignKeyConstraint(
            ["tour_id"], [_fk("tours")], name="fk_tour_legs_tour_id_tours", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("tour_id", "leg_number", name="uq_tour_legs_tour_id"),
        schema=SCHEMA,
    )
    op.create_table(
        "tour_enrollments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("tour_id", sa.Uuid(), nullable=False),
        _timestamp("accepted_at"),
        sa.Column("status", sa.String(16), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tour_enrollments"),
        sa.ForeignKeyConstraint(
            ["tour_id"],
            [_fk("tours")],
            name="fk_tour_enrollments_tour_id_tours",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", "tour_id", name="uq_tour_enrollments_user_id"),
        schema=SCHEMA,
    )
    op.create_table(
        "tour_leg_reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("tour_leg_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        _timestamp("submitted_at"),
        _timestamp("reviewed_at", nullable=True),
        sa.Column("reviewed_by_id", sa.String(64), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        _timestamp("flight_date", nullable=True),
        sa.Column("callsign", sa.String(32), nullable=True),
        sa.Column("aircraft", sa.String(32), nullable=True),
        sa.Column("route", sa.Text(), nullable=True),
        sa.Column("online", sa.Boolean(), nullable=False),
        sa.Column("evidence_url", sa.Text(), nullable=True),
        sa.Column("session_id", sa.String(64), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_tour_leg_reports"),
        sa.ForeignKeyConstraint(
            ["tour_leg_id"],
            [_fk("tour_legs")],
            name="fk_tour_leg_reports_tour_leg_id_tour_legs",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", "tour_leg_id", name="uq_tour_leg_reports_user_id"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_tour_leg_reports_status_submitted_at",
        "tour_leg_reports",
        ["status", "submitted_at"],
        schema=SCHEMA,
    )
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.String(64), nullable=True),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("entity_type", sa.String(64), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=False),
        sa.Column("before", json_type, nullable=True),
        sa.Column("after", json_type, nullable=True),
        _timestamp("created_at", server_now=True),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_audit_logs_entity",
        "audit_logs",
        ["entity_type", "entity_id"],
        schema=SCHEMA,
    )


def downgrade() -> None:
    """Revert the migration."""
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs", schema=SCHEMA)
    op.drop_table("audit_logs", schema=SCHEMA)
    op.drop_index(
        "ix_tour_leg_reports_status_submitted_at", table_name="tour_leg_reports", schema=SCHEMA
    )
    op.drop_table("tour_leg_reports", schema=SCHEMA)
    op.drop_table("tour_enrollments", schema=SCHEMA)
    op.drop_table("tour_legs", schema=SCHEMA)
    op.drop_table("tours", schema=SCHEMA)
