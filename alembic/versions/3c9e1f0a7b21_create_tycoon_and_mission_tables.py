"""Create tycoon profile, XP ledger, mission and audit tables

Revision ID: 3c9e1f0a7b21
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c9e1f0a7b21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- tycoon_profiles ---
    op.create_table(
        "tycoon_profiles",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column("xp", sa.Integer, nullable=False, server_default="0"),
        sa.Column("level", sa.Integer, nullable=False, server_default="1"),
        sa.Column(
            "warehouse_name", sa.String(100), nullable=False,
            server_default="Garasi Rumah",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_tycoon_profiles_xp", "tycoon_profiles", ["xp"])

    # --- xp_transactions ---
    op.create_table(
        "xp_transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "source", name="uq_xp_transactions_user_source"),
    )
    op.create_index(
        "ix_xp_transactions_user_time", "xp_transactions", ["user_id", "timestamp"]
    )

    # --- mission_templates ---
    op.create_table(
        "mission_templates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("task_type", sa.String(50), nullable=False),
        sa.Column("target_count", sa.Integer, nullable=False, server_default="1"),
        sa.Column("xp_reward", sa.Integer, nullable=False, server_default="10"),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="EASY"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_mission_templates_active_difficulty",
        "mission_templates", ["is_active", "difficulty"],
    )

    # --- daily_missions ---
    op.create_table(
        "daily_missions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "template_id", sa.Integer,
            sa.ForeignKey("mission_templates.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("mission_date", sa.Date, nullable=False),
        sa.Column("progress", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_claimed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "user_id", "template_id", "mission_date",
            name="uq_daily_missions_user_template_date",
        ),
    )
    op.create_index(
        "ix_daily_missions_user_date", "daily_missions", ["user_id", "mission_date"]
    )

    # --- admin_log ---
    op.create_table(
        "admin_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("actor_id", sa.String(64), nullable=False),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("target_table", sa.String(50), nullable=False),
        sa.Column("target_id", sa.String(100), nullable=True),
        sa.Column("before_snapshot", postgresql.JSONB, nullable=True),
        sa.Column("after_snapshot", postgresql.JSONB, nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_admin_log_actor_time", "admin_log", ["actor_id", "timestamp"])
    op.create_index(
        "ix_admin_log_target", "admin_log", ["target_table", "target_id", "timestamp"]
    )


def downgrade() -> None:
    op.drop_table("admin_log")
    op.drop_table("daily_missions")
    op.drop_table("mission_templates")
    op.drop_table("xp_transactions")
    op.drop_table("tycoon_profiles")
