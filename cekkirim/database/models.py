"""
cekkirim.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- tycoon_profiles    — Per-user XP / level / warehouse profile
- xp_transactions    — Append-only XP grant ledger, unique per (user, source)
- mission_templates  — Catalogue the daily batches are drawn from
- daily_missions     — One row per user per template per mission day
- admin_log          — Append-only audit trail for template edits
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from cekkirim.constants import LEVEL_LADDER, Difficulty


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all CekKirim ORM models."""


# ---------------------------------------------------------------------------
# TycoonProfile — one row per user
# ---------------------------------------------------------------------------
class TycoonProfile(Base):
    """XP and warehouse level of a seller.

    ``level`` and ``warehouse_name`` are derived from ``xp`` through the
    ladder in :mod:`cekkirim.constants` but stored for display.  Only
    :func:`cekkirim.services.tycoon_service.award_xp_in_session` writes them.
    """
    __tablename__ = "tycoon_profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    warehouse_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=LEVEL_LADDER[0].name
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_tycoon_profiles_xp", "xp"),
    )

    def __repr__(self) -> str:
        return f"<TycoonProfile user={self.user_id!r} xp={self.xp} lvl={self.level}>"


# ---------------------------------------------------------------------------
# XPTransaction — append-only XP ledger
# ---------------------------------------------------------------------------
class XPTransaction(Base):
    __tablename__ = "xp_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(100), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        # One grant per source tag per user — makes award_xp idempotent
        UniqueConstraint("user_id", "source", name="uq_xp_transactions_user_source"),
        Index("ix_xp_transactions_user_time", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return (
            f"<XPTransaction id={self.id} user={self.user_id!r} "
            f"amount={self.amount} source={self.source!r}>"
        )


# ---------------------------------------------------------------------------
# MissionTemplate — catalogue entries
# ---------------------------------------------------------------------------
class MissionTemplate(Base):
    __tablename__ = "mission_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    task_type: Mapped[str] = mapped_column(String(50), nullable=False)
    target_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    difficulty: Mapped[str] = mapped_column(
        String(10), nullable=False, default=Difficulty.EASY.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    instances: Mapped[list[DailyMission]] = relationship(back_populates="template")

    __table_args__ = (
        Index("ix_mission_templates_active_difficulty", "is_active", "difficulty"),
    )

    def __repr__(self) -> str:
        return (
            f"<MissionTemplate id={self.id} title={self.title!r} "
            f"difficulty={self.difficulty}>"
        )


# ---------------------------------------------------------------------------
# DailyMission — per-user, per-day mission instance
# ---------------------------------------------------------------------------
class DailyMission(Base):
    __tablename__ = "daily_missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    template_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("mission_templates.id", ondelete="RESTRICT"), nullable=False
    )
    mission_date: Mapped[date] = mapped_column(Date, nullable=False)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    template: Mapped[MissionTemplate] = relationship(back_populates="instances")

    __table_args__ = (
        # A racing second generation for the same day fails here
        UniqueConstraint(
            "user_id", "template_id", "mission_date",
            name="uq_daily_missions_user_template_date",
        ),
        Index("ix_daily_missions_user_date", "user_id", "mission_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<DailyMission id={self.id} user={self.user_id!r} "
            f"date={self.mission_date} progress={self.progress}>"
        )


# ---------------------------------------------------------------------------
# AdminLog — append-only audit trail
# ---------------------------------------------------------------------------
class AdminLog(Base):
    __tablename__ = "admin_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action_type: Mapped[str] = mapped_column(String(50), nullable=False)
    target_table: Mapped[str] = mapped_column(String(50), nullable=False)
    target_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    before_snapshot: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    after_snapshot: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_admin_log_actor_time", "actor_id", "timestamp"),
        Index("ix_admin_log_target", "target_table", "target_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<AdminLog id={self.id} actor={self.actor_id!r} action={self.action_type}>"
