"""
cekkirim.services.tycoon_service — Tycoon Profile & XP Awards
==============================================================

The only writer of ``tycoon_profiles.xp`` / ``level``.

Every award runs in one transaction:
  1. Lock (or lazily create) the profile row
  2. Insert the ``xp_transactions`` row inside a SAVEPOINT —
     a repeated ``(user_id, source)`` means the grant already happened
  3. Add the XP, and move the level up if the ladder says so
  4. Commit
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cekkirim.constants import LEVEL_LADDER, MAX_LEVEL, LevelDefinition
from cekkirim.database.models import TycoonProfile, XPTransaction
from cekkirim.engine.levels import (
    get_level_info,
    level_for_xp,
    perks_unlocked_between,
    xp_progress,
)
from cekkirim.exceptions import InvalidXPAmount

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass
class XPAwardResult:
    """Outcome of an XP award, used for the "level up" toast."""

    new_level: int
    new_xp: int
    old_level: int
    warehouse_name: str
    unlocked_perks: list[LevelDefinition] = field(default_factory=list)
    duplicate: bool = False

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


def get_profile(session: Session, user_id: str, *, for_update: bool = False) -> TycoonProfile:
    """Fetch the profile row, inserting a level-1 profile if absent.

    With ``for_update=True`` the row is read with ``SELECT … FOR UPDATE`` so
    concurrent awards for the same user serialize instead of losing updates.
    """
    profile = session.get(TycoonProfile, user_id, with_for_update=for_update or None)
    if profile is not None:
        return profile

    profile = TycoonProfile(
        user_id=user_id,
        xp=0,
        level=LEVEL_LADDER[0].level,
        warehouse_name=LEVEL_LADDER[0].name,
    )
    try:
        with session.begin_nested():
            session.add(profile)
            session.flush()
    except IntegrityError:
        # Another request created it first
        profile = session.get(
            TycoonProfile, user_id, with_for_update=for_update or None, populate_existing=True
        )
        if profile is None:
            raise
    else:
        logger.info("Created tycoon profile for user %s", user_id)
    return profile


def award_xp_in_session(
    session: Session,
    user_id: str,
    amount: int,
    source: str,
) -> XPAwardResult:
    """Apply an XP grant inside the caller's transaction (no commit).

    Raises
    ------
    InvalidXPAmount
        If *amount* is not a positive integer.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidXPAmount(amount)

    profile = get_profile(session, user_id, for_update=True)
    old_level = profile.level

    try:
        with session.begin_nested():   # SAVEPOINT
            session.add(XPTransaction(user_id=user_id, amount=amount, source=source))
            session.flush()
    except IntegrityError:
        logger.warning(
            "Duplicate XP grant ignored: user=%s source=%s", user_id, source
        )
        return XPAwardResult(
            new_level=profile.level,
            new_xp=profile.xp,
            old_level=old_level,
            warehouse_name=profile.warehouse_name,
            duplicate=True,
        )

    new_xp = profile.xp + amount
    ladder_entry = level_for_xp(new_xp)

    profile.xp = new_xp
    unlocked: list[LevelDefinition] = []
    if ladder_entry.level > profile.level:
        profile.level = ladder_entry.level
        profile.warehouse_name = ladder_entry.name
        unlocked = perks_unlocked_between(old_level, ladder_entry.level)
        logger.info(
            "User %s leveled up %d → %d (%s)",
            user_id, old_level, profile.level, profile.warehouse_name,
        )
    session.flush()

    return XPAwardResult(
        new_level=profile.level,
        new_xp=profile.xp,
        old_level=old_level,
        warehouse_name=profile.warehouse_name,
        unlocked_perks=unlocked,
    )


def award_xp(engine: Engine, user_id: str, amount: int, source: str) -> XPAwardResult:
    """Award *amount* XP to *user_id*, tagged with *source* in the ledger.

    Repeating a *source* for the same user is a no-op that returns the
    current totals with ``duplicate=True``.
    """
    with Session(engine, expire_on_commit=False) as session:
        result = award_xp_in_session(session, user_id, amount, source)
        session.commit()
        return result


# ---------------------------------------------------------------------------
# Dashboard reads
# ---------------------------------------------------------------------------
def get_profile_summary(engine: Engine, user_id: str) -> dict:
    """Profile plus progress-bar numbers for the tycoon dashboard."""
    with Session(engine) as session:
        profile = get_profile(session, user_id)
        session.commit()

        # Name, perk, bar and next step all follow the stored level
        info = get_level_info(profile.level)
        progress = xp_progress(profile.xp, info.level)
        next_info = get_level_info(info.level + 1) if info.level < MAX_LEVEL else None
        return {
            "user_id": profile.user_id,
            "xp": profile.xp,
            "level": profile.level,
            "warehouse_name": profile.warehouse_name,
            "perk": info.perk,
            "progress": {
                "current": progress.current,
                "required": progress.required,
                "percentage": round(progress.percentage, 2),
            },
            "next_level": (
                {"level": next_info.level, "name": next_info.name, "min_xp": next_info.min_xp}
                if next_info else None
            ),
        }


def get_xp_history(engine: Engine, user_id: str, limit: int = 20) -> list[dict]:
    """Most recent ledger entries for *user_id*, newest first."""
    with Session(engine) as session:
        rows = session.scalars(
            select(XPTransaction)
            .where(XPTransaction.user_id == user_id)
            .order_by(XPTransaction.id.desc())
            .limit(limit)
        ).all()
        return [
            {
                "id": row.id,
                "amount": row.amount,
                "source": row.source,
                "timestamp": row.timestamp.isoformat() if row.timestamp else None,
            }
            for row in rows
        ]
