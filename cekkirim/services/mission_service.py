"""
cekkirim.services.mission_service — Daily Missions
===================================================

Generates each user's daily batch (1 EASY, 2 MEDIUM, 1 HARD), advances
progress when business events arrive, and turns completed missions into
XP exactly once.

Every operation takes an explicit ``today``; when omitted it is the current
date in the configured timezone (:func:`cekkirim.config.get_config`), the
same source the API uses.  Missions from earlier days
are never returned, advanced, or claimable.

Concurrency:
- First read of the day generates the batch under a row lock on the user's
  ``tycoon_profiles`` row, then re-reads before inserting, so a second
  request waits and sees the first batch whatever templates it drew.
  ``uq_daily_missions_user_template_date`` (with the shuffle seeded by
  ``"<user_id>:<date>"``) backs this up on stores without row locks.
- Claiming flips ``is_claimed`` and grants XP in the same transaction.
"""

from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from sqlalchemy import case, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cekkirim.config import get_config
from cekkirim.constants import DAILY_BATCH_SIZE, Difficulty, mission_source
from cekkirim.database.models import DailyMission, MissionTemplate
from cekkirim.engine.missions import advance_progress, mission_status, select_daily_templates
from cekkirim.exceptions import MissionAlreadyClaimed, MissionNotCompleted, MissionNotFound
from cekkirim.services.tycoon_service import XPAwardResult, award_xp_in_session, get_profile

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_DIFFICULTY_ORDER = case(
    {Difficulty.EASY.value: 0, Difficulty.MEDIUM.value: 1, Difficulty.HARD.value: 2},
    value=MissionTemplate.difficulty,
    else_=3,
)


def current_mission_date(tz: ZoneInfo | None = None) -> date:
    """Today's calendar date in *tz*, defaulting to ``config.timezone``."""
    return datetime.now(tz or get_config().tzinfo).date()


def daily_rng(user_id: str, mission_date: date) -> random.Random:
    """Shuffle source for one user-day; same inputs, same batch."""
    return random.Random(f"{user_id}:{mission_date.isoformat()}")


# ---------------------------------------------------------------------------
# View model
# ---------------------------------------------------------------------------
@dataclass
class MissionView:
    id: int
    config_id: int
    title: str
    description: str | None
    task_type: str
    difficulty: str
    progress: int
    target_count: int
    is_claimed: bool
    xp_reward: int
    status: str
    date: str

    def to_dict(self) -> dict:
        return asdict(self)


def _to_view(mission: DailyMission, template: MissionTemplate) -> MissionView:
    return MissionView(
        id=mission.id,
        config_id=template.id,
        title=template.title,
        description=template.description,
        task_type=template.task_type,
        difficulty=template.difficulty,
        progress=mission.progress,
        target_count=template.target_count,
        is_claimed=mission.is_claimed,
        xp_reward=template.xp_reward,
        status=mission_status(
            mission.progress, template.target_count, mission.is_claimed
        ).value,
        date=mission.mission_date.isoformat(),
    )


@dataclass
class ClaimResult:
    mission_id: int
    xp: int
    award: XPAwardResult


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def _load_missions(
    session: Session, user_id: str, mission_date: date
) -> list[tuple[DailyMission, MissionTemplate]]:
    rows = session.execute(
        select(DailyMission, MissionTemplate)
        .join(MissionTemplate, DailyMission.template_id == MissionTemplate.id)
        .where(
            DailyMission.user_id == user_id,
            DailyMission.mission_date == mission_date,
        )
        .order_by(_DIFFICULTY_ORDER, DailyMission.id)
    ).all()
    return [(row[0], row[1]) for row in rows]


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------
def generate_missions(
    session: Session,
    user_id: str,
    mission_date: date,
    rng: random.Random | None = None,
) -> list[DailyMission]:
    """Insert today's batch for *user_id* (flushes, does not commit).

    Callers must only invoke this when no missions exist for the day; a
    second call for the same day violates the unique constraint.
    """
    templates = session.scalars(
        select(MissionTemplate).where(MissionTemplate.is_active.is_(True))
    ).all()
    selection = select_daily_templates(templates, rng=rng)

    if selection.is_partial:
        logger.warning(
            "Partial mission batch for user %s on %s: %d/%d (short: %s)",
            user_id, mission_date, len(selection.templates), DAILY_BATCH_SIZE,
            {d.value: n for d, n in selection.shortfall.items()},
        )

    missions = [
        DailyMission(
            user_id=user_id,
            template_id=tmpl.id,
            mission_date=mission_date,
            progress=0,
            is_claimed=False,
        )
        for tmpl in selection.templates
    ]
    session.add_all(missions)
    session.flush()
    return missions


def get_daily_missions(
    engine: Engine,
    user_id: str,
    today: date | None = None,
    rng: random.Random | None = None,
) -> list[MissionView]:
    """Return today's missions for *user_id*, generating the batch on first read."""
    today = today or current_mission_date()
    rng = rng or daily_rng(user_id, today)

    with Session(engine) as session:
        rows = _load_missions(session, user_id, today)
        if rows:
            return [_to_view(m, t) for m, t in rows]

        # Generation is serialized on the user's profile row; whoever waited
        # on the lock finds the winner's batch on the re-read.
        get_profile(session, user_id, for_update=True)
        rows = _load_missions(session, user_id, today)
        if rows:
            views = [_to_view(m, t) for m, t in rows]
            session.commit()
            return views

        try:
            generate_missions(session, user_id, today, rng=rng)
            session.commit()
            logger.info("Generated daily missions for user %s on %s", user_id, today)
        except IntegrityError:
            # A concurrent request generated the batch first
            session.rollback()
            logger.info(
                "Daily missions for user %s on %s already generated — re-reading",
                user_id, today,
            )

        rows = _load_missions(session, user_id, today)
        return [_to_view(m, t) for m, t in rows]


# ---------------------------------------------------------------------------
# Progress tracking
# ---------------------------------------------------------------------------
def track_mission_event(
    engine: Engine,
    user_id: str,
    event_type: str,
    increment: int = 1,
    today: date | None = None,
) -> int:
    """Advance every unclaimed mission of today whose task type matches.

    Progress is clamped at the template's ``target_count``; rows already at
    the cap are not written.  Returns the number of missions that changed.
    """
    if increment <= 0:
        return 0
    today = today or current_mission_date()

    with Session(engine) as session:
        rows = session.execute(
            select(DailyMission, MissionTemplate.target_count)
            .join(MissionTemplate, DailyMission.template_id == MissionTemplate.id)
            .where(
                DailyMission.user_id == user_id,
                DailyMission.mission_date == today,
                DailyMission.is_claimed.is_(False),
                MissionTemplate.task_type == str(event_type),
            )
        ).all()

        updated = 0
        for mission, target_count in rows:
            new_progress = advance_progress(mission.progress, increment, target_count)
            if new_progress != mission.progress:
                mission.progress = new_progress
                updated += 1

        session.commit()

    if updated:
        logger.debug(
            "Event %s advanced %d mission(s) for user %s", event_type, updated, user_id
        )
    return updated


# ---------------------------------------------------------------------------
# Claiming
# ---------------------------------------------------------------------------
def claim_mission(
    engine: Engine,
    mission_id: int,
    user_id: str,
    today: date | None = None,
) -> ClaimResult:
    """Claim a completed mission's XP reward.

    Raises
    ------
    MissionNotFound
        No mission with that id for this user today.
    MissionAlreadyClaimed
        The reward was already taken.
    MissionNotCompleted
        Progress is still below the target.
    """
    today = today or current_mission_date()

    with Session(engine, expire_on_commit=False) as session:
        row = session.execute(
            select(DailyMission, MissionTemplate)
            .join(MissionTemplate, DailyMission.template_id == MissionTemplate.id)
            .where(
                DailyMission.id == mission_id,
                DailyMission.user_id == user_id,
                DailyMission.mission_date == today,
            )
            .with_for_update(of=DailyMission)
        ).first()

        if row is None:
            raise MissionNotFound(mission_id)
        mission, template = row[0], row[1]

        if mission.is_claimed:
            raise MissionAlreadyClaimed(mission_id)
        if mission.progress < template.target_count:
            raise MissionNotCompleted(mission_id, mission.progress, template.target_count)

        award = award_xp_in_session(
            session, user_id, template.xp_reward, mission_source(mission_id)
        )
        mission.is_claimed = True
        mission.claimed_at = datetime.now(UTC)
        session.commit()

    granted = 0 if award.duplicate else template.xp_reward
    logger.info(
        "User %s claimed mission %d (+%d XP, level %d)",
        user_id, mission_id, granted, award.new_level,
    )
    return ClaimResult(mission_id=mission_id, xp=granted, award=award)
