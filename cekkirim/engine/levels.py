"""
cekkirim.engine.levels — Warehouse Level Math
==============================================

Pure functions over :data:`cekkirim.constants.LEVEL_LADDER`.
No DB I/O; the tycoon service and the API both build on these.
"""

from __future__ import annotations

from dataclasses import dataclass

from cekkirim.constants import LEVEL_LADDER, MAX_LEVEL, MIN_LEVEL, NO_PERK, LevelDefinition

__all__ = [
    "XPProgress",
    "get_level_info",
    "level_for_xp",
    "perks_unlocked_between",
    "xp_progress",
]


@dataclass(frozen=True, slots=True)
class XPProgress:
    """Progress inside the current level, for the dashboard progress bar."""

    current: int
    required: int
    percentage: float


def level_for_xp(xp: int) -> LevelDefinition:
    """Highest ladder entry whose ``min_xp`` is at or below *xp*."""
    for entry in reversed(LEVEL_LADDER):
        if entry.min_xp <= xp:
            return entry
    return LEVEL_LADDER[0]


def get_level_info(level: int) -> LevelDefinition:
    """Ladder entry for *level*, clamped into ``1..MAX_LEVEL``."""
    clamped = min(max(level, MIN_LEVEL), MAX_LEVEL)
    return LEVEL_LADDER[clamped - MIN_LEVEL]


def xp_progress(xp: int, level: int | None = None) -> XPProgress:
    """XP earned inside the current level vs. XP needed for the next one.

    *level* defaults to the one *xp* reaches on the ladder; pass the stored
    level to measure from it instead (a level granted ahead of its XP shows
    an empty bar).  At max level the bar is full: ``current == required == xp``.
    """
    current = level_for_xp(xp) if level is None else get_level_info(level)
    if current.level >= MAX_LEVEL:
        return XPProgress(current=xp, required=xp, percentage=100.0)

    nxt = get_level_info(current.level + 1)
    in_level = max(xp - current.min_xp, 0)
    needed = nxt.min_xp - current.min_xp
    return XPProgress(
        current=in_level,
        required=needed,
        percentage=min(in_level / needed * 100, 100.0),
    )


def perks_unlocked_between(old_level: int, new_level: int) -> list[LevelDefinition]:
    """Ladder entries with a real perk in ``(old_level, new_level]``."""
    return [
        entry for entry in LEVEL_LADDER
        if old_level < entry.level <= new_level and entry.perk != NO_PERK
    ]
