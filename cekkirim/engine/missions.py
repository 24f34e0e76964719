"""
cekkirim.engine.missions — Daily Mission Rules
===============================================

Pure mission logic: status derivation, progress clamping, and picking the
day's batch out of the active catalogue.  No DB I/O.

Selection shuffles each difficulty bucket and takes the first N, which is a
uniform sample without replacement.  ``random.Random`` is fine here: this is
gameplay, not security.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from cekkirim.constants import DAILY_BATCH_COMPOSITION, Difficulty, MissionStatus

__all__ = [
    "DailySelection",
    "advance_progress",
    "mission_status",
    "select_daily_templates",
]


class _HasDifficulty(Protocol):
    id: int
    difficulty: str


TemplateT = TypeVar("TemplateT", bound=_HasDifficulty)


def mission_status(progress: int, target_count: int, is_claimed: bool) -> MissionStatus:
    if is_claimed:
        return MissionStatus.CLAIMED
    if progress >= target_count:
        return MissionStatus.COMPLETED
    return MissionStatus.IN_PROGRESS


def advance_progress(progress: int, increment: int, target_count: int) -> int:
    """New progress after *increment*, never above *target_count*."""
    return min(progress + increment, target_count)


@dataclass
class DailySelection:
    """Templates picked for one user-day, plus any per-bucket shortfall."""

    templates: list = field(default_factory=list)
    shortfall: dict[Difficulty, int] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.shortfall)


def select_daily_templates(
    templates: Iterable[TemplateT],
    rng: random.Random | None = None,
    composition: dict[Difficulty, int] = DAILY_BATCH_COMPOSITION,
) -> DailySelection:
    """Pick the day's batch: by default 1 EASY, 2 MEDIUM, 1 HARD.

    A bucket with too few templates contributes what it has; the missing
    count is reported in :attr:`DailySelection.shortfall`.
    """
    rng = rng or random.Random()

    buckets: dict[Difficulty, list[TemplateT]] = {d: [] for d in composition}
    for tmpl in templates:
        try:
            difficulty = Difficulty(tmpl.difficulty)
        except ValueError:
            continue
        if difficulty in buckets:
            buckets[difficulty].append(tmpl)

    selection = DailySelection()
    for difficulty, wanted in composition.items():
        # Sort first so a seeded rng gives the same batch on every backend
        shuffled = sorted(buckets[difficulty], key=lambda t: t.id)
        rng.shuffle(shuffled)
        picked = shuffled[:wanted]
        selection.templates.extend(picked)
        if len(picked) < wanted:
            selection.shortfall[difficulty] = wanted - len(picked)

    return selection
