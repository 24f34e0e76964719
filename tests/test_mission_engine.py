"""
tests/test_mission_engine.py — Unit Tests for Mission Rules
=============================================================

Status derivation, progress clamping and daily selection; no database.
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass

from cekkirim.constants import Difficulty, MissionStatus
from cekkirim.engine.missions import advance_progress, mission_status, select_daily_templates


@dataclass
class FakeTemplate:
    id: int
    difficulty: str


def _catalogue(easy: int, medium: int, hard: int) -> list[FakeTemplate]:
    templates = []
    next_id = 1
    for difficulty, n in (("EASY", easy), ("MEDIUM", medium), ("HARD", hard)):
        for _ in range(n):
            templates.append(FakeTemplate(next_id, difficulty))
            next_id += 1
    return templates


class TestMissionStatus:
    def test_in_progress(self):
        assert mission_status(2, 5, False) is MissionStatus.IN_PROGRESS

    def test_completed_at_target(self):
        assert mission_status(5, 5, False) is MissionStatus.COMPLETED

    def test_claimed_wins(self):
        assert mission_status(5, 5, True) is MissionStatus.CLAIMED
        assert mission_status(0, 5, True) is MissionStatus.CLAIMED


class TestAdvanceProgress:
    def test_increments(self):
        assert advance_progress(1, 1, 5) == 2

    def test_clamps_large_increment(self):
        assert advance_progress(3, 10_000, 5) == 5

    def test_already_at_cap(self):
        assert advance_progress(5, 1, 5) == 5


class TestSelectDailyTemplates:
    def test_full_batch_shape(self):
        selection = select_daily_templates(_catalogue(3, 4, 2), rng=random.Random(7))
        counts = Counter(t.difficulty for t in selection.templates)
        assert counts == {"EASY": 1, "MEDIUM": 2, "HARD": 1}
        assert not selection.is_partial

    def test_medium_picked_without_replacement(self):
        for seed in range(20):
            selection = select_daily_templates(_catalogue(1, 2, 1), rng=random.Random(seed))
            medium_ids = [t.id for t in selection.templates if t.difficulty == "MEDIUM"]
            assert len(set(medium_ids)) == 2

    def test_partial_batch_reports_shortfall(self):
        selection = select_daily_templates(_catalogue(1, 1, 0), rng=random.Random(1))
        assert len(selection.templates) == 2
        assert selection.shortfall == {Difficulty.MEDIUM: 1, Difficulty.HARD: 1}
        assert selection.is_partial

    def test_empty_catalogue(self):
        selection = select_daily_templates([], rng=random.Random(1))
        assert selection.templates == []
        assert sum(selection.shortfall.values()) == 4

    def test_seeded_rng_is_deterministic_regardless_of_input_order(self):
        templates = _catalogue(5, 5, 5)
        first = select_daily_templates(templates, rng=random.Random("u-1:2026-03-02"))
        second = select_daily_templates(
            list(reversed(templates)), rng=random.Random("u-1:2026-03-02")
        )
        assert [t.id for t in first.templates] == [t.id for t in second.templates]

    def test_unknown_difficulty_ignored(self):
        templates = _catalogue(1, 2, 1) + [FakeTemplate(99, "LEGENDARY")]
        selection = select_daily_templates(templates, rng=random.Random(3))
        assert 99 not in {t.id for t in selection.templates}

    def test_every_easy_template_can_be_picked(self):
        templates = _catalogue(3, 2, 1)
        rng = random.Random(11)
        seen = set()
        for _ in range(200):
            selection = select_daily_templates(templates, rng=rng)
            seen.update(t.id for t in selection.templates if t.difficulty == "EASY")
        assert seen == {1, 2, 3}
