"""
tests/test_seed.py — Mission Template Seeder Tests
===================================================
"""

from __future__ import annotations

from collections import Counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from cekkirim.database.models import MissionTemplate
from cekkirim.database.seed import load_template_catalogue, seed_mission_templates


def _templates(engine) -> list[MissionTemplate]:
    with Session(engine) as session:
        return list(session.scalars(select(MissionTemplate)).all())


class TestDefaultCatalogue:
    def test_can_build_a_full_batch(self):
        items = load_template_catalogue()
        counts = Counter(item["difficulty"] for item in items)
        assert counts["EASY"] >= 1
        assert counts["MEDIUM"] >= 2
        assert counts["HARD"] >= 1

    def test_seed_is_idempotent(self, db_engine):
        first = seed_mission_templates(db_engine)
        second = seed_mission_templates(db_engine)
        assert first == len(load_template_catalogue())
        assert second == 0
        assert len(_templates(db_engine)) == first


class TestCustomFile:
    def test_loads_from_path(self, db_engine, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text(
            "mission_templates:\n"
            "  - title: Cek Ongkir\n"
            "    task_type: CEK_ONGKIR\n"
            "    xp_reward: 5\n"
            "    difficulty: EASY\n",
            encoding="utf-8",
        )
        assert seed_mission_templates(db_engine, path) == 1
        [tmpl] = _templates(db_engine)
        assert tmpl.title == "Cek Ongkir"
        assert tmpl.target_count == 1
        assert tmpl.is_active is True

    def test_existing_titles_untouched(self, db_engine, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text(
            "mission_templates:\n"
            "  - {title: Absen, task_type: LOGIN, xp_reward: 10, difficulty: EASY}\n",
            encoding="utf-8",
        )
        seed_mission_templates(db_engine, path)
        with Session(db_engine) as session:
            session.scalar(select(MissionTemplate)).is_active = False
            session.commit()

        assert seed_mission_templates(db_engine, path) == 0
        [tmpl] = _templates(db_engine)
        assert tmpl.is_active is False

    def test_missing_file_seeds_nothing(self, db_engine, tmp_path):
        assert seed_mission_templates(db_engine, tmp_path / "nope.yaml") == 0
