"""
cekkirim.database.seed — Mission Template Catalogue Seeder
===========================================================

Baseline mission templates seeded on first startup so the first
``GET /api/missions`` of the day can build a full 1 EASY / 2 MEDIUM / 1 HARD
batch.

Idempotent — only inserts templates whose title doesn't already exist.
Templates edited or deactivated from the admin endpoints are never touched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from cekkirim.constants import Difficulty
from cekkirim.database.models import MissionTemplate

logger = logging.getLogger(__name__)

# Resolve the seeds directory relative to the project root
_SEEDS_DIR = Path(__file__).resolve().parent.parent.parent / "seeds"
DEFAULT_TEMPLATES_FILE = _SEEDS_DIR / "mission_templates.yaml"


def load_template_catalogue(path: str | Path | None = None) -> list[dict[str, Any]]:
    """Load template definitions from YAML.

    The file holds a top-level ``mission_templates`` list.  A missing file
    is logged and treated as an empty catalogue.
    """
    path = Path(path) if path is not None else DEFAULT_TEMPLATES_FILE
    if not path.exists():
        logger.warning("Seed file not found: %s", path)
        return []
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    return list(data.get("mission_templates") or [])


def seed_mission_templates(engine: Engine, path: str | Path | None = None) -> int:
    """Insert catalogue templates that don't yet exist (matched by title).

    Returns the number of templates inserted.
    """
    items = load_template_catalogue(path)
    if not items:
        return 0

    session = Session(engine)
    inserted = 0
    try:
        existing = set(session.scalars(select(MissionTemplate.title)).all())
        for item in items:
            if item["title"] in existing:
                continue
            session.add(MissionTemplate(
                title=item["title"],
                description=item.get("description"),
                task_type=item["task_type"],
                target_count=int(item.get("target_count", 1)),
                xp_reward=int(item["xp_reward"]),
                difficulty=Difficulty(item["difficulty"]).value,
                is_active=bool(item.get("is_active", True)),
            ))
            existing.add(item["title"])
            inserted += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    if inserted:
        logger.info("Seeded %d mission templates.", inserted)
    return inserted
