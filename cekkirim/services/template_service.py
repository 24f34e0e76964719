"""
cekkirim.services.template_service — Audited Mission Template Admin
====================================================================

Every write follows the pattern:
  1. Begin transaction
  2. Read "before" snapshot
  3. Validate + apply change
  4. Write admin_log with before/after snapshots
  5. Commit

Templates are deactivated, never deleted: past ``daily_missions`` rows keep
pointing at them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from cekkirim.constants import Difficulty
from cekkirim.database.models import AdminLog, MissionTemplate
from cekkirim.exceptions import InvalidTemplate

logger = logging.getLogger(__name__)

TABLE_NAME = "mission_templates"
EDITABLE_FIELDS = frozenset({
    "title", "description", "task_type", "target_count",
    "xp_reward", "difficulty", "is_active",
})
# Columns declared NOT NULL on mission_templates
REQUIRED_FIELDS = EDITABLE_FIELDS - {"description"}


# ---------------------------------------------------------------------------
# Audit helpers
# ---------------------------------------------------------------------------
def _row_to_dict(obj: Any) -> dict | None:
    """Convert a SQLAlchemy model instance to a JSON-serializable dict."""
    if obj is None:
        return None
    result = {}
    for col in obj.__table__.columns:
        val = getattr(obj, col.key, None)
        if isinstance(val, datetime):
            val = val.isoformat()
        result[col.name] = val
    return result


def _log_admin_action(
    session: Session,
    *,
    actor_id: str,
    action_type: str,
    target_id: str | None,
    before: dict | None,
    after: dict | None,
    reason: str | None = None,
) -> None:
    session.add(AdminLog(
        actor_id=actor_id,
        action_type=action_type,
        target_table=TABLE_NAME,
        target_id=target_id,
        before_snapshot=before,
        after_snapshot=after,
        reason=reason,
    ))


def _validate(fields: dict[str, Any]) -> dict[str, Any]:
    """Check and normalise template fields; raises :class:`InvalidTemplate`."""
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise InvalidTemplate(f"Unknown template field(s): {', '.join(sorted(unknown))}")

    missing = sorted(k for k in REQUIRED_FIELDS if k in fields and fields[k] is None)
    if missing:
        raise InvalidTemplate(f"Field(s) must not be null: {', '.join(missing)}")

    clean = dict(fields)
    if "title" in clean:
        clean["title"] = str(clean["title"]).strip()
        if not clean["title"]:
            raise InvalidTemplate("Title must not be empty.")
    if "task_type" in clean and not str(clean["task_type"]).strip():
        raise InvalidTemplate("Task type must not be empty.")
    for key in ("target_count", "xp_reward"):
        if key in clean:
            value = clean[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidTemplate(f"{key} must be an integer of at least 1.")
    if "is_active" in clean and not isinstance(clean["is_active"], bool):
        raise InvalidTemplate("is_active must be true or false.")
    if "difficulty" in clean:
        try:
            clean["difficulty"] = Difficulty(str(clean["difficulty"]).upper()).value
        except ValueError:
            raise InvalidTemplate(
                f"difficulty must be one of {', '.join(d.value for d in Difficulty)}."
            ) from None
    if "task_type" in clean:
        clean["task_type"] = str(clean["task_type"]).strip().upper()
    return clean


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def list_templates(engine, *, include_inactive: bool = True) -> list[MissionTemplate]:
    with Session(engine) as session:
        stmt = select(MissionTemplate).order_by(MissionTemplate.difficulty, MissionTemplate.id)
        if not include_inactive:
            stmt = stmt.where(MissionTemplate.is_active.is_(True))
        rows = session.scalars(stmt).all()
        for r in rows:
            session.expunge(r)
        return list(rows)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
def create_template(
    engine,
    *,
    actor_id: str,
    title: str,
    task_type: str,
    xp_reward: int,
    difficulty: str,
    target_count: int = 1,
    description: str | None = None,
) -> MissionTemplate:
    fields = _validate({
        "title": title,
        "description": description,
        "task_type": task_type,
        "target_count": target_count,
        "xp_reward": xp_reward,
        "difficulty": difficulty,
    })
    with Session(engine, expire_on_commit=False) as session:
        existing = session.scalar(
            select(MissionTemplate.id).where(MissionTemplate.title == fields["title"])
        )
        if existing is not None:
            raise InvalidTemplate(f"A template titled {fields['title']!r} already exists.")

        tmpl = MissionTemplate(**fields, is_active=True)
        session.add(tmpl)
        session.flush()
        _log_admin_action(
            session,
            actor_id=actor_id,
            action_type="CREATE",
            target_id=str(tmpl.id),
            before=None,
            after=_row_to_dict(tmpl),
        )
        session.commit()
        session.refresh(tmpl)
        session.expunge(tmpl)

    logger.info("Mission template %d created by %s", tmpl.id, actor_id)
    return tmpl


def update_template(
    engine,
    template_id: int,
    *,
    actor_id: str,
    reason: str | None = None,
    **changes: Any,
) -> MissionTemplate | None:
    """Apply *changes* to a template.  Returns ``None`` if it doesn't exist."""
    clean = _validate(changes)
    with Session(engine, expire_on_commit=False) as session:
        tmpl = session.get(MissionTemplate, template_id)
        if tmpl is None:
            return None
        if "title" in clean and clean["title"] != tmpl.title:
            clash = session.scalar(
                select(MissionTemplate.id).where(
                    MissionTemplate.title == clean["title"],
                    MissionTemplate.id != template_id,
                )
            )
            if clash is not None:
                raise InvalidTemplate(f"A template titled {clean['title']!r} already exists.")
        before = _row_to_dict(tmpl)
        for key, value in clean.items():
            setattr(tmpl, key, value)
        session.flush()
        _log_admin_action(
            session,
            actor_id=actor_id,
            action_type="UPDATE",
            target_id=str(template_id),
            before=before,
            after=_row_to_dict(tmpl),
            reason=reason,
        )
        session.commit()
        session.refresh(tmpl)
        session.expunge(tmpl)
        return tmpl


def deactivate_template(engine, template_id: int, *, actor_id: str) -> bool:
    """Take a template out of future daily batches."""
    tmpl = update_template(
        engine, template_id, actor_id=actor_id, reason="deactivate", is_active=False
    )
    return tmpl is not None
