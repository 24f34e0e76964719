"""
cekkirim.api.routes.admin — Mission template administration
=============================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import Engine

from cekkirim.api.deps import get_current_admin, get_engine
from cekkirim.database.models import MissionTemplate
from cekkirim.services import template_service

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class TemplateCreate(BaseModel):
    title: str
    description: str | None = None
    task_type: str
    target_count: int = 1
    xp_reward: int
    difficulty: str


class TemplateUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    task_type: str | None = None
    target_count: int | None = None
    xp_reward: int | None = None
    difficulty: str | None = None
    is_active: bool | None = None


def _template_dict(t: MissionTemplate) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "task_type": t.task_type,
        "target_count": t.target_count,
        "xp_reward": t.xp_reward,
        "difficulty": t.difficulty,
        "is_active": t.is_active,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@router.get("/mission-templates")
def list_templates(
    include_inactive: bool = Query(True),
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    return [
        _template_dict(t)
        for t in template_service.list_templates(engine, include_inactive=include_inactive)
    ]


@router.post("/mission-templates", status_code=201)
def create_template(
    body: TemplateCreate,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    tmpl = template_service.create_template(
        engine, actor_id=str(admin["sub"]), **body.model_dump()
    )
    return _template_dict(tmpl)


@router.patch("/mission-templates/{template_id}")
def update_template(
    template_id: int,
    body: TemplateUpdate,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    changes = body.model_dump(exclude_unset=True)
    tmpl = template_service.update_template(
        engine, template_id, actor_id=str(admin["sub"]), **changes
    )
    if tmpl is None:
        raise HTTPException(404, "Template not found")
    return _template_dict(tmpl)


@router.delete("/mission-templates/{template_id}")
def deactivate_template(
    template_id: int,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    """Soft-delete: the template stops appearing in new daily batches."""
    if not template_service.deactivate_template(
        engine, template_id, actor_id=str(admin["sub"])
    ):
        raise HTTPException(404, "Template not found")
    return {"success": True}
