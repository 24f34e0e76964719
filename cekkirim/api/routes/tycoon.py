"""
cekkirim.api.routes.tycoon — Warehouse profile & level ladder
==============================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Engine

from cekkirim.api.deps import get_current_user_id, get_engine
from cekkirim.constants import LEVEL_LADDER
from cekkirim.services import tycoon_service

router = APIRouter(prefix="/tycoon", tags=["tycoon"])


@router.get("/profile")
def get_profile(
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
):
    return tycoon_service.get_profile_summary(engine, user_id)


@router.get("/history")
def get_history(
    limit: int = Query(20, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
):
    """Recent XP grants, newest first."""
    return tycoon_service.get_xp_history(engine, user_id, limit=limit)


@router.get("/levels")
def get_levels():
    return [
        {"level": e.level, "min_xp": e.min_xp, "name": e.name, "perk": e.perk}
        for e in LEVEL_LADDER
    ]
