"""
cekkirim.api.routes.missions — Daily mission widget endpoints
==============================================================
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import Engine

from cekkirim.api.deps import get_current_user_id, get_engine, get_mission_date
from cekkirim.database.engine import run_db
from cekkirim.services import mission_service
from cekkirim.services.event_hooks import emit_mission_event

router = APIRouter(prefix="/missions", tags=["missions"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class MissionEventIn(BaseModel):
    event_type: str = Field(min_length=1, max_length=50)
    increment: int = Field(1, ge=1, le=1000)


# ---------------------------------------------------------------------------
# GET /missions
# ---------------------------------------------------------------------------
@router.get("")
async def list_missions(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_mission_date),
    engine: Engine = Depends(get_engine),
):
    """Today's missions, generating the batch on the first visit of the day."""
    views = await run_db(mission_service.get_daily_missions, engine, user_id, today)
    return [v.to_dict() for v in views]


# ---------------------------------------------------------------------------
# POST /missions/{mission_id}/claim
# ---------------------------------------------------------------------------
@router.post("/{mission_id}/claim")
async def claim_mission(
    mission_id: int,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_mission_date),
    engine: Engine = Depends(get_engine),
):
    """Claim a completed mission.  Rejections are mapped in ``api.main``."""
    result = await run_db(
        mission_service.claim_mission, engine, mission_id, user_id, today
    )
    award = result.award
    return {
        "success": True,
        "mission_id": result.mission_id,
        "xp": result.xp,
        "new_xp": award.new_xp,
        "new_level": award.new_level,
        "leveled_up": award.leveled_up,
        "warehouse_name": award.warehouse_name,
        "unlocked_perks": [p.perk for p in award.unlocked_perks],
    }


# ---------------------------------------------------------------------------
# POST /missions/events
# ---------------------------------------------------------------------------
@router.post("/events")
async def track_event(
    body: MissionEventIn,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_mission_date),
    engine: Engine = Depends(get_engine),
):
    """Report a business event (shipment booked, waybill checked, …)."""
    updated = await emit_mission_event(
        engine, user_id, body.event_type.strip().upper(), body.increment, today
    )
    return {"updated": updated}
