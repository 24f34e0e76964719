"""
cekkirim.services.event_hooks — Business Event Entry Point
===========================================================

Order creation, waybill lookups, top-ups and the like call
:func:`emit_mission_event` after their own work succeeds.  Mission tracking
must never break those flows, so failures are logged and swallowed here;
:func:`cekkirim.services.mission_service.track_mission_event` itself
propagates errors.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from cekkirim.database.engine import run_db
from cekkirim.services.mission_service import track_mission_event

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


async def emit_mission_event(
    engine: Engine,
    user_id: str,
    event_type: str,
    increment: int = 1,
    today: date | None = None,
) -> int:
    """Advance matching missions off the event loop.

    Returns the number of missions advanced, or 0 if tracking failed.
    """
    try:
        return await run_db(
            track_mission_event, engine, user_id, event_type, increment, today
        )
    except Exception:
        logger.exception(
            "Error tracking mission event %s for user %s", event_type, user_id
        )
        return 0
