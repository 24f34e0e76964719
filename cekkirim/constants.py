"""
cekkirim.constants — Shared Constants
======================================

Single source of truth for the warehouse level ladder, the daily mission
batch shape, and the task-type vocabulary business events use.
Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Level ladder
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LevelDefinition:
    level: int
    min_xp: int
    name: str
    perk: str


LEVEL_LADDER: tuple[LevelDefinition, ...] = (
    LevelDefinition(1, 0, "Garasi Rumah", "Starter Pack"),
    LevelDefinition(2, 100, "Garasi Rumah (Upgraded)", "None"),
    LevelDefinition(3, 300, "Toko Kecil", "Diskon 5%"),
    LevelDefinition(4, 600, "Toko Kecil (Ramai)", "Skin: Blue Truck"),
    LevelDefinition(5, 1000, "Gudang Sedang", "Prioritas CS"),
    LevelDefinition(6, 1500, "Gudang Sedang (Full)", "Diskon 10%"),
    LevelDefinition(7, 2200, "Gudang Besar", "Skin: Gold Truck"),
    LevelDefinition(8, 3000, "Gudang Besar (Automated)", "Analisis Bisnis"),
    LevelDefinition(9, 4000, "Gudang Raksasa", "Diskon 15%"),
    LevelDefinition(10, 5500, "Gudang Raksasa (Sultan)", "ALL FREE ADMIN FEES"),
)
"""Ascending by ``min_xp``; entry ``i`` is level ``i + 1``."""

MIN_LEVEL = LEVEL_LADDER[0].level
MAX_LEVEL = LEVEL_LADDER[-1].level

# Perk label meaning "nothing unlocked at this level"
NO_PERK = "None"


# ---------------------------------------------------------------------------
# Daily missions
# ---------------------------------------------------------------------------
class Difficulty(enum.StrEnum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


DAILY_BATCH_COMPOSITION: dict[Difficulty, int] = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 1,
}

DAILY_BATCH_SIZE = sum(DAILY_BATCH_COMPOSITION.values())


class MissionStatus(enum.StrEnum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CLAIMED = "CLAIMED"


class TaskType(enum.StrEnum):
    """Business events that can advance a mission.

    Templates may use any string; these are the ones the dashboard emits.
    """
    LOGIN = "LOGIN"
    CEK_RESI = "CEK_RESI"
    CEK_ONGKIR = "CEK_ONGKIR"
    CREATE_SHIPMENT = "CREATE_SHIPMENT"
    TOPUP = "TOPUP"
    SHARE = "SHARE"
    OPTIMIZE = "OPTIMIZE"
    REFERRAL = "REFERRAL"
    BULK_LABEL = "BULK_LABEL"
    POST_THREAD = "POST_THREAD"


# XP ledger source tag for mission claims: MISSION_<mission id>
MISSION_SOURCE_PREFIX = "MISSION_"


def mission_source(mission_id: int) -> str:
    return f"{MISSION_SOURCE_PREFIX}{mission_id}"
