"""
cekkirim.exceptions — Domain Error Taxonomy
============================================

Business-rule rejections raised by the services.  Routes translate them
into HTTP errors with a readable ``detail`` and a stable ``code`` so the
dashboard can explain *why* a claim button was rejected.

Store failures are not wrapped: :class:`sqlalchemy.exc.SQLAlchemyError`
propagates to the caller unmodified.
"""

from __future__ import annotations

from typing import Any


class CekKirimError(Exception):
    """Base class for all CekKirim domain errors."""

    code: str = "CEKKIRIM_ERROR"

    def __init__(self, message: str, **details: Any) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "detail": self.message, **self.details}


# ---------------------------------------------------------------------------
# Missions
# ---------------------------------------------------------------------------
class MissionError(CekKirimError):
    code = "MISSION_ERROR"


class MissionNotFound(MissionError):
    """No mission with that id exists for this user today."""

    code = "MISSION_NOT_FOUND"

    def __init__(self, mission_id: int) -> None:
        super().__init__("Mission not found.", mission_id=mission_id)


class MissionAlreadyClaimed(MissionError):
    code = "MISSION_ALREADY_CLAIMED"

    def __init__(self, mission_id: int) -> None:
        super().__init__(
            "This mission's reward has already been claimed.",
            mission_id=mission_id,
        )


class MissionNotCompleted(MissionError):
    code = "MISSION_NOT_COMPLETED"

    def __init__(self, mission_id: int, progress: int, target_count: int) -> None:
        super().__init__(
            f"Mission not completed yet ({progress}/{target_count}).",
            mission_id=mission_id,
            progress=progress,
            target_count=target_count,
        )


# ---------------------------------------------------------------------------
# XP / templates
# ---------------------------------------------------------------------------
class InvalidXPAmount(CekKirimError):
    code = "INVALID_XP_AMOUNT"

    def __init__(self, amount: Any) -> None:
        super().__init__(
            f"XP amount must be a positive integer, got {amount!r}.",
            amount=amount,
        )


class InvalidTemplate(CekKirimError):
    code = "INVALID_TEMPLATE"
