"""
CekKirim Tycoon — Gamified Progression for the CekKirim Logistics Dashboard
============================================================================
Sellers earn XP for everyday logistics work (checking waybills, booking
shipments, topping up), climb a ten-step warehouse ladder, and complete a
fresh batch of daily missions for bonus XP.

Package layout::

    cekkirim/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Level ladder, batch composition, task types
    ├── exceptions.py      # Error taxonomy surfaced to the dashboard
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # ORM models (profiles, missions, ledger, audit)
    │   └── seed.py        # Mission template catalogue seeder
    ├── engine/
    │   ├── levels.py      # Pure level math
    │   └── missions.py    # Pure mission status / selection logic
    ├── services/
    │   ├── tycoon_service.py    # Profile reads + XP awards
    │   ├── mission_service.py   # Daily missions: generate, track, claim
    │   ├── event_hooks.py       # Fire-and-forget business event entry point
    │   └── template_service.py  # Audit-logged template admin
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine / config / JWT dependencies
        └── routes/        # Missions, tycoon profile, admin endpoints
"""

__version__ = "0.1.0"
