"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of cekkirim.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from cekkirim.constants import Difficulty  # noqa: E402
from cekkirim.database.models import Base, MissionTemplate  # noqa: E402

_jsonb_sqlite_registered = False

TODAY = date(2026, 3, 2)
TOMORROW = date(2026, 3, 3)


def _register_jsonb_sqlite_compat():
    """Render PG JSONB as TEXT on SQLite (idempotent)."""
    global _jsonb_sqlite_registered
    if _jsonb_sqlite_registered:
        return
    from sqlalchemy.ext.compiler import compiles

    @compiles(PG_JSONB, "sqlite")
    def _compile_jsonb_as_text(type_, compiler, **kw):
        return "TEXT"

    _jsonb_sqlite_registered = True


_register_jsonb_sqlite_compat()


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all CekKirim tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` inside ``run_db``).
    """
    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


def add_template(
    engine: Engine,
    title: str,
    difficulty: Difficulty,
    *,
    task_type: str = "CEK_RESI",
    target_count: int = 1,
    xp_reward: int = 10,
    is_active: bool = True,
) -> int:
    """Insert a MissionTemplate and return its id."""
    with Session(engine) as session:
        tmpl = MissionTemplate(
            title=title,
            description=f"{title} description",
            task_type=task_type,
            target_count=target_count,
            xp_reward=xp_reward,
            difficulty=difficulty.value,
            is_active=is_active,
        )
        session.add(tmpl)
        session.commit()
        return tmpl.id


@pytest.fixture
def catalogue(db_engine: Engine) -> dict[str, int]:
    """Exactly 1 EASY, 2 MEDIUM, 1 HARD active template — a full batch, no choice.

    Returns title → template id.
    """
    return {
        "Absen": add_template(
            db_engine, "Absen", Difficulty.EASY, task_type="LOGIN", xp_reward=10,
        ),
        "Kirim 3 Paket": add_template(
            db_engine, "Kirim 3 Paket", Difficulty.MEDIUM,
            task_type="CREATE_SHIPMENT", target_count=3, xp_reward=50,
        ),
        "Detektif Resi": add_template(
            db_engine, "Detektif Resi", Difficulty.MEDIUM,
            task_type="CEK_RESI", target_count=2, xp_reward=40,
        ),
        "Juragan Ekspedisi": add_template(
            db_engine, "Juragan Ekspedisi", Difficulty.HARD,
            task_type="CREATE_SHIPMENT", target_count=5, xp_reward=150,
        ),
    }


def make_token(sub: str = "user-1", *, is_admin: bool = False) -> str:
    import jwt

    from cekkirim.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": sub, "username": "Seller", "is_admin": is_admin},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


@pytest.fixture
def client(db_engine: Engine):
    """FastAPI TestClient wired to the in-memory engine and a fixed day."""
    from fastapi.testclient import TestClient

    from cekkirim.api import deps
    from cekkirim.api.main import app
    from cekkirim.config import CekKirimConfig

    app.dependency_overrides[deps.get_engine] = lambda: db_engine
    app.dependency_overrides[deps.get_mission_date] = lambda: TODAY
    app.dependency_overrides[deps.get_config] = lambda: CekKirimConfig(
        app_name="CekKirim Test", api_port=8000
    )
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
