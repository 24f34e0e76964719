"""
cekkirim.database.engine — Database Connection & Async Helper
==============================================================

SQLAlchemy + psycopg2 is **synchronous**.  The API and the business-event
hooks run on an ``asyncio`` event loop, so any DB work reached from async
code is shipped to a thread pool through :func:`run_db`:

    1. A business flow (order created, waybill checked) fires in async code.
    2. It calls ``await run_db(some_function, arg1, arg2)``.
    3. ``run_db`` hands the synchronous function to ``asyncio.to_thread()``.
    4. The DB work happens on a background thread; the event loop stays free.

Usage::

    from cekkirim.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    missions = await run_db(get_daily_missions, engine, user_id)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from cekkirim.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine() -> Engine:
    """Build a SQLAlchemy :class:`Engine` from the ``DATABASE_URL`` env var.

    The pool fails after 10 s instead of hanging a request forever when the
    database is saturated, and recycles connections hourly.

    Raises
    ------
    RuntimeError
        If ``DATABASE_URL`` is not set.
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    engine = create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_timeout=10,
        pool_recycle=3600,
    )
    logger.info("Database engine created → %s", engine.url.host)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables and seed the default mission template catalogue.

    Safe to call on every startup.  In production the schema is managed by
    Alembic (``alembic upgrade head``); ``create_all`` is kept for dev/test.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")

    from cekkirim.database.seed import seed_mission_templates

    seed_mission_templates(engine)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that commits on success and rolls back
    on exception.

    Usage::

        with get_session(engine) as session:
            session.add(TycoonProfile(user_id="u-1"))
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Parameters
    ----------
    func:
        Any sync callable (typically a service function taking the engine).
    *args, **kwargs:
        Forwarded to *func*.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
