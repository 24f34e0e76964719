"""
cekkirim.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn cekkirim.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from cekkirim.api.deps import get_engine  # noqa: E402
from cekkirim.api.routes.admin import router as admin_router  # noqa: E402
from cekkirim.api.routes.missions import router as missions_router  # noqa: E402
from cekkirim.api.routes.tycoon import router as tycoon_router  # noqa: E402
from cekkirim.database.engine import init_db  # noqa: E402
from cekkirim.exceptions import (  # noqa: E402
    CekKirimError,
    InvalidTemplate,
    InvalidXPAmount,
    MissionAlreadyClaimed,
    MissionNotCompleted,
    MissionNotFound,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[CekKirimError], int] = {
    MissionNotFound: 404,
    MissionAlreadyClaimed: 409,
    MissionNotCompleted: 409,
    InvalidXPAmount: 422,
    InvalidTemplate: 422,
}


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine and seed templates."""
    engine = get_engine()
    init_db(engine)
    logger.info("CekKirim Tycoon API started — engine ready (%s)", engine.url.database)
    yield
    logger.info("CekKirim Tycoon API shutting down")


app = FastAPI(
    title="CekKirim Tycoon API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CekKirimError)
async def domain_error_handler(request: Request, exc: CekKirimError) -> JSONResponse:
    """Turn business-rule rejections into readable 4xx responses."""
    status_code = _ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, **exc.to_dict()},
    )


# Mount routers
app.include_router(missions_router, prefix="/api")
app.include_router(tycoon_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
