"""
cekkirim.api.deps — FastAPI dependency injection
=================================================

Sessions are issued by the main CekKirim web app; this service only
verifies the bearer token it hands to the dashboard and reads ``sub`` as
the user id.
"""

from __future__ import annotations

import os
from datetime import date
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from cekkirim.config import CekKirimConfig, get_config
from cekkirim.database.engine import create_db_engine
from cekkirim.services.mission_service import current_mission_date

_WEAK_SECRETS = frozenset({
    "cekkirim-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Use the same secret as the CekKirim web app that issues sessions."
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


def get_mission_date(config: Annotated[CekKirimConfig, Depends(get_config)]) -> date:
    """The current mission day in the configured timezone."""
    return current_mission_date(config.tzinfo)


def _decode(authorization: str | None) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    if not payload.get("sub"):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    return payload


def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Validate the JWT and return its ``sub``. Raises 401 if invalid."""
    return str(_decode(authorization)["sub"])


def get_current_admin(
    authorization: Annotated[str | None, Header()] = None,
    config: CekKirimConfig = Depends(get_config),
) -> dict:
    """Validate JWT and return admin payload. Raises 401/403."""
    payload = _decode(authorization)
    if not payload.get("is_admin") and str(payload["sub"]) not in config.admin_user_ids:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not admin")
    return payload
