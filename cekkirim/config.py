"""
cekkirim.config — YAML Configuration Loader
============================================

Reads ``config.yaml`` for **infrastructure-only** settings (service identity,
API port, the timezone that defines a mission "day").  Secrets and the
database URL come from the environment (``.env``), and the level ladder /
mission batch shape live in :mod:`cekkirim.constants`.

Usage::

    from cekkirim.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.app_name)          # "CekKirim Tycoon"
    print(cfg.timezone)          # "Asia/Jakarta"

    cfg = get_config()           # process-wide, cached; honours $CEKKIRIM_CONFIG
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml

DEFAULT_TIMEZONE = "Asia/Jakarta"
CONFIG_PATH_ENV = "CEKKIRIM_CONFIG"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CekKirimConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    app_name: str

    # API
    api_port: int

    # Mission day boundary
    timezone: str = DEFAULT_TIMEZONE

    # Users allowed into /api/admin regardless of the token's is_admin claim
    admin_user_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> CekKirimConfig:
    """Read *path* and return a :class:`CekKirimConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    timezone = raw.get("timezone") or DEFAULT_TIMEZONE
    ZoneInfo(timezone)  # fail fast on a typo

    return CekKirimConfig(
        app_name=raw["app_name"],
        api_port=int(raw["api_port"]),
        timezone=timezone,
        admin_user_ids=tuple(str(uid) for uid in raw.get("admin_user_ids") or ()),
    )


@lru_cache(maxsize=1)
def get_config() -> CekKirimConfig:
    """The process-wide configuration, read once.

    The path comes from ``$CEKKIRIM_CONFIG`` and falls back to
    ``config.yaml``.  Both the API and business-event callers resolve the
    mission day through this object, so they agree on the calendar date.
    """
    return load_config(os.getenv(CONFIG_PATH_ENV, "config.yaml"))
