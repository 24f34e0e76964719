"""
tests/test_event_hooks.py — Fire-and-Forget Mission Event Tests
================================================================
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from conftest import TODAY

from cekkirim import config as config_mod
from cekkirim.services import event_hooks, mission_service


# Helper to run async tests without pytest-asyncio
def _run(coro):
    return asyncio.new_event_loop().run_until_complete(coro)


def _zone_off_jakarta_day() -> str:
    """A zone whose calendar date differs from Jakarta's right now.

    Kiritimati is Jakarta +7h and Pago Pago is Jakarta -18h, so at any
    instant at least one of them sits on another day.
    """
    jakarta = datetime.now(ZoneInfo(config_mod.DEFAULT_TIMEZONE)).date()
    for zone in ("Pacific/Kiritimati", "Pacific/Pago_Pago"):
        if datetime.now(ZoneInfo(zone)).date() != jakarta:
            return zone
    raise AssertionError("no zone off the Jakarta day")


@pytest.fixture
def configured_zone(tmp_path, monkeypatch):
    zone = _zone_off_jakarta_day()
    path = tmp_path / "config.yaml"
    path.write_text(
        f'app_name: "CekKirim Test"\napi_port: 8000\ntimezone: "{zone}"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv(config_mod.CONFIG_PATH_ENV, str(path))
    config_mod.get_config.cache_clear()
    yield zone
    config_mod.get_config.cache_clear()


def test_emit_advances_missions(db_engine, catalogue):
    mission_service.get_daily_missions(db_engine, "seller-1", today=TODAY)
    updated = _run(event_hooks.emit_mission_event(
        db_engine, "seller-1", "CREATE_SHIPMENT", today=TODAY
    ))
    assert updated == 2


def test_emit_without_date_uses_configured_day(db_engine, catalogue, configured_zone):
    # Dashboard generates the batch for the configured day
    configured_today = mission_service.current_mission_date(ZoneInfo(configured_zone))
    mission_service.get_daily_missions(db_engine, "seller-1", today=configured_today)

    # Business flows fire events without passing a date
    updated = _run(event_hooks.emit_mission_event(db_engine, "seller-1", "LOGIN"))
    assert updated == 1


def test_default_mission_date_follows_config(configured_zone):
    expected = datetime.now(ZoneInfo(configured_zone)).date()
    assert mission_service.current_mission_date() == expected


def test_emit_swallows_failures(db_engine, caplog):
    with patch.object(
        event_hooks, "track_mission_event", side_effect=RuntimeError("db down")
    ):
        updated = _run(event_hooks.emit_mission_event(db_engine, "seller-1", "LOGIN"))
    assert updated == 0
    assert "Error tracking mission event LOGIN" in caplog.text
