"""
tests/test_config.py — YAML Config Loader Tests
================================================
"""

from __future__ import annotations

import pytest

from cekkirim.config import DEFAULT_TIMEZONE, load_config


def test_loads_required_and_optional_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        'app_name: "CekKirim Tycoon"\n'
        "api_port: 8080\n"
        'timezone: "Asia/Makassar"\n'
        "admin_user_ids: [42, abc]\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.app_name == "CekKirim Tycoon"
    assert cfg.api_port == 8080
    assert cfg.timezone == "Asia/Makassar"
    assert cfg.admin_user_ids == ("42", "abc")
    assert cfg.tzinfo.key == "Asia/Makassar"


def test_timezone_defaults_to_jakarta(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("app_name: x\napi_port: 1\n", encoding="utf-8")
    assert load_config(path).timezone == DEFAULT_TIMEZONE


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_missing_required_key(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("api_port: 1\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_config(path)


def test_get_config_reads_env_path_once(tmp_path, monkeypatch):
    from cekkirim.config import CONFIG_PATH_ENV, get_config

    path = tmp_path / "tycoon.yaml"
    path.write_text('app_name: a\napi_port: 1\ntimezone: "Asia/Jayapura"\n', encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    get_config.cache_clear()
    try:
        assert get_config().timezone == "Asia/Jayapura"
        path.unlink()
        assert get_config() is get_config()
    finally:
        get_config.cache_clear()
