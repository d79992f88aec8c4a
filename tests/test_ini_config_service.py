# tests/test_ini_config_service.py
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mdworkbench.services.config.ini_config_service import IniConfigService


def write_ini(p: Path, text: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated_user_dir(monkeypatch, tmp_path):
    """Point platformdirs at an empty per-test directory."""
    usercfg = tmp_path / "usercfg"
    monkeypatch.setattr(
        "mdworkbench.services.config.ini_config_service.user_config_dir",
        lambda appname: str(usercfg),
    )
    return usercfg


def test_defaults_when_no_config_files():
    cfg = IniConfigService()
    assert cfg.loaded_from is None
    assert cfg.get("missing", "key", "x") == "x"
    assert cfg.get_int("watch", "nonint", 42) == 42
    assert cfg.get_bool("ui", "nope", False) is False
    assert cfg.as_dict() == {}

    assert cfg.watch_debounce_ms() == 250
    assert cfg.watch_resubscribe_ms() == 500
    assert cfg.status_timeout_ms() == 2200
    assert cfg.log_level() == logging.WARNING


def test_project_root_config_is_used_when_present(tmp_path):
    proj_root = tmp_path / "repo"
    ini = proj_root / "config" / "config.ini"
    write_ini(ini, "[watch]\ndebounce_ms = 100\n[ui]\nstatus_timeout_ms = 900\n")

    cfg = IniConfigService(project_root=proj_root)
    assert cfg.loaded_from == ini
    assert cfg.watch_debounce_ms() == 100
    assert cfg.status_timeout_ms() == 900
    assert cfg.watch_resubscribe_ms() == 500


def test_user_dir_preferred_over_project_root(tmp_path, isolated_user_dir):
    user_ini = isolated_user_dir / IniConfigService.DEFAULT_FILE
    proj_root = tmp_path / "repo"
    write_ini(user_ini, "[logging]\nlevel = debug\n")
    write_ini(proj_root / "config" / "config.ini", "[logging]\nlevel = error\n")

    cfg = IniConfigService(project_root=proj_root)
    assert cfg.loaded_from == user_ini
    assert cfg.log_level() == logging.DEBUG


def test_explicit_path_overrides_everything(tmp_path, isolated_user_dir):
    write_ini(isolated_user_dir / IniConfigService.DEFAULT_FILE, "[watch]\ndebounce_ms = 1\n")
    explicit = tmp_path / "explicit.ini"
    write_ini(explicit, "[watch]\ndebounce_ms = 75\n")

    cfg = IniConfigService(explicit_path=explicit)
    assert cfg.loaded_from == explicit
    assert cfg.watch_debounce_ms() == 75


def test_malformed_file_is_skipped(tmp_path):
    bad = tmp_path / "bad.ini"
    write_ini(bad, "this is not [an ini\n=")
    proj_root = tmp_path / "repo"
    good = proj_root / "config" / "config.ini"
    write_ini(good, "[watch]\nresubscribe_ms = 800\n")

    cfg = IniConfigService(explicit_path=bad, project_root=proj_root)
    assert cfg.loaded_from == good
    assert cfg.watch_resubscribe_ms() == 800


def test_invalid_values_fall_back(tmp_path):
    ini = tmp_path / "c.ini"
    write_ini(
        ini,
        "[watch]\ndebounce_ms = soon\nresubscribe_ms = -5\n[logging]\nlevel = chatty\n"
        "[ui]\nflag = maybe\n",
    )
    cfg = IniConfigService(explicit_path=ini)
    assert cfg.watch_debounce_ms() == 250
    assert cfg.watch_resubscribe_ms() == 500
    assert cfg.log_level() == logging.WARNING
    assert cfg.get_bool("ui", "flag", None) is None
    assert cfg.as_dict()["watch"]["debounce_ms"] == "soon"
