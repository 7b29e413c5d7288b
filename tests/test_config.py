from __future__ import annotations

import os
import signal
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from give.config import Config


def test_load_get_and_section(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("debug = true\n[store]\nbackend = 'sqlite'\npath = 'opts.db'")

    cfg = Config(config_file, watch_sighup=False)

    assert cfg.get("debug") is True
    assert cfg.section("store") == {"backend": "sqlite", "path": "opts.db"}
    assert cfg.section("object_cache") == {}
    assert cfg.get("missing", "x") == "x"


def test_section_ignores_scalar_values(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("store = 'memory'")

    assert Config(config_file, watch_sighup=False).section("store") == {}


def test_sighup_triggers_reload(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[object_cache]\nexpire = 1")

    prev_handler = signal.getsignal(signal.SIGHUP)
    try:
        cfg = Config(config_file)

        assert cfg.section("object_cache")["expire"] == 1

        config_file.write_text("[object_cache]\nexpire = 2")
        os.kill(os.getpid(), signal.SIGHUP)

        assert cfg.section("object_cache")["expire"] == 2
    finally:
        signal.signal(signal.SIGHUP, prev_handler)


def test_from_env_prefers_explicit_path(tmp_path: Path, monkeypatch) -> None:
    explicit = tmp_path / "explicit.toml"
    explicit.write_text("name = 'explicit'")
    from_env = tmp_path / "env.toml"
    from_env.write_text("name = 'env'")
    monkeypatch.setenv("GIVE_CONFIG", str(from_env))

    assert Config.from_env(explicit).get("name") == "explicit"
    assert Config.from_env().get("name") == "env"


def test_from_env_missing_file_returns_none(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GIVE_CONFIG", str(tmp_path / "missing.toml"))

    assert Config.from_env() is None
