from __future__ import annotations

import json
from pathlib import Path

import pytest

from give import __main__ as cli
from give.config import Config
from give.hooks import Hooks
from give.object_cache import ObjectCache
from give.options import HttpOptionStore, MemoryOptionStore, SQLiteOptionStore
from give.plugin import bootstrap, build_object_cache, build_store
from give.settings import SettingsCache


@pytest.fixture(autouse=True)
def reset_singleton():
    SettingsCache.reset_instance()
    yield
    SettingsCache.reset_instance()


def _config(tmp_path: Path, text: str) -> Config:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return Config(path, watch_sighup=False)


def test_build_store_backends(tmp_path: Path) -> None:
    assert isinstance(build_store(None), MemoryOptionStore)

    sqlite_cfg = _config(tmp_path, f"[store]\nbackend = 'sqlite'\npath = '{tmp_path / 'o.db'}'")
    store = build_store(sqlite_cfg)
    assert isinstance(store, SQLiteOptionStore)
    store.close()

    http_cfg = _config(tmp_path, "[store]\nbackend = 'http'\nurl = 'http://wp.test'\ntimeout = 2")
    http_store = build_store(http_cfg)
    assert isinstance(http_store, HttpOptionStore)
    assert http_store.timeout == 2


def test_build_store_rejects_bad_config(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        build_store(_config(tmp_path, "[store]\nbackend = 'redis'"))
    with pytest.raises(ValueError):
        build_store(_config(tmp_path, "[store]\nbackend = 'http'"))


def test_build_object_cache_expire(tmp_path: Path) -> None:
    cache = build_object_cache(_config(tmp_path, "[object_cache]\nexpire = 30"))
    assert cache.default_expire == 30


def test_bootstrap_fires_init_and_installs_singleton() -> None:
    hooks = Hooks()
    hooks.add_filter(
        "give_register_gateway",
        lambda gateways: {**gateways, "stripe": {"admin_label": "Stripe", "checkout_label": "Card"}},
    )
    store = MemoryOptionStore({"give_version": "2.4.0"})

    cache = bootstrap(store=store, hooks=hooks)

    assert SettingsCache.get_instance() is cache
    assert hooks.did_action("give_init") == 1
    assert "stripe" in cache.get_option("gateways", {})
    assert cache.get_option("give_version") == "2.4.0"


def test_bootstrap_reads_settings_cache_section(tmp_path: Path) -> None:
    config = _config(
        tmp_path,
        "[store]\nbackend = 'memory'\n[store.initial]\ngive_version = '3.0.0'\n"
        "[settings_cache]\ncache_key = 'customKey'\ncache_group = 'custom'\n",
    )
    object_cache = ObjectCache()

    cache = bootstrap(config, object_cache=object_cache)

    assert cache.get_option("give_version") == "3.0.0"
    assert object_cache.get("customKey", "custom")["give_version"] == "3.0.0"


def test_bootstrap_twice_replaces_instance() -> None:
    first = bootstrap()
    second = bootstrap()
    assert first is not second
    assert SettingsCache.get_instance() is second


def test_cli_prints_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "[store]\nbackend = 'memory'\n[store.initial.give_settings]\ncurrency = 'USD'\n"
    )

    assert cli.main(["--config", str(path), "settings"]) == 0
    assert json.loads(capsys.readouterr().out) == {"currency": "USD"}

    assert cli.main(["--config", str(path), "option", "unknown", "--default", '"n/a"']) == 0
    assert json.loads(capsys.readouterr().out) == "n/a"


def test_cli_without_config_lists_gateways(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["--config", str(tmp_path / "missing.toml"), "gateways"]) == 0
    assert set(json.loads(capsys.readouterr().out)) == {"paypal", "manual", "offline"}


def test_repeated_bootstrap_keeps_one_subscriber() -> None:
    store = MemoryOptionStore({"give_version": "2.4.0"})
    hooks = Hooks()
    for _ in range(3):
        cache = bootstrap(store=store, hooks=hooks)
    before = store.query_count

    store.update_option("give_version", "2.5.0")

    assert store.query_count - before == 1
    assert cache.get_option("give_version") == "2.5.0"
