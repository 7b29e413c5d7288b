from __future__ import annotations

import logging
from typing import Any

from .config import Config
from .hooks import Hooks
from .object_cache import ObjectCache
from .options import HttpOptionStore, MemoryOptionStore, SQLiteOptionStore
from .options.store import OptionStore
from .settings import CACHE_GROUP, CACHE_KEY, SettingsCache
from .settings.cache import INIT_ACTION

logger = logging.getLogger(__name__)


def build_store(config: Config | None = None) -> OptionStore:
    """Create the option store described by the ``[store]`` section."""
    section = config.section("store") if config else {}
    backend = section.get("backend", "memory")
    if backend == "memory":
        return MemoryOptionStore(section.get("initial", {}))
    if backend == "sqlite":
        return SQLiteOptionStore(
            section.get("path", ":memory:"), table=section.get("table", "options")
        )
    if backend == "http":
        url = section.get("url")
        if not url:
            raise ValueError("store.url is required for the http backend")
        return HttpOptionStore(url, timeout=section.get("timeout", 10))
    raise ValueError(f"Unknown option store backend: {backend!r}")


def build_object_cache(config: Config | None = None) -> ObjectCache:
    section = config.section("object_cache") if config else {}
    return ObjectCache(
        default_expire=section.get("expire", 0), maxsize=section.get("maxsize", 1024)
    )


def bootstrap(
    config: Config | None = None,
    *,
    store: OptionStore | None = None,
    object_cache: ObjectCache | None = None,
    hooks: Hooks | None = None,
) -> SettingsCache:
    """Start the plugin and return its settings cache.

    Builds the collaborators missing from the arguments, installs a new
    process-wide :class:`SettingsCache` and fires ``give_init`` so the
    currency and gateway lists pick up filters registered on *hooks*
    beforehand.
    """
    section = config.section("settings_cache") if config else {}
    kwargs: dict[str, Any] = {
        "cache_key": section.get("cache_key", CACHE_KEY),
        "cache_group": section.get("cache_group", CACHE_GROUP),
    }
    if "tracked_keys" in section:
        kwargs["tracked_keys"] = section["tracked_keys"]

    hooks = hooks if hooks is not None else Hooks()
    SettingsCache.reset_instance()
    cache = SettingsCache.get_instance(
        store if store is not None else build_store(config),
        object_cache if object_cache is not None else build_object_cache(config),
        hooks,
        **kwargs,
    )
    hooks.do_action(INIT_ACTION)
    logger.info(
        "Plugin initialised with %d tracked options", len(cache.tracked_keys)
    )
    return cache


__all__ = ["build_store", "build_object_cache", "bootstrap"]
