from __future__ import annotations

import copy
import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable

from prometheus_client import Counter

from ..hooks import Hooks
from ..object_cache import ObjectCache
from ..options.serialization import maybe_unserialize
from ..options.store import MemoryOptionStore, OptionStore
from .currencies import default_currencies
from .gateways import default_gateways

logger = logging.getLogger(__name__)

CACHE_KEY = "giveAllOptions"
CACHE_GROUP = "give-options"

INIT_ACTION = "give_init"
INIT_PRIORITY = 11
CURRENCY_FILTER = "give_register_currency"
GATEWAY_FILTER = "give_register_gateway"
SETTINGS_FILTER = "give_get_settings"

TRACKED_DEFAULTS: dict[str, Any] = {
    "give_settings": {},
    "give_version": "",
    "give_completed_upgrades": [],
}
DERIVED_DEFAULTS: dict[str, Any] = {
    "currencies": {},
    "gateways": {},
}

SETTINGS_LOADS = Counter(
    "give_settings_loads_total",
    "Settings cache loads by source",
    ["source"],
)
SETTINGS_INVALIDATIONS = Counter(
    "give_settings_invalidations_total",
    "Settings cache reloads triggered by option writes",
)
STORE_ERRORS = Counter(
    "give_settings_store_errors_total",
    "Option store failures while loading the settings cache",
)

_MISS = object()


class LookupStatus(enum.Enum):
    FOUND = "found"
    EMPTY = "empty"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class OptionLookup:
    """Outcome of :meth:`SettingsCache.lookup`."""

    name: str
    status: LookupStatus
    value: Any = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    def value_or(self, default: Any) -> Any:
        return self.value if self.found else default


def is_empty(value: Any) -> bool:
    """Return whether *value* counts as unset for option lookups.

    ``"0"`` is empty as well, matching how option values read back from the
    options table as text.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


class SettingsCache:
    """In-memory mirror of the plugin's core options.

    The tracked options are read from the store with one batched query (or
    from the shared object cache) when the instance is created, and read again
    whenever the store reports a write to one of them. ``currencies`` and
    ``gateways`` are derived once at ``give_init`` from the built-in lists and
    the ``give_register_*`` filters.
    """

    _instance: ClassVar[SettingsCache | None] = None

    def __init__(
        self,
        store: OptionStore,
        object_cache: ObjectCache,
        hooks: Hooks,
        *,
        tracked_keys: Iterable[str] | None = None,
        cache_key: str = CACHE_KEY,
        cache_group: str = CACHE_GROUP,
    ) -> None:
        self.store = store
        self.object_cache = object_cache
        self.hooks = hooks
        self.cache_key = cache_key
        self.cache_group = cache_group

        if tracked_keys is None:
            tracked_keys = tuple(TRACKED_DEFAULTS)
        elif isinstance(tracked_keys, str):
            tracked_keys = (tracked_keys,)
        keys = tuple(dict.fromkeys(tracked_keys))
        overlap = set(keys) & set(DERIVED_DEFAULTS)
        if overlap:
            raise ValueError(f"Derived options cannot be tracked: {sorted(overlap)}")
        self._tracked_keys = keys
        self._defaults: dict[str, Any] = {
            key: TRACKED_DEFAULTS.get(key, "") for key in keys
        }
        self._defaults.update(DERIVED_DEFAULTS)
        self._values: dict[str, Any] = copy.deepcopy(self._defaults)

        self.store.on_mutation(self.on_store_mutation, self._tracked_keys)
        self.hooks.add_action(INIT_ACTION, self.setup_currencies_list, INIT_PRIORITY)
        self.hooks.add_action(INIT_ACTION, self.setup_gateways_list, INIT_PRIORITY)

        self.reload()

    # Singleton access ---------------------------------------------------

    @classmethod
    def get_instance(
        cls,
        store: OptionStore | None = None,
        object_cache: ObjectCache | None = None,
        hooks: Hooks | None = None,
        **kwargs: Any,
    ) -> SettingsCache:
        """Return the process-wide cache, creating and loading it on first use.

        Collaborators are only used by the first call; missing ones are
        replaced by empty in-memory implementations.
        """
        if cls._instance is None:
            cls._instance = cls(
                store if store is not None else MemoryOptionStore(),
                object_cache if object_cache is not None else ObjectCache(),
                hooks if hooks is not None else Hooks(),
                **kwargs,
            )
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide cache and detach it from its collaborators."""
        if cls._instance is not None:
            cls._instance.detach()
        cls._instance = None

    def detach(self) -> None:
        """Stop receiving store writes and ``give_init``."""
        self.store.remove_mutation_handler(self.on_store_mutation)
        self.hooks.remove_action(INIT_ACTION, self.setup_currencies_list)
        self.hooks.remove_action(INIT_ACTION, self.setup_gateways_list)

    # Loading ------------------------------------------------------------

    @property
    def tracked_keys(self) -> tuple[str, ...]:
        return self._tracked_keys

    @property
    def recognized_keys(self) -> tuple[str, ...]:
        return tuple(self._defaults)

    def reload(self) -> None:
        """Load the tracked options from the object cache or the store."""
        cached = self.object_cache.get(self.cache_key, self.cache_group, _MISS)
        if cached is not _MISS and isinstance(cached, Mapping):
            for key in self._tracked_keys:
                self._values[key] = cached.get(key, copy.deepcopy(self._defaults[key]))
            SETTINGS_LOADS.labels(source="object_cache").inc()
            logger.debug("Loaded settings from object cache %s", self.cache_key)
            return

        try:
            rows = self.store.batch_get(self._tracked_keys)
        except Exception:  # noqa: BLE001 - keep serving the previous values
            STORE_ERRORS.inc()
            logger.exception("Loading settings from the option store failed")
            return
        SETTINGS_LOADS.labels(source="store").inc()

        loaded = {key: copy.deepcopy(self._defaults[key]) for key in self._tracked_keys}
        for row in rows:
            if row.option_name in loaded:
                loaded[row.option_name] = maybe_unserialize(row.option_value)
        self._values.update(loaded)
        logger.debug("Loaded %d of %d settings from the option store", len(rows), len(loaded))

        if rows:
            self.object_cache.set(self.cache_key, loaded, self.cache_group)

    def on_store_mutation(self, name: str, action: str | None = None) -> None:
        """Drop the shared cache entry and reload after a tracked option changes."""
        if name not in self._tracked_keys:
            return
        logger.debug("Option %s %s, reloading settings", name, action or "changed")
        SETTINGS_INVALIDATIONS.inc()
        self.object_cache.delete(self.cache_key, self.cache_group)
        self.reload()

    # Derived lists ------------------------------------------------------

    def setup_currencies_list(self) -> None:
        currencies = self.hooks.apply_filters(CURRENCY_FILTER, default_currencies())
        self._values["currencies"] = currencies if currencies is not None else {}

    def setup_gateways_list(self) -> None:
        gateways = self.hooks.apply_filters(GATEWAY_FILTER, default_gateways())
        self._values["gateways"] = gateways if gateways is not None else {}

    # Read API -----------------------------------------------------------

    def lookup(self, name: str) -> OptionLookup:
        if name not in self._defaults:
            return OptionLookup(name, LookupStatus.UNRECOGNIZED)
        value = self._values.get(name)
        if is_empty(value):
            return OptionLookup(name, LookupStatus.EMPTY, copy.deepcopy(value))
        return OptionLookup(name, LookupStatus.FOUND, copy.deepcopy(value))

    def get_option(self, name: str, default: Any = False) -> Any:
        """Return the cached value of *name*, or *default* when unset or unknown."""
        return self.lookup(name).value_or(default)

    def get_settings(self) -> dict[str, Any]:
        """Return the plugin settings after the ``give_get_settings`` filters."""
        settings = self.hooks.apply_filters(
            SETTINGS_FILTER, copy.deepcopy(self._values.get("give_settings"))
        )
        if is_empty(settings):
            return {}
        if not isinstance(settings, Mapping):
            logger.warning(
                "%s returned %s instead of a mapping",
                SETTINGS_FILTER,
                type(settings).__name__,
            )
            return {}
        return dict(settings)


__all__ = [
    "CACHE_KEY",
    "CACHE_GROUP",
    "LookupStatus",
    "OptionLookup",
    "SettingsCache",
    "is_empty",
]
