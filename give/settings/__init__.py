"""Cached plugin settings and the built-in currency and gateway lists."""

from .cache import (  # noqa: F401
    CACHE_GROUP,
    CACHE_KEY,
    LookupStatus,
    OptionLookup,
    SettingsCache,
    is_empty,
)
from .currencies import default_currencies  # noqa: F401
from .gateways import default_gateways  # noqa: F401
