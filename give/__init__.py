from .config import Config
from .hooks import Hooks
from .object_cache import ObjectCache
from .options import HttpOptionStore, MemoryOptionStore, SQLiteOptionStore
from .settings import LookupStatus, OptionLookup, SettingsCache
from .plugin import bootstrap

__all__ = [
    "Config",
    "Hooks",
    "ObjectCache",
    "HttpOptionStore",
    "MemoryOptionStore",
    "SQLiteOptionStore",
    "LookupStatus",
    "OptionLookup",
    "SettingsCache",
    "bootstrap",
]
