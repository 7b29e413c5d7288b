from __future__ import annotations

import logging
import os
import signal
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV = "GIVE_CONFIG"
DEFAULT_CONFIG_PATH = "config.toml"


class Config:
    """Plugin configuration read from a TOML file.

    Tables map to the plugin's collaborators (``[store]``, ``[object_cache]``,
    ``[settings_cache]``). The file is read again on SIGHUP unless
    ``watch_sighup`` is false.
    """

    def __init__(self, path: str | Path, *, watch_sighup: bool = True) -> None:
        self.path = Path(path)
        self.data: dict[str, Any] = {}
        self.load()
        if watch_sighup:
            signal.signal(signal.SIGHUP, self._handle_sighup)

    @classmethod
    def from_env(
        cls, path: str | Path | None = None, *, watch_sighup: bool = False
    ) -> Config | None:
        """Load *path*, else ``$GIVE_CONFIG``, else ``config.toml``.

        Returns ``None`` when the resolved file does not exist so callers fall
        back to in-memory defaults.
        """
        resolved = Path(path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH)
        if not resolved.exists():
            logger.info("No configuration at %s, using defaults", resolved)
            return None
        return cls(resolved, watch_sighup=watch_sighup)

    def load(self) -> None:
        with self.path.open("rb") as f:
            self.data = tomllib.load(f)
        logger.debug("Loaded configuration from %s", self.path)

    def reload(self) -> None:
        self.load()

    def _handle_sighup(self, signum: int, frame: object) -> None:  # pragma: no cover - signal handler
        logger.info("SIGHUP received, reloading %s", self.path)
        self.reload()

    def get(self, key: str, default: Any | None = None) -> Any:
        return self.data.get(key, default)

    def section(self, name: str) -> dict[str, Any]:
        """Return the ``[name]`` table, or an empty dict when it is missing."""
        value = self.data.get(name)
        return value if isinstance(value, dict) else {}
