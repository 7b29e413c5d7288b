"""Grouped key-value cache sitting in front of the options table."""

from __future__ import annotations

import copy
import logging
import math
import time
from typing import Any

from cachetools import TLRUCache

logger = logging.getLogger(__name__)

_MISS = object()


def _now() -> float:
    return time.monotonic()


def _time_to_use(key: str, item: tuple[Any, float], now: float) -> float:
    expire = item[1]
    return now + expire if expire > 0 else math.inf


class ObjectCache:
    """In-process object cache addressed by ``(group, key)``.

    Every group is a ``TLRUCache`` whose entries carry their own expiry.
    Values are deep copied on the way in and out so callers never share
    mutable state with the cache. ``expire`` is in seconds; ``0`` keeps the
    entry until it is deleted, flushed or evicted.
    """

    def __init__(self, *, default_expire: float = 0, maxsize: int = 1024) -> None:
        self.default_expire = default_expire
        self.maxsize = maxsize
        self._groups: dict[str, TLRUCache] = {}
        self.hits = 0
        self.misses = 0

    def _group(self, group: str) -> TLRUCache:
        bucket = self._groups.get(group)
        if bucket is None:
            bucket = self._groups[group] = TLRUCache(
                maxsize=self.maxsize, ttu=_time_to_use, timer=_now
            )
        return bucket

    def get(self, key: str, group: str = "default", default: Any = None) -> Any:
        item = self._groups[group].get(key, _MISS) if group in self._groups else _MISS
        if item is _MISS:
            self.misses += 1
            return default
        self.hits += 1
        return copy.deepcopy(item[0])

    def set(
        self, key: str, value: Any, group: str = "default", expire: float | None = None
    ) -> bool:
        if expire is None:
            expire = self.default_expire
        self._group(group)[key] = (copy.deepcopy(value), expire)
        return True

    def add(
        self, key: str, value: Any, group: str = "default", expire: float | None = None
    ) -> bool:
        """Store *value* only when *key* is not cached yet."""
        if key in self._group(group):
            return False
        return self.set(key, value, group, expire)

    def delete(self, key: str, group: str = "default") -> bool:
        bucket = self._groups.get(group)
        removed = bucket is not None and bucket.pop(key, _MISS) is not _MISS
        if removed:
            logger.debug("Deleted %s from cache group %s", key, group)
        return removed

    def flush_group(self, group: str) -> None:
        self._groups.pop(group, None)

    def flush(self) -> None:
        self._groups.clear()


__all__ = ["ObjectCache"]
