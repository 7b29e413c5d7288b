"""Ordered filter and action registry used as the plugin's extension points."""

from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

_sequence = itertools.count()


@dataclass(order=True)
class _Registration:
    priority: int
    sequence: int
    callback: Callable[..., Any] = field(compare=False)


class Hooks:
    """Named callback chains.

    Callbacks run by ascending ``priority``; callbacks sharing a priority run
    in the order they were registered. A filter chain is a left fold: every
    callback receives the value returned by the previous one.
    """

    def __init__(self) -> None:
        self._filters: dict[str, list[_Registration]] = defaultdict(list)
        self._actions: dict[str, list[_Registration]] = defaultdict(list)
        self._fired: dict[str, int] = defaultdict(int)

    @staticmethod
    def _register(
        table: dict[str, list[_Registration]],
        tag: str,
        callback: Callable[..., Any],
        priority: int,
    ) -> None:
        if not callable(callback):
            raise TypeError(f"Hook callback for {tag!r} must be callable")
        chain = table[tag]
        chain.append(_Registration(priority, next(_sequence), callback))
        chain.sort()

    def add_filter(
        self, tag: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Register *callback* to transform values passed through *tag*."""
        self._register(self._filters, tag, callback, priority)

    @staticmethod
    def _unregister(
        table: dict[str, list[_Registration]], tag: str, callback: Callable[..., Any]
    ) -> bool:
        chain = table.get(tag, [])
        kept = [r for r in chain if r.callback != callback]
        removed = len(kept) != len(chain)
        if removed:
            table[tag] = kept
        return removed

    def remove_filter(self, tag: str, callback: Callable[..., Any]) -> bool:
        """Unregister every registration of *callback* on *tag*."""
        return self._unregister(self._filters, tag, callback)

    def has_filter(self, tag: str) -> bool:
        return bool(self._filters.get(tag))

    def apply_filters(self, tag: str, value: Any, *args: Any) -> Any:
        """Fold *value* through the callbacks registered on *tag*."""
        for registration in list(self._filters.get(tag, [])):
            value = registration.callback(value, *args)
        return value

    def add_action(
        self, tag: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Register *callback* to run when *tag* fires."""
        self._register(self._actions, tag, callback, priority)

    def remove_action(self, tag: str, callback: Callable[..., Any]) -> bool:
        return self._unregister(self._actions, tag, callback)

    def do_action(self, tag: str, *args: Any) -> None:
        """Run every callback registered on *tag*."""
        self._fired[tag] += 1
        chain = list(self._actions.get(tag, []))
        logger.debug("Firing action %s (%d callbacks)", tag, len(chain))
        for registration in chain:
            registration.callback(*args)

    def did_action(self, tag: str) -> int:
        """Return how many times *tag* has fired."""
        return self._fired.get(tag, 0)


__all__ = ["Hooks", "DEFAULT_PRIORITY"]
