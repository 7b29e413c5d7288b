"""Persistent option storage and mutation notifications."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .serialization import maybe_serialize, maybe_unserialize

logger = logging.getLogger(__name__)

ADDED = "added"
UPDATED = "updated"
DELETED = "deleted"

MutationHandler = Callable[[str, str], None]


@dataclass(frozen=True)
class OptionRow:
    """A raw row of the options table; ``option_value`` is still serialized."""

    option_name: str
    option_value: str


class OptionStore(ABC):
    """Key-value option store.

    Writes go through :meth:`add_option`, :meth:`update_option` and
    :meth:`delete_option`. After a successful write every subscribed handler is
    called synchronously with ``(option_name, action)`` before the write
    returns to its caller.
    """

    def __init__(self) -> None:
        self._handlers: list[tuple[MutationHandler, frozenset[str] | None]] = []

    # Backend primitives -------------------------------------------------

    @abstractmethod
    def batch_get(self, names: Iterable[str]) -> list[OptionRow]:
        """Return the rows for *names* using a single query."""

    @abstractmethod
    def _read(self, name: str) -> str | None:
        """Return the serialized value of *name* or ``None``."""

    @abstractmethod
    def _write(self, name: str, data: str, *, insert: bool) -> bool:
        """Insert or overwrite the serialized value of *name*."""

    @abstractmethod
    def _remove(self, name: str) -> bool:
        """Delete *name*; return whether a row was removed."""

    # Public API ---------------------------------------------------------

    def get_option(self, name: str, default: Any = None) -> Any:
        data = self._read(name)
        if data is None:
            return default
        return maybe_unserialize(data)

    def add_option(self, name: str, value: Any) -> bool:
        """Add *name*; returns ``False`` if it already exists."""
        if self._read(name) is not None:
            return False
        if not self._write(name, maybe_serialize(value), insert=True):
            return False
        self._notify(name, ADDED)
        return True

    def update_option(self, name: str, value: Any) -> bool:
        """Set *name*, adding it when absent.

        Returns ``False`` without notifying when the stored value is unchanged.
        """
        current = self._read(name)
        if current is None:
            return self.add_option(name, value)
        data = maybe_serialize(value)
        if data == current:
            return False
        if not self._write(name, data, insert=False):
            return False
        self._notify(name, UPDATED)
        return True

    def delete_option(self, name: str) -> bool:
        if not self._remove(name):
            return False
        self._notify(name, DELETED)
        return True

    def on_mutation(
        self, handler: MutationHandler, names: Iterable[str] | None = None
    ) -> None:
        """Subscribe *handler* to writes of *names* (all options when ``None``)."""
        if not callable(handler):
            raise TypeError("Mutation handler must be callable")
        watched = frozenset(names) if names is not None else None
        self._handlers.append((handler, watched))

    def remove_mutation_handler(self, handler: MutationHandler) -> bool:
        """Unsubscribe every registration of *handler*."""
        kept = [(h, watched) for h, watched in self._handlers if h != handler]
        removed = len(kept) != len(self._handlers)
        self._handlers = kept
        return removed

    def _notify(self, name: str, action: str) -> None:
        logger.debug("Option %s %s", name, action)
        for handler, watched in list(self._handlers):
            if watched is None or name in watched:
                handler(name, action)


class MemoryOptionStore(OptionStore):
    """Options table held in a dictionary."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._rows: dict[str, str] = {
            name: maybe_serialize(value) for name, value in (initial or {}).items()
        }
        self.query_count = 0

    def batch_get(self, names: Iterable[str]) -> list[OptionRow]:
        self.query_count += 1
        return [
            OptionRow(name, self._rows[name]) for name in names if name in self._rows
        ]

    def _read(self, name: str) -> str | None:
        return self._rows.get(name)

    def _write(self, name: str, data: str, *, insert: bool) -> bool:
        self._rows[name] = data
        return True

    def _remove(self, name: str) -> bool:
        return self._rows.pop(name, None) is not None


__all__ = [
    "ADDED",
    "UPDATED",
    "DELETED",
    "MutationHandler",
    "OptionRow",
    "OptionStore",
    "MemoryOptionStore",
]
