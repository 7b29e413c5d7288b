"""Encoding of option values at the store boundary.

Structured values (dicts, lists, booleans, ``None``) are stored as JSON text.
Plain strings are stored as-is unless they would read back as JSON, in which
case they are encoded once more. Numbers are stored as their text form and,
like any other plain text, read back as strings.
"""

from __future__ import annotations

import json
from typing import Any

_JSON_LITERALS = frozenset({"null", "true", "false"})


def is_serialized(data: Any) -> bool:
    """Return whether *data* is text produced by :func:`maybe_serialize`."""
    if not isinstance(data, str):
        return False
    text = data.strip()
    if not text:
        return False
    if text in _JSON_LITERALS:
        return True
    if (text[0], text[-1]) not in {("{", "}"), ("[", "]"), ('"', '"')}:
        return False
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def maybe_serialize(value: Any) -> str:
    """Encode *value* for storage in the options table."""
    if isinstance(value, str):
        return json.dumps(value) if is_serialized(value) else value
    if isinstance(value, (bool, dict, list, tuple)) or value is None:
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def maybe_unserialize(data: Any) -> Any:
    """Decode text read from the options table."""
    if is_serialized(data):
        return json.loads(data)
    return data


__all__ = ["is_serialized", "maybe_serialize", "maybe_unserialize"]
