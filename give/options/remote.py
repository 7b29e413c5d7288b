from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import quote

import requests

from .store import OptionRow, OptionStore

logger = logging.getLogger(__name__)


class HttpOptionStore(OptionStore):
    """Options table exposed by a remote HTTP API.

    Endpoints, relative to ``base_url``:

    * ``GET options?names=a,b`` returns ``[{"option_name": ..., "option_value": ...}]``
    * ``GET options/<name>`` returns ``{"option_value": ...}`` or 404
    * ``PUT options/<name>`` with ``{"option_value": ..., "insert": bool}``
    * ``DELETE options/<name>`` returns 404 when the option is absent

    Values travel in their serialized form. Network failures are logged and
    reported as missing rows or failed writes.
    """

    def __init__(self, base_url: str, *, timeout: float = 10) -> None:
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.query_count = 0

    def _url(self, name: str | None = None) -> str:
        if name is None:
            return f"{self.base_url}/options"
        return f"{self.base_url}/options/{quote(name, safe='')}"

    def batch_get(self, names: Iterable[str]) -> list[OptionRow]:
        names = list(dict.fromkeys(names))
        if not names:
            return []
        self.query_count += 1
        try:
            response = requests.get(
                self._url(), params={"names": ",".join(names)}, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Option batch read failed: %s", exc)
            return []
        if not isinstance(payload, list):
            logger.error("Unexpected option batch payload: %r", payload)
            return []
        rows = []
        for row in payload:
            if not isinstance(row, dict):
                logger.error("Skipping malformed option row: %r", row)
                continue
            name, value = row.get("option_name"), row.get("option_value")
            if name in names and isinstance(value, str):
                rows.append(OptionRow(name, value))
        return rows

    def _read(self, name: str) -> str | None:
        try:
            response = requests.get(self._url(name), timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Option read for %s failed: %s", name, exc)
            return None
        if not isinstance(payload, dict):
            logger.error("Unexpected payload reading option %s: %r", name, payload)
            return None
        value = payload.get("option_value")
        return value if isinstance(value, str) else None

    def _write(self, name: str, data: str, *, insert: bool) -> bool:
        try:
            response = requests.put(
                self._url(name),
                json={"option_value": data, "insert": insert},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return True
        except requests.RequestException as exc:
            logger.error("Option write for %s failed: %s", name, exc)
            return False

    def _remove(self, name: str) -> bool:
        try:
            response = requests.delete(self._url(name), timeout=self.timeout)
            if response.status_code == 404:
                return False
            response.raise_for_status()
            return True
        except requests.RequestException as exc:
            logger.error("Option delete for %s failed: %s", name, exc)
            return False


__all__ = ["HttpOptionStore"]
