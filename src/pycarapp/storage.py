"""Persistent key/value storage for the access token.

The token is the only thing pycarapp persists. Storage is synchronous and
keyed, so a single file can be shared by several keys (for instance one per
service) without one logout wiping the others.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from pycarapp.config import CarAppConfig

_logger = logging.getLogger(__name__)


class TokenStorage(Protocol):
    """Structural storage interface used by :class:`SessionController`."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryTokenStorage:
    """Storage that lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class FileTokenStorage:
    """Storage backed by a small JSON object on disk.

    The file is re-read on every access so two processes sharing it see each
    other's logins and logouts. A missing or unreadable file reads as empty.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Ignoring unreadable token storage at %s", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(items, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)


def storage_from_config(config: CarAppConfig) -> TokenStorage:
    """Pick the storage backend named by *config*."""
    if config.token_storage_path:
        return FileTokenStorage(os.path.expanduser(config.token_storage_path))
    return MemoryTokenStorage()
