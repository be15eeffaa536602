"""Local key/value storage backends.

The record stores only ever talk to a :class:`StorageBackend`: a flat
string-to-string key space in the spirit of a browser's local storage.
Which backend is used (and whether one exists at all) is decided by the
caller, so store logic can be exercised without a real environment.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pycarbook.exceptions import CarbookStorageError, StorageUnavailableError

_logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Structural storage interface used by :class:`~pycarbook.store.RecordStore`."""

    @property
    def available(self) -> bool:
        ...

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage; lives as long as the object does."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    @property
    def available(self) -> bool:
        return True

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class UnavailableStorage:
    """Stand-in for environments without any local storage facility."""

    @property
    def available(self) -> bool:
        return False

    def get_item(self, key: str) -> str | None:
        raise StorageUnavailableError("Local storage is not available", key=key)

    def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("Local storage is not available", key=key)


class FileStorage:
    """Key space persisted as a single JSON object file.

    The file is re-read on every access so that several clients pointed
    at the same path observe each other's writes. Writes replace the
    file atomically; a missing file is an empty key space.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def available(self) -> bool:
        return True

    def _read_all(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise CarbookStorageError(f"Cannot read {self._path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CarbookStorageError(f"{self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise CarbookStorageError(f"{self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise CarbookStorageError(f"Cannot write {self._path}: {exc}") from exc
        _logger.debug("Wrote %d storage keys to %s", len(items), self._path)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)
