"""Key-value stores backing the game preferences."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from threading import Lock
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string store used for persisted game data."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, mainly for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    Every write replaces the whole file through a temporary sibling and
    ``os.replace`` so a failed write never leaves a truncated document behind.
    """

    def __init__(self, file_path: Path) -> None:
        self._path = file_path.resolve()
        self._lock = Lock()
        self._values = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._values)
            updated[key] = value
            self._write(updated)
            self._values = updated

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store at %s: %s", self._path, exc)
            return {}
        if not isinstance(document, dict):
            logger.warning("Ignoring store at %s: expected a JSON object", self._path)
            return {}
        return {str(key): str(value) for key, value in document.items()}

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, self._path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
