"""Durable key-value storage for the search history and popularity map."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from cityzenmag.errors import PersistenceError


class KeyValueStore(Protocol):
    """Protocol for string key-value stores."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class JsonFileStore:
    """Key-value store backed by a single JSON object file."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Corrupt store {self.path}: expected a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp).unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class InMemoryStore:
    """Dict-backed store (no durability)."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
