"""Search history and query popularity tracking."""

from __future__ import annotations

import json
import logging

from cityzenmag.errors import PersistenceError
from cityzenmag.storage.kv import KeyValueStore

log = logging.getLogger(__name__)

HISTORY_KEY = "cityzenmag-search-history"
POPULAR_KEY = "cityzenmag-popular-queries"

MAX_HISTORY = 50
HISTORY_VIEW = 10
POPULAR_VIEW = 10
MIN_QUERY_LENGTH = 3


class SearchHistory:
    """Most-recent-first query history plus a query -> count popularity map.

    Both structures are loaded once from the store and written back after
    every recorded query. Storage failures are logged and never raised.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._history: list[str] = []
        self._popular: dict[str, int] = {}
        self._load()

    def _load(self) -> None:
        try:
            history = self._read_json(HISTORY_KEY)
            popular = self._read_json(POPULAR_KEY)
            if history is not None:
                if not isinstance(history, list):
                    raise PersistenceError(f"{HISTORY_KEY}: expected a list")
                self._history = [str(q) for q in history][:MAX_HISTORY]
            if popular is not None:
                self._popular = {str(q): int(n) for q, n in popular}
        except (PersistenceError, TypeError, ValueError) as e:
            log.warning("Failed to load search history, starting empty: %s", e)
            self._history, self._popular = [], {}

    def _read_json(self, key: str):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"{key}: {e}") from e

    def _save(self) -> None:
        try:
            self.store.set(HISTORY_KEY, json.dumps(self._history, ensure_ascii=False))
            self.store.set(
                POPULAR_KEY,
                json.dumps([[q, n] for q, n in self._popular.items()], ensure_ascii=False),
            )
        except PersistenceError as e:
            log.warning("Failed to save search history: %s", e)

    def record(self, query: str) -> None:
        """Record a query; anything of 2 characters or fewer once trimmed is ignored."""
        if len(query.strip()) < MIN_QUERY_LENGTH:
            return
        self._history.insert(0, query)
        del self._history[MAX_HISTORY:]
        self._popular[query] = self._popular.get(query, 0) + 1
        self._save()

    def recent(self) -> list[str]:
        return self._history[:HISTORY_VIEW]

    def popular(self) -> list[str]:
        ranked = sorted(self._popular.items(), key=lambda x: x[1], reverse=True)
        return [q for q, _ in ranked[:POPULAR_VIEW]]

    def popular_counts(self) -> dict[str, int]:
        return dict(self._popular)

    def __len__(self) -> int:
        return len(self._history)

    def clear(self) -> None:
        self._history = []
        self._popular = {}
        try:
            self.store.remove(HISTORY_KEY)
            self.store.remove(POPULAR_KEY)
        except PersistenceError as e:
            log.warning("Failed to clear persisted search history: %s", e)
