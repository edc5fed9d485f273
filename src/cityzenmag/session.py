"""Search session — UI-facing search state bridging content feeds to the service."""

from __future__ import annotations

import asyncio
import logging

from cityzenmag.errors import CityzenSearchError, IndexingError
from cityzenmag.search.history import MIN_QUERY_LENGTH
from cityzenmag.search.records import SearchFilters, SearchOptions, SearchResponse
from cityzenmag.service import CityzenSearchService
from cityzenmag.storage.content import ContentFeeds

log = logging.getLogger(__name__)

NOT_READY = "Index de recherche non prêt"
AUTOCOMPLETE_LIMIT = 5


class SearchSession:
    """Holds query, loading, error and response state for one search UI.

    Only the latest ``search`` call may update state: each call takes a
    sequence number and responses from superseded calls are dropped.
    """

    def __init__(self, service: CityzenSearchService, debounce_ms: int | None = None) -> None:
        self.service = service
        if debounce_ms is None:
            debounce_ms = service.settings.debounce_ms
        self.debounce = debounce_ms / 1000

        self.query = ""
        self.is_loading = False
        self.error: str | None = None
        self.response: SearchResponse | None = None
        self.autocomplete: list[str] = []

        self._seq = 0
        self._suggest_seq = 0
        self._snapshot: tuple | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_indexed(self) -> bool:
        return self.service.is_indexed

    # ─── Derived state ───────────────────────────────────────────────────

    @property
    def results(self) -> list:
        return self.response.results if self.response else []

    @property
    def total(self) -> int:
        return self.response.total if self.response else 0

    @property
    def suggestions(self) -> list[str]:
        return self.response.suggestions if self.response else []

    @property
    def facets(self):
        return self.response.facets if self.response else None

    @property
    def execution_time(self) -> float:
        return self.response.execution_time if self.response else 0

    # ─── Indexing ────────────────────────────────────────────────────────

    def sync(self, feeds: ContentFeeds) -> bool:
        """Re-index when the combined content changed since the last sync.

        Returns True if a re-index ran and succeeded.
        """
        snapshot = tuple(tuple(items) for items in feeds.collections())
        if snapshot == self._snapshot:
            log.debug("Content unchanged, skipping re-index")
            return False

        try:
            self.service.index_feeds(feeds)
        except IndexingError as e:
            log.warning("Indexing failed: %s", e)
            self.error = f"Erreur lors de l'indexation du contenu: {e}"
            return False

        self._snapshot = snapshot
        self.error = None
        return True

    # ─── Search ──────────────────────────────────────────────────────────

    async def search(self, options: SearchOptions) -> SearchResponse | None:
        """Search and update session state; returns None if not ready or superseded."""
        if not self.is_indexed:
            self.error = NOT_READY
            return None

        self._seq += 1
        seq = self._seq
        self.query = options.query.strip()
        self.is_loading = True
        self.error = None

        try:
            response = await self.service.search(options)
        except Exception as e:
            if seq == self._seq:
                log.exception("Search failed for %r", options.query)
                self.error = str(e) or type(e).__name__
            return None
        finally:
            if seq == self._seq:
                self.is_loading = False

        if seq != self._seq:
            log.debug("Discarding stale response for %r", options.query)
            return None

        self.response = response
        return response

    async def quick_search(
        self, query: str, filters: SearchFilters | None = None
    ) -> SearchResponse | None:
        return await self.search(
            SearchOptions(query=query, filters=filters, limit=self.service.settings.default_limit)
        )

    # ─── Autocomplete ────────────────────────────────────────────────────

    def suggest(self, query: str) -> None:
        """Schedule autocomplete suggestions for ``query`` after the debounce delay.

        A new keystroke supersedes the pending timer; a suggestion search
        already running is left to finish, but only the latest one may set
        ``autocomplete``. Must be called from a running loop.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if len(query) < MIN_QUERY_LENGTH:
            self._suggest_seq += 1
            self.autocomplete = []
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce, self._start_suggest, query)

    def _start_suggest(self, query: str) -> None:
        self._timer = None
        self._suggest_seq += 1
        task = asyncio.ensure_future(self._run_suggest(query, self._suggest_seq))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_suggest(self, query: str, seq: int) -> None:
        try:
            response = await self.service.search(
                SearchOptions(query=query, limit=AUTOCOMPLETE_LIMIT)
            )
        except CityzenSearchError as e:
            log.warning("Suggestion search failed: %s", e)
            return
        if seq != self._suggest_seq:
            log.debug("Discarding stale suggestions for %r", query)
            return
        self.autocomplete = response.suggestions

    async def drain(self) -> None:
        """Wait for suggestion searches that have already started."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ─── History ─────────────────────────────────────────────────────────

    def get_search_history(self) -> list[str]:
        return self.service.get_search_history()

    def get_popular_searches(self) -> list[str]:
        return self.service.get_popular_searches()

    def clear_search_history(self) -> None:
        self.service.clear_search_history()
