"""CityzenMag search service — single source of truth for indexing and search."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from cityzenmag.config import Settings
from cityzenmag.content.models import (
    Interview,
    PhotoReport,
    Testimonial,
    Thread,
    VideoAnalysis,
)
from cityzenmag.errors import NotIndexedError, SearchExecutionError
from cityzenmag.pipeline.normalizer import build_records
from cityzenmag.search import query as engine
from cityzenmag.search.facets import build_facets, build_suggestions
from cityzenmag.search.history import SearchHistory
from cityzenmag.search.index import IndexStore
from cityzenmag.search.records import SearchFilters, SearchOptions, SearchResponse
from cityzenmag.storage.content import ContentFeeds
from cityzenmag.storage.kv import JsonFileStore, KeyValueStore

log = logging.getLogger(__name__)


class CityzenSearchService:
    """Unified search over threads, interviews, reportages, videos and testimonials.

    Owned by the composition root (CLI, MCP server or a SearchSession).
    Lifecycle: construct -> index_content(...)* -> search(...)*.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        from cityzenmag.config import settings as default_settings

        self.settings = settings or default_settings

        if store is None:
            self.settings.ensure_dirs()
            store = JsonFileStore(self.settings.history_path)

        self.index = IndexStore()
        self.history = SearchHistory(store)
        self.is_indexed = False

    # ─── Indexing ────────────────────────────────────────────────────────

    def index_content(
        self,
        threads: Iterable[Thread] = (),
        interviews: Iterable[Interview] = (),
        reportages: Iterable[PhotoReport] = (),
        videos: Iterable[VideoAnalysis] = (),
        testimonials: Iterable[Testimonial] = (),
    ) -> int:
        """Rebuild the whole index from the five collections.

        Raises IndexingError if any item cannot be normalized; the previous
        index and readiness are left untouched in that case.
        """
        records = build_records(threads, interviews, reportages, videos, testimonials)
        self.index.rebuild(records)
        self.is_indexed = True
        log.info("Indexed %d records: %s", len(self.index), self.index.counts_by_type())
        return len(self.index)

    def index_feeds(self, feeds: ContentFeeds) -> int:
        return self.index_content(*feeds.collections())

    # ─── Search ──────────────────────────────────────────────────────────

    async def search(self, options: SearchOptions) -> SearchResponse:
        """Run a search: filter -> score -> sort -> paginate, plus facets and suggestions.

        ``total`` and facets describe the full scored set, not just the page.
        """
        started = time.perf_counter()
        if not self.is_indexed:
            raise NotIndexedError()

        self.history.record(options.query)

        try:
            matched = engine.execute(
                self.index,
                options.query,
                filters=options.filters,
                sort_by=options.sort_by,
            )
        except Exception as e:
            raise SearchExecutionError(f"Erreur lors de la recherche: {e}") from e

        page = matched[options.offset : options.offset + options.limit]
        suggestions = build_suggestions(
            options.query,
            self.history.popular_counts(),
            limit=self.settings.suggestion_limit,
        )

        return SearchResponse(
            results=page,
            total=len(matched),
            suggestions=suggestions,
            facets=build_facets(matched),
            query=options.query,
            execution_time=(time.perf_counter() - started) * 1000,
        )

    async def quick_search(
        self, query: str, filters: SearchFilters | None = None
    ) -> SearchResponse:
        return await self.search(
            SearchOptions(query=query, filters=filters, limit=self.settings.default_limit)
        )

    # ─── History ─────────────────────────────────────────────────────────

    def get_search_history(self) -> list[str]:
        return self.history.recent()

    def get_popular_searches(self) -> list[str]:
        return self.history.popular()

    def clear_search_history(self) -> None:
        self.history.clear()

    def stats(self) -> dict:
        return {
            "indexed": self.is_indexed,
            "count": len(self.index),
            "types": self.index.counts_by_type(),
        }
