"""Integration tests for the search service: indexing, search, pagination, facets, suggestions."""

import asyncio

import pytest

from cityzenmag.content.models import Thread
from cityzenmag.errors import IndexingError, NotIndexedError, SearchExecutionError
from cityzenmag.pipeline import normalizer
from cityzenmag.search import query as engine
from cityzenmag.search.records import DateRange, SearchFilters, SearchOptions


def _search(service, query: str, **kwargs):
    return asyncio.run(service.search(SearchOptions(query=query, **kwargs)))


def _comparable(response) -> dict:
    data = response.to_dict()
    data.pop("executionTime")
    return data


class TestIndexing:
    def test_index_counts(self, service, feeds):
        assert service.is_indexed is False
        assert service.index_feeds(feeds) == 6
        assert service.is_indexed is True
        assert service.stats()["types"] == {
            "thread": 2, "interview": 1, "reportage": 1, "video": 1, "testimonial": 1
        }

    def test_reindex_replaces(self, indexed_service, threads):
        indexed_service.index_content(threads=threads[:1])
        assert len(indexed_service.index) == 1
        assert indexed_service.index.get("interview", "int-1") is None

    def test_duplicate_keys_collapse(self, service, threads):
        service.index_content(threads=threads + threads)
        assert len(service.index) == 2

    def test_failed_index_keeps_previous(self, indexed_service, threads, monkeypatch):
        def broken(item):
            raise KeyError("thread_id")

        monkeypatch.setitem(normalizer.MAPPERS, Thread, broken)
        with pytest.raises(IndexingError):
            indexed_service.index_content(threads=threads)
        assert indexed_service.is_indexed is True
        assert len(indexed_service.index) == 6

    def test_failed_first_index_stays_unindexed(self, service, threads, monkeypatch):
        monkeypatch.setitem(normalizer.MAPPERS, Thread, lambda item: 1 / 0)
        with pytest.raises(IndexingError):
            service.index_content(threads=threads)
        assert service.is_indexed is False

    def test_reindex_is_idempotent(self, indexed_service, feeds):
        first = _search(indexed_service, "transparence")
        indexed_service.index_feeds(feeds)
        second = _search(indexed_service, "transparence")
        assert _comparable(first)["results"] == _comparable(second)["results"]
        assert first.total == second.total


class TestSearch:
    def test_not_indexed(self, service):
        with pytest.raises(NotIndexedError):
            _search(service, "transparence")

    def test_title_match_with_highlight(self, indexed_service):
        response = _search(indexed_service, "transparence")
        thread = next(r for r in response.results if r.key == "thread-th-1")
        assert thread.relevance_score >= 3
        assert any("<mark>transparence</mark>" in h for h in thread.highlights)
        assert response.query == "transparence"
        assert response.execution_time >= 0

    def test_ranked_by_relevance(self, indexed_service):
        response = _search(indexed_service, "transparence")
        assert [r.key for r in response.results] == ["thread-th-1", "video-vid-1"]
        assert [r.relevance_score for r in response.results] == [11, 6]

    def test_only_positive_scores(self, indexed_service):
        for query in ("transparence", "marché", "budget", "dakar", "anonyme"):
            response = _search(indexed_service, query)
            assert all(r.relevance_score > 0 for r in response.results)

    def test_short_tokens(self, indexed_service):
        response = _search(indexed_service, "ab")
        assert response.results == []
        assert response.total == 0

    def test_empty_query_with_filter(self, indexed_service):
        response = _search(indexed_service, "   ", filters=SearchFilters(types=["interview"]))
        assert response.total == 0

    def test_total_ignores_pagination(self, indexed_service):
        page1 = _search(indexed_service, "transparence", limit=1)
        page2 = _search(indexed_service, "transparence", limit=1, offset=1)
        assert page1.total == page2.total == 2
        assert [r.key for r in page1.results] == ["thread-th-1"]
        assert [r.key for r in page2.results] == ["video-vid-1"]

    def test_offset_past_end(self, indexed_service):
        response = _search(indexed_service, "transparence", offset=10)
        assert response.results == []
        assert response.total == 2

    def test_facets_cover_full_result_set(self, indexed_service):
        response = _search(indexed_service, "transparence", limit=1)
        assert response.facets.types == {"thread": 1, "video": 1}
        assert response.facets.themes == {"transparence": 1, "economique": 1}
        assert response.facets.authors == {"Fatou Sow": 1}
        assert response.facets.locations == {}

    def test_filters(self, indexed_service):
        response = _search(
            indexed_service, "transparence", filters=SearchFilters(types=["video"])
        )
        assert [r.key for r in response.results] == ["video-vid-1"]

    def test_date_range_filter(self, indexed_service):
        filters = SearchFilters(date_range=DateRange(start="2024-02-25", end="2024-03-31"))
        response = _search(indexed_service, "transparence", filters=filters)
        assert [r.key for r in response.results] == ["thread-th-1"]

    def test_sort_by_date(self, indexed_service):
        response = _search(indexed_service, "des pour marché", sort_by="date")
        dates = [r.date for r in response.results]
        assert dates == sorted(dates, reverse=True)
        assert len(dates) >= 2

    def test_canonical_records_stay_unscored(self, indexed_service):
        _search(indexed_service, "transparence")
        stored = indexed_service.index.get("thread", "th-1")
        assert stored.relevance_score == 0
        assert stored.highlights == ()

    def test_execution_error_is_wrapped(self, indexed_service, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(engine, "execute", boom)
        with pytest.raises(SearchExecutionError, match="disk on fire"):
            _search(indexed_service, "transparence")

    def test_quick_search(self, indexed_service):
        response = asyncio.run(indexed_service.quick_search("dakar"))
        assert [r.key for r in response.results] == ["reportage-rep-1"]

    def test_quick_search_uses_default_limit(self, indexed_service, monkeypatch):
        monkeypatch.setattr(indexed_service.settings, "default_limit", 1)
        response = asyncio.run(indexed_service.quick_search("transparence"))
        assert response.total == 2
        assert len(response.results) == 1


class TestSuggestionsAndHistory:
    def test_search_records_history(self, indexed_service):
        _search(indexed_service, "transparence")
        _search(indexed_service, "ab")
        _search(indexed_service, "corruption")
        assert indexed_service.get_search_history() == ["corruption", "transparence"]

    def test_popular_then_vocabulary(self, indexed_service):
        _search(indexed_service, "transparence budget")
        response = _search(indexed_service, "transparence")
        assert response.suggestions == ["transparence budget", "transparence gouvernementale"]

    def test_current_query_not_suggested(self, indexed_service):
        _search(indexed_service, "transparence budget")
        response = _search(indexed_service, "transparence budget")
        assert "transparence budget" not in response.suggestions

    def test_vocabulary_phrase_equal_to_query_is_suggested(self, indexed_service):
        _search(indexed_service, "gouvernance locale")
        response = _search(indexed_service, "gouvernance locale")
        assert response.suggestions == ["gouvernance locale"]

    def test_suggestions_capped(self, indexed_service):
        for i in range(6):
            _search(indexed_service, f"gouvernance {i}")
        response = _search(indexed_service, "gouv")
        assert len(response.suggestions) == 5
        assert response.suggestions[0] == "gouvernance 0"

    def test_popular_searches(self, indexed_service):
        for _ in range(3):
            _search(indexed_service, "transparence")
        _search(indexed_service, "corruption")
        assert indexed_service.get_popular_searches() == ["transparence", "corruption"]

    def test_clear(self, indexed_service):
        _search(indexed_service, "transparence")
        indexed_service.clear_search_history()
        assert indexed_service.get_search_history() == []
        assert indexed_service.get_popular_searches() == []
