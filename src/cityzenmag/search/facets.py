"""Facet counts and query suggestions."""

from __future__ import annotations

from collections.abc import Iterable

from cityzenmag.search.records import SearchFacets, SearchRecord

MAX_SUGGESTIONS = 5

# Known editorial vocabulary offered as completions.
VOCABULARY = (
    "transparence gouvernementale",
    "corruption Sénégal",
    "modernisation administration",
    "accès information publique",
    "gouvernance locale",
    "participation citoyenne",
    "réformes institutionnelles",
    "digitalisation services",
)


def _count(counts: dict[str, int], value: str | None) -> None:
    if value:
        counts[value] = counts.get(value, 0) + 1


def build_facets(records: Iterable[SearchRecord]) -> SearchFacets:
    """Count records per type, theme, location and author."""
    facets = SearchFacets()
    for record in records:
        _count(facets.types, record.type)
        _count(facets.themes, record.theme)
        _count(facets.locations, record.location)
        _count(facets.authors, record.author)
    return facets


def build_suggestions(
    query: str,
    popular_queries: Iterable[str],
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Popular queries first, then vocabulary phrases, containing ``query``."""
    needle = query.lower()
    suggestions: list[str] = []

    for popular in popular_queries:
        if needle in popular.lower() and popular != query:
            suggestions.append(popular)

    for phrase in VOCABULARY:
        if needle in phrase.lower() and phrase not in suggestions:
            suggestions.append(phrase)

    return suggestions[:limit]
