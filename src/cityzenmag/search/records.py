"""Search contract — normalized records, filters, options and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ContentType = Literal["thread", "interview", "reportage", "video", "testimonial"]
SortBy = Literal["relevance", "date", "popularity"]

CONTENT_TYPES: tuple[str, ...] = ("thread", "interview", "reportage", "video", "testimonial")
SORT_OPTIONS: tuple[str, ...] = ("relevance", "date", "popularity")


@dataclass(frozen=True)
class SearchRecord:
    """A normalized, type-tagged unit of searchable content.

    Stored records always carry ``relevance_score=0`` and no highlights;
    scored copies are produced per query with ``dataclasses.replace``.
    """

    id: str
    type: ContentType
    title: str
    description: str
    date: str
    url: str
    content: str | None = None  # scoring only, never displayed
    theme: str | None = None
    location: str | None = None
    author: str | None = None
    image: str | None = None
    relevance_score: int = 0
    highlights: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.type}-{self.id}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "date": self.date,
            "theme": self.theme,
            "location": self.location,
            "author": self.author,
            "image": self.image,
            "url": self.url,
            "relevanceScore": self.relevance_score,
            "highlights": list(self.highlights),
        }


@dataclass
class DateRange:
    start: str | None = None
    end: str | None = None


@dataclass
class SearchFilters:
    """Optional restrictions; lists are OR'd internally and AND'd together."""

    types: list[str] | None = None
    themes: list[str] | None = None
    locations: list[str] | None = None
    authors: list[str] | None = None
    date_range: DateRange | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> SearchFilters:
        """Build filters from the camelCase wire form used by the UI."""
        if not data:
            return cls()
        date_range = data.get("dateRange", data.get("date_range"))
        return cls(
            types=data.get("types"),
            themes=data.get("themes"),
            locations=data.get("locations"),
            authors=data.get("authors"),
            date_range=DateRange(**date_range) if date_range else None,
        )


@dataclass
class SearchOptions:
    query: str
    filters: SearchFilters | None = None
    limit: int = 20
    offset: int = 0
    sort_by: SortBy = "relevance"


@dataclass
class SearchFacets:
    """Count breakdowns of a result set along each dimension."""

    types: dict[str, int] = field(default_factory=dict)
    themes: dict[str, int] = field(default_factory=dict)
    locations: dict[str, int] = field(default_factory=dict)
    authors: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "types": dict(self.types),
            "themes": dict(self.themes),
            "locations": dict(self.locations),
            "authors": dict(self.authors),
        }


@dataclass
class SearchResponse:
    results: list[SearchRecord]
    total: int
    suggestions: list[str]
    facets: SearchFacets
    query: str
    execution_time: float  # milliseconds spent in search(), indexing excluded

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "total": self.total,
            "suggestions": list(self.suggestions),
            "facets": self.facets.to_dict(),
            "query": self.query,
            "executionTime": round(self.execution_time, 3),
        }
