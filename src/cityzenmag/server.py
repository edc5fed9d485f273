"""CityzenMag MCP Server — exposes the unified search as tools."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from cityzenmag.config import settings
from cityzenmag.search.records import SearchFilters, SearchOptions
from cityzenmag.service import CityzenSearchService
from cityzenmag.storage.content import load_feeds

log = logging.getLogger(__name__)

# Initialize
logging.basicConfig(level=settings.log_level)
_svc = CityzenSearchService(settings)
_feeds = load_feeds(settings.content_dir)
for name, error in _feeds.errors().items():
    log.warning("Content feed %s failed to load: %s", name, error)
_svc.index_feeds(_feeds)

# Create MCP server
mcp = FastMCP(
    "CityzenMag",
    instructions="Search CityzenMag threads, interviews, photo reports, video analyses and testimonials.",
)


# ─── Tools ───────────────────────────────────────────────────────────────


@mcp.tool()
async def search_content(
    query: str,
    types: list[str] | None = None,
    themes: list[str] | None = None,
    locations: list[str] | None = None,
    authors: list[str] | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str = "relevance",
) -> dict:
    """Search all CityzenMag content with relevance scoring, facets and suggestions.

    Args:
        query: Keywords to search for. Words of 2 letters or fewer are ignored.
        types: Optional content types (thread, interview, reportage, video, testimonial).
        themes: Optional themes/categories.
        locations: Optional locations.
        authors: Optional authors, interviewees, photographers or speakers.
        date_from: Optional inclusive start date (ISO-8601).
        date_to: Optional inclusive end date (ISO-8601).
        limit: Page size (defaults to the configured default_limit).
        offset: Results to skip.
        sort_by: "relevance" (default), "date" or "popularity".
    """
    filters = SearchFilters.from_dict(
        {
            "types": types,
            "themes": themes,
            "locations": locations,
            "authors": authors,
            "dateRange": {"start": date_from, "end": date_to} if (date_from or date_to) else None,
        }
    )
    response = await _svc.search(
        SearchOptions(
            query=query,
            filters=filters,
            limit=limit if limit is not None else _svc.settings.default_limit,
            offset=offset,
            sort_by=sort_by,
        )
    )
    return response.to_dict()


@mcp.tool()
def get_search_history() -> list[str]:
    """List the 10 most recent searches, newest first."""
    return _svc.get_search_history()


@mcp.tool()
def get_popular_searches() -> list[str]:
    """List the 10 most frequent searches."""
    return _svc.get_popular_searches()


@mcp.tool()
def clear_search_history() -> dict:
    """Forget the search history and popularity counts."""
    _svc.clear_search_history()
    return {"status": "cleared"}


@mcp.tool()
def index_stats() -> dict:
    """Show how many records of each content type are indexed."""
    return _svc.stats()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
