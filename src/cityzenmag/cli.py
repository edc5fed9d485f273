"""CityzenMag CLI — search the magazine's content from the command line."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional

try:
    import typer
except ImportError:
    raise ImportError(
        "Typer is required to run the CLI. Install it with: pip install cityzenmag-search[cli]"
    )

from cityzenmag.errors import CityzenSearchError
from cityzenmag.search.records import (
    CONTENT_TYPES,
    SORT_OPTIONS,
    DateRange,
    SearchFilters,
    SearchOptions,
)

log = logging.getLogger(__name__)

app = typer.Typer(
    name="cityzenmag",
    help="Unified search over CityzenMag threads, interviews, reportages, videos and testimonials.",
    no_args_is_help=True,
)

# Lazy-initialized service instance
_svc = None


def _get_svc():
    """Lazy-init the search service and index the content directory."""
    global _svc
    if _svc is None:
        from cityzenmag.config import settings
        from cityzenmag.service import CityzenSearchService
        from cityzenmag.storage.content import load_feeds

        logging.basicConfig(level=settings.log_level)
        _svc = CityzenSearchService(settings)
        feeds = load_feeds(settings.content_dir)
        for name, error in feeds.errors().items():
            log.warning("Content feed %s failed to load: %s", name, error)
        _svc.index_feeds(feeds)
    return _svc


def _output(data: dict | list | str) -> None:
    """Print JSON output to stdout (ensure_ascii=False for French content)."""
    if isinstance(data, str):
        typer.echo(data)
    else:
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


@app.command()
def index() -> None:
    """Index the content directory and show per-type counts."""
    _output(_get_svc().stats())


@app.command()
def search(
    query: str = typer.Argument(..., help="What to search for."),
    types: Optional[List[str]] = typer.Option(
        None, "--type", "-t", help="Content type (thread, interview, reportage, video, testimonial)."
    ),
    themes: Optional[List[str]] = typer.Option(None, "--theme", help="Theme/category filter."),
    locations: Optional[List[str]] = typer.Option(None, "--location", help="Location filter."),
    authors: Optional[List[str]] = typer.Option(None, "--author", help="Author filter."),
    date_from: Optional[str] = typer.Option(None, "--from", help="Start date (ISO-8601)."),
    date_to: Optional[str] = typer.Option(None, "--to", help="End date (ISO-8601)."),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", help="Max results to return (default from settings)."
    ),
    offset: int = typer.Option(0, "--offset", help="Results to skip."),
    sort_by: str = typer.Option(
        "relevance", "--sort", "-s", help="Sort by 'relevance', 'date' or 'popularity'."
    ),
) -> None:
    """Search all indexed content."""
    if sort_by not in SORT_OPTIONS:
        raise typer.BadParameter(f"must be one of {', '.join(SORT_OPTIONS)}", param_hint="--sort")
    unknown = [t for t in types or [] if t not in CONTENT_TYPES]
    if unknown:
        raise typer.BadParameter(
            f"unknown type {', '.join(unknown)}; use {', '.join(CONTENT_TYPES)}", param_hint="--type"
        )

    svc = _get_svc()
    date_range = DateRange(start=date_from, end=date_to) if (date_from or date_to) else None
    options = SearchOptions(
        query=query,
        filters=SearchFilters(
            types=types or None,
            themes=themes or None,
            locations=locations or None,
            authors=authors or None,
            date_range=date_range,
        ),
        limit=limit if limit is not None else svc.settings.default_limit,
        offset=offset,
        sort_by=sort_by,
    )
    try:
        response = asyncio.run(svc.search(options))
    except CityzenSearchError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    _output(response.to_dict())


@app.command()
def history() -> None:
    """Show the 10 most recent searches."""
    _output(_get_svc().get_search_history())


@app.command()
def popular() -> None:
    """Show the 10 most frequent searches."""
    _output(_get_svc().get_popular_searches())


@app.command("clear-history")
def clear_history() -> None:
    """Forget the search history and popularity counts."""
    _get_svc().clear_search_history()
    _output({"status": "cleared"})


if __name__ == "__main__":
    app()
