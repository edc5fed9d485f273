"""JSON content feeds — the resolved collections the search index is built from."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from cityzenmag.content.models import (
    ContentModel,
    Interview,
    PhotoReport,
    Testimonial,
    Thread,
    VideoAnalysis,
)

log = logging.getLogger(__name__)

T = TypeVar("T", bound=ContentModel)

FEED_FILES = {
    "threads": ("threads.json", Thread),
    "interviews": ("interviews.json", Interview),
    "reportages": ("reportages.json", PhotoReport),
    "videos": ("videos.json", VideoAnalysis),
    "testimonials": ("testimonials.json", Testimonial),
}


@dataclass
class ContentFeed(Generic[T]):
    """Read-only view of one content collection: items, loading flag, error."""

    items: list[T] = field(default_factory=list)
    loading: bool = False
    error: str | None = None


@dataclass
class ContentFeeds:
    """The five content collections, in indexing order."""

    threads: ContentFeed[Thread] = field(default_factory=ContentFeed)
    interviews: ContentFeed[Interview] = field(default_factory=ContentFeed)
    reportages: ContentFeed[PhotoReport] = field(default_factory=ContentFeed)
    videos: ContentFeed[VideoAnalysis] = field(default_factory=ContentFeed)
    testimonials: ContentFeed[Testimonial] = field(default_factory=ContentFeed)

    def collections(self) -> tuple[list, list, list, list, list]:
        return (
            self.threads.items,
            self.interviews.items,
            self.reportages.items,
            self.videos.items,
            self.testimonials.items,
        )

    def is_empty(self) -> bool:
        return not any(self.collections())

    def errors(self) -> dict[str, str]:
        """Feed name -> error message, for feeds that failed to load."""
        return {
            name: getattr(self, name).error
            for name in FEED_FILES
            if getattr(self, name).error
        }


def load_feed(path: Path, model: type[T]) -> ContentFeed[T]:
    """Load a JSON array of content items from a file.

    A missing file is an empty collection. An unreadable or invalid file is
    reported on the feed's ``error`` instead of raising.
    """
    if not path.exists():
        return ContentFeed()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        items = TypeAdapter(list[model]).validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        log.warning("Failed to load content feed %s: %s", path, e)
        return ContentFeed(error=str(e))

    return ContentFeed(items=items)


def load_feeds(content_dir: Path) -> ContentFeeds:
    """Load all five collections from ``content_dir``."""
    feeds = {
        name: load_feed(content_dir / filename, model)
        for name, (filename, model) in FEED_FILES.items()
    }
    loaded = ContentFeeds(**feeds)
    log.info(
        "Loaded content from %s: %s",
        content_dir,
        {name: len(feed.items) for name, feed in feeds.items()},
    )
    return loaded
