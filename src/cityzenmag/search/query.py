"""Query engine — tokenizing, filtering, relevance scoring, highlighting, sorting."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from cityzenmag.search.records import SearchFilters, SearchRecord

MIN_TOKEN_LENGTH = 3

TITLE_WEIGHT = 3
DESCRIPTION_WEIGHT = 2
TEXT_WEIGHT = 1
PHRASE_BONUS = 5

HIGHLIGHT_WINDOW = 50
MAX_HIGHLIGHTS = 3
MARK_OPEN, MARK_CLOSE = "<mark>", "</mark>"

TYPE_POPULARITY = {
    "thread": 1,
    "interview": 3,
    "reportage": 2,
    "video": 4,
    "testimonial": 2,
}
POPULARITY_HORIZON_DAYS = 30

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def tokenize(query: str) -> list[str]:
    """Lowercase, split on whitespace, drop tokens of 2 characters or fewer."""
    return [t for t in query.lower().split() if len(t) >= MIN_TOKEN_LENGTH]


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def searchable_text(record: SearchRecord) -> str:
    return " ".join(
        [
            record.title,
            record.description,
            record.content or "",
            record.theme or "",
            record.location or "",
            record.author or "",
        ]
    ).lower()


def matches_filters(record: SearchRecord, filters: SearchFilters | None) -> bool:
    """AND across dimensions, OR within each list."""
    if filters is None:
        return True

    if filters.types and record.type not in filters.types:
        return False

    if filters.date_range:
        # Unparseable dates on either side never exclude a record.
        item_date = parse_date(record.date)
        start = parse_date(filters.date_range.start)
        end = parse_date(filters.date_range.end)
        if item_date and start and item_date < start:
            return False
        if item_date and end and item_date > end:
            return False

    if filters.themes and (not record.theme or record.theme not in filters.themes):
        return False
    if filters.locations and (not record.location or record.location not in filters.locations):
        return False
    if filters.authors and (not record.author or record.author not in filters.authors):
        return False

    return True


def relevance_score(record: SearchRecord, tokens: list[str]) -> int:
    """Additive weighted substring-match score.

    Each token scores independently: title +3, description +2, any searchable
    field +1. The rejoined token phrase earns a flat +5 once per record.
    """
    if not tokens:
        return 0

    text = searchable_text(record)
    title = record.title.lower()
    description = record.description.lower()

    score = 0
    for token in tokens:
        if token in title:
            score += TITLE_WEIGHT
        if token in description:
            score += DESCRIPTION_WEIGHT
        if token in text:
            score += TEXT_WEIGHT

    if " ".join(tokens) in text:
        score += PHRASE_BONUS

    return score


def highlights(record: SearchRecord, tokens: list[str]) -> tuple[str, ...]:
    """Marked-up description fragments around the first hit of each token."""
    text = record.description
    fragments: list[str] = []

    for token in tokens:
        pattern = re.compile(re.escape(token), re.IGNORECASE)
        match = pattern.search(text)
        if not match:
            continue
        start = max(0, match.start() - HIGHLIGHT_WINDOW)
        fragment = text[start : match.end() + HIGHLIGHT_WINDOW]
        fragments.append(pattern.sub(lambda m: f"{MARK_OPEN}{m.group(0)}{MARK_CLOSE}", fragment))
        if len(fragments) == MAX_HIGHLIGHTS:
            break

    return tuple(fragments)


def popularity_score(record: SearchRecord, now: datetime) -> int:
    """Synthetic popularity: type weight x recency multiplier (never below 1)."""
    weight = TYPE_POPULARITY.get(record.type, 1)
    published = parse_date(record.date)
    if published is None:
        return weight
    days = math.floor((now - published).total_seconds() / 86400)
    return weight * max(1, POPULARITY_HORIZON_DAYS - days)


def sort_records(
    records: list[SearchRecord], sort_by: str, now: datetime | None = None
) -> list[SearchRecord]:
    if sort_by == "date":
        return sorted(records, key=lambda r: parse_date(r.date) or _EPOCH, reverse=True)
    if sort_by == "popularity":
        now = now or datetime.now(timezone.utc)
        return sorted(records, key=lambda r: popularity_score(r, now), reverse=True)
    return sorted(records, key=lambda r: r.relevance_score, reverse=True)


def execute(
    records: Iterable[SearchRecord],
    query: str,
    filters: SearchFilters | None = None,
    sort_by: str = "relevance",
    now: datetime | None = None,
) -> list[SearchRecord]:
    """Filter, score and sort; returns scored copies of every matching record.

    Records scoring 0 are dropped, so a query without valid tokens matches
    nothing. Pagination is left to the caller.
    """
    tokens = tokenize(query)
    scored = []
    for record in records:
        if not matches_filters(record, filters):
            continue
        score = relevance_score(record, tokens)
        if score > 0:
            scored.append(
                replace(record, relevance_score=score, highlights=highlights(record, tokens))
            )
    return sort_records(scored, sort_by, now)
