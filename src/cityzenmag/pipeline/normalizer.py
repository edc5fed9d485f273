"""Content normalizer — maps the five content shapes onto SearchRecords."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from cityzenmag.content.models import (
    ContentItem,
    Interview,
    PhotoReport,
    Testimonial,
    Thread,
    VideoAnalysis,
)
from cityzenmag.errors import IndexingError
from cityzenmag.search.records import SearchRecord

log = logging.getLogger(__name__)

ANONYMOUS_AUTHOR = "Anonyme"


def thread_record(thread: Thread) -> SearchRecord:
    return SearchRecord(
        id=thread.thread_id,
        type="thread",
        title=thread.title,
        description=thread.description or "",
        date=thread.date_created,
        theme=thread.theme,
        url=f"/thread/{thread.thread_id}",
    )


def interview_record(interview: Interview) -> SearchRecord:
    content = interview.transcript or " ".join(q.answer for q in interview.questions)
    return SearchRecord(
        id=interview.id,
        type="interview",
        title=interview.title,
        description=interview.description or "",
        content=content,
        date=interview.published_at,
        theme=interview.category,
        author=interview.interviewee.name,
        image=interview.interviewee.photo or interview.thumbnail,
        url=f"/interviews#{interview.id}",
    )


def reportage_record(report: PhotoReport) -> SearchRecord:
    return SearchRecord(
        id=report.id,
        type="reportage",
        title=report.title,
        description=report.description,
        content=" ".join(img.caption for img in report.images),
        date=report.published_at,
        theme=report.category,
        location=report.location.name,
        author=report.photographer.name,
        image=report.cover_image,
        url=f"/reportages#{report.id}",
    )


def video_record(video: VideoAnalysis) -> SearchRecord:
    content = video.transcript or " ".join(c.title for c in video.chapters)
    return SearchRecord(
        id=video.id,
        type="video",
        title=video.title,
        description=video.description or "",
        content=content,
        date=video.published_at,
        theme=video.category,
        author=video.speaker.name,
        image=video.thumbnail,
        url=f"/videos#{video.id}",
    )


def testimonial_record(testimonial: Testimonial) -> SearchRecord:
    author = testimonial.author
    return SearchRecord(
        id=testimonial.id,
        type="testimonial",
        title=testimonial.title,
        description=testimonial.content,
        content=testimonial.content,
        date=testimonial.created_at,
        theme=testimonial.category,
        location=author.location,
        author=ANONYMOUS_AUTHOR if author.anonymous else author.name,
        url=f"/temoignages#{testimonial.id}",
    )


MAPPERS: dict[type, Callable[..., SearchRecord]] = {
    Thread: thread_record,
    Interview: interview_record,
    PhotoReport: reportage_record,
    VideoAnalysis: video_record,
    Testimonial: testimonial_record,
}


def to_record(item: ContentItem) -> SearchRecord:
    """Normalize one content item. Raises IndexingError on failure."""
    mapper = MAPPERS.get(type(item))
    if mapper is None:
        raise IndexingError(f"Unsupported content type: {type(item).__name__}")
    try:
        return mapper(item)
    except Exception as e:
        item_id = getattr(item, "id", "?")
        raise IndexingError(f"Cannot index {type(item).__name__} {item_id}: {e}") from e


def build_records(
    threads: Iterable[Thread],
    interviews: Iterable[Interview],
    reportages: Iterable[PhotoReport],
    videos: Iterable[VideoAnalysis],
    testimonials: Iterable[Testimonial],
) -> list[SearchRecord]:
    """Normalize all five collections, in that order.

    Returns every record or raises; a partial list is never returned.
    """
    records: list[SearchRecord] = []
    for collection in (threads, interviews, reportages, videos, testimonials):
        records.extend(to_record(item) for item in collection)
    log.debug("Normalized %d records", len(records))
    return records
