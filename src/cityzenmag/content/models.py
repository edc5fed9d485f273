"""Typed shapes of the five content collections fed into the search index.

The content collaborators (Twitter sync, interviews, photo reports, video
analyses, testimonials) produce JSON with camelCase keys; threads keep the
snake_case column names of their table. Both spellings are accepted.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContentModel(BaseModel):
    """Base for content shapes: camelCase or snake_case keys, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ─── Threads ─────────────────────────────────────────────────────────────


class Thread(ContentModel):
    id: str
    thread_id: str
    title: str
    theme: str | None = None
    description: str | None = None
    date_created: str
    hashtags: list[str] = Field(default_factory=list)
    total_tweets: int = 0
    complete: bool = False


# ─── Interviews ──────────────────────────────────────────────────────────


class Interviewee(ContentModel):
    id: str = ""
    name: str
    role: str = ""
    photo: str | None = None
    organization: str | None = None


class Question(ContentModel):
    id: str = ""
    question: str = ""
    answer: str = ""
    order: int = 0


class Interview(ContentModel):
    id: str
    title: str
    description: str | None = None
    interviewee: Interviewee
    interviewer: str = ""
    questions: list[Question] = Field(default_factory=list)
    category: str
    transcript: str | None = None
    published_at: str
    thumbnail: str | None = None
    tags: list[str] = Field(default_factory=list)


# ─── Photo reports ───────────────────────────────────────────────────────


class Photographer(ContentModel):
    id: str = ""
    name: str


class ReportLocation(ContentModel):
    id: str = ""
    name: str
    region: str | None = None
    country: str = ""


class ReportImage(ContentModel):
    id: str = ""
    url: str = ""
    caption: str = ""
    order: int = 0


class PhotoReport(ContentModel):
    id: str
    title: str
    description: str
    photographer: Photographer
    location: ReportLocation
    images: list[ReportImage] = Field(default_factory=list)
    category: str
    published_at: str
    cover_image: str | None = None
    tags: list[str] = Field(default_factory=list)


# ─── Video analyses ──────────────────────────────────────────────────────


class Speaker(ContentModel):
    id: str = ""
    name: str
    role: str = ""


class Chapter(ContentModel):
    id: str = ""
    title: str
    description: str = ""


class VideoAnalysis(ContentModel):
    id: str
    title: str
    description: str | None = None
    thumbnail: str | None = None
    transcript: str | None = None
    chapters: list[Chapter] = Field(default_factory=list)
    category: str
    speaker: Speaker
    published_at: str
    tags: list[str] = Field(default_factory=list)


# ─── Testimonials ────────────────────────────────────────────────────────


class TestimonialAuthor(ContentModel):
    id: str = ""
    name: str
    location: str = ""
    anonymous: bool = False


class Testimonial(ContentModel):
    id: str
    title: str
    content: str
    author: TestimonialAuthor
    category: str
    created_at: str
    tags: list[str] = Field(default_factory=list)


ContentItem = Union[Thread, Interview, PhotoReport, VideoAnalysis, Testimonial]
