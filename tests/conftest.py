"""Shared fixtures: a small, realistic content set across the five content types."""

import pytest

from cityzenmag.config import Settings
from cityzenmag.content.models import Interview, PhotoReport, Thread, VideoAnalysis
from cityzenmag.content.models import Testimonial as TestimonialItem
from cityzenmag.service import CityzenSearchService
from cityzenmag.storage.content import ContentFeed, ContentFeeds
from cityzenmag.storage.kv import InMemoryStore

THREADS = [
    {
        "id": "1",
        "thread_id": "th-1",
        "title": "La transparence budgétaire",
        "theme": "transparence",
        "description": "Analyse de la transparence des finances publiques",
        "date_created": "2024-03-01T10:00:00Z",
        "hashtags": ["#budget"],
        "total_tweets": 12,
        "complete": True,
    },
    {
        "id": "2",
        "thread_id": "th-2",
        "title": "Corruption dans les marchés publics",
        "theme": "corruption",
        "description": "Enquête sur les pots-de-vin",
        "date_created": "2024-02-01T10:00:00Z",
    },
]

INTERVIEWS = [
    {
        "id": "int-1",
        "title": "Entretien avec une maire",
        "description": "Gouvernance locale et participation citoyenne",
        "interviewee": {"id": "p1", "name": "Aminata Diallo", "role": "Maire"},
        "interviewer": "Rédaction",
        "questions": [
            {"id": "q1", "question": "Vos priorités ?", "answer": "Assainissement", "order": 1},
            {"id": "q2", "question": "Et ensuite ?", "answer": "Éducation", "order": 2},
        ],
        "category": "politique",
        "publishedAt": "2024-03-10T09:00:00Z",
        "thumbnail": "https://cdn.example/int-1.jpg",
    },
]

REPORTAGES = [
    {
        "id": "rep-1",
        "title": "Dakar en images",
        "description": "Photos du marché Sandaga",
        "photographer": {"id": "ph1", "name": "Moussa Ndiaye"},
        "location": {"id": "loc1", "name": "Dakar", "country": "Sénégal"},
        "images": [
            {"id": "img1", "url": "https://cdn.example/1.jpg", "caption": "Le marché", "order": 1},
            {"id": "img2", "url": "https://cdn.example/2.jpg", "caption": "Les vendeurs", "order": 2},
        ],
        "category": "social",
        "publishedAt": "2024-01-15T08:00:00Z",
        "coverImage": "https://cdn.example/cover.jpg",
    },
]

VIDEOS = [
    {
        "id": "vid-1",
        "title": "Décryptage du budget",
        "description": "Le budget expliqué",
        "thumbnail": "https://cdn.example/vid-1.jpg",
        "transcript": "",
        "chapters": [{"id": "c1", "title": "Introduction"}, {"id": "c2", "title": "Transparence fiscale"}],
        "category": "economique",
        "speaker": {"id": "s1", "name": "Fatou Sow"},
        "publishedAt": "2024-02-20T18:00:00Z",
    },
]

TESTIMONIALS = [
    {
        "id": "tem-1",
        "title": "Mon expérience",
        "content": "Des mois d'attente pour un document administratif",
        "author": {"id": "a1", "name": "Ibrahima", "location": "Thiès", "anonymous": True},
        "category": "experience",
        "createdAt": "2024-03-05T12:00:00Z",
    },
]


@pytest.fixture
def threads():
    return [Thread.model_validate(t) for t in THREADS]


@pytest.fixture
def interviews():
    return [Interview.model_validate(i) for i in INTERVIEWS]


@pytest.fixture
def reportages():
    return [PhotoReport.model_validate(r) for r in REPORTAGES]


@pytest.fixture
def videos():
    return [VideoAnalysis.model_validate(v) for v in VIDEOS]


@pytest.fixture
def testimonials():
    return [TestimonialItem.model_validate(t) for t in TESTIMONIALS]


@pytest.fixture
def feeds(threads, interviews, reportages, videos, testimonials):
    return ContentFeeds(
        threads=ContentFeed(items=threads),
        interviews=ContentFeed(items=interviews),
        reportages=ContentFeed(items=reportages),
        videos=ContentFeed(items=videos),
        testimonials=ContentFeed(items=testimonials),
    )


@pytest.fixture
def test_settings(tmp_path):
    s = Settings(data_dir=tmp_path / "data", content_dir=tmp_path / "content")
    s.ensure_dirs()
    return s


@pytest.fixture
def service(test_settings):
    """A service with an in-memory history store and nothing indexed yet."""
    return CityzenSearchService(test_settings, store=InMemoryStore())


@pytest.fixture
def indexed_service(service, feeds):
    service.index_feeds(feeds)
    return service
