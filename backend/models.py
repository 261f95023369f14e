"""Data models and types used across the backend.

Database table definitions are in database.py.
API request/response schemas live in schemas.py.
Types for sitemap entries, store rows and analysis output live here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, TypedDict

ChangeFrequency = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]
Severity = Literal["error", "warning", "info"]


@dataclass(frozen=True)
class VideoInfo:
    thumbnail_url: str | None = None
    title: str | None = None
    description: str | None = None
    duration_seconds: int | None = None


@dataclass(frozen=True)
class NewsInfo:
    publish_date: str
    title: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class Alternate:
    hreflang: str
    href: str


@dataclass(frozen=True)
class SitemapEntry:
    """One candidate URL plus crawl hints. Built per request, never persisted."""

    url: str
    last_modified: datetime
    change_frequency: ChangeFrequency | None = None
    priority: float | None = None
    images: tuple[str, ...] = ()
    videos: tuple[VideoInfo, ...] = ()
    news: NewsInfo | None = None
    alternates: tuple[Alternate, ...] = ()

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Sitemap entry url must not be empty")
        if self.priority is not None and not 0.0 <= self.priority <= 1.0:
            raise ValueError(f"Sitemap priority out of range: {self.priority}")


class SEOConfigRow(TypedDict):
    """Active row from seo_configurations, JSON columns already decoded."""

    id: int
    page_type: str
    page_id: str | None
    title: str | None
    description: str | None
    keywords: list[str] | None
    canonical_url: str | None
    og_title: str | None
    og_description: str | None
    og_image: str | None
    og_type: str | None
    twitter_card: str | None
    twitter_title: str | None
    twitter_description: str | None
    twitter_image: str | None
    structured_data: dict | None
    custom_meta: dict | None
    meta_robots: str | None
    is_active: bool
    created_at: str
    updated_at: str


class RobotsDirectiveRow(TypedDict):
    id: int
    user_agent: str
    directive: str
    value: str
    priority: int
    is_active: bool
    comment: str | None


class ContentRow(TypedDict, total=False):
    """Service or project listing row."""

    id: int
    title: str
    description: str | None
    category: str | None
    location: str | None
    start_date: str | None
    end_date: str | None
    image_url: str | None
    images: list[str]
    updated_at: str


class AnalysisIssue(TypedDict):
    severity: Severity
    message: str


class AnalysisResult(TypedDict):
    """Output of the page analyzer. Issues follow check execution order."""

    score: int
    issues: list[AnalysisIssue]
    recommendations: list[str]
