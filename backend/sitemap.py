"""Sitemap entry collection and XML rendering.

Entries are gathered from static routes plus the active service/project
listings, then rendered into one of the sitemap-protocol variants:
standard, image, video or news. All text goes through `escape_xml`.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable

from config import ORG_NAME, REGION, SITE_URL
from database import list_active_projects, list_active_services
from models import ContentRow, SitemapEntry

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
VIDEO_NS = "http://www.google.com/schemas/sitemap-video/1.1"
NEWS_NS = "http://www.google.com/schemas/sitemap-news/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"

# Sitemap types served at /sitemap*.xml; the key is the request type, the value the renderer variant.
SITEMAP_TYPES = {
    "main": "standard",
    "services": "standard",
    "projects": "standard",
    "images": "image",
    "videos": "video",
    "news": "news",
}

# Static routes: (path, change frequency, priority)
STATIC_ROUTES = [
    ("", "weekly", 1.0),
    ("/about", "monthly", 0.8),
    ("/services", "weekly", 0.9),
    ("/projects", "weekly", 0.9),
    ("/contact", "monthly", 0.7),
]

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(text: object) -> str:
    """Escape the five XML special characters, ampersand first."""
    value = str(text)
    for raw, entity in _XML_ESCAPES:
        value = value.replace(raw, entity)
    return value


def format_priority(priority: float) -> str:
    """Render a priority with exactly one decimal digit (0.9 -> '0.9', 1 -> '1.0')."""
    return str(Decimal(priority).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_lastmod(value: datetime) -> str:
    """Date-only W3C form (YYYY-MM-DD), in UTC for aware datetimes."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


class XmlWriter:
    """Line-oriented XML builder. Text content and attributes are always escaped."""

    def __init__(self) -> None:
        self._lines: list[str] = ['<?xml version="1.0" encoding="UTF-8"?>']
        self._stack: list[str] = []

    def _indent(self) -> str:
        return "  " * len(self._stack)

    @staticmethod
    def _attrs(attrs: dict[str, str] | None) -> str:
        if not attrs:
            return ""
        return "".join(f' {name}="{escape_xml(value)}"' for name, value in attrs.items())

    def open(self, tag: str, attrs: dict[str, str] | None = None) -> "XmlWriter":
        self._lines.append(f"{self._indent()}<{tag}{self._attrs(attrs)}>")
        self._stack.append(tag)
        return self

    def close(self) -> "XmlWriter":
        tag = self._stack.pop()
        self._lines.append(f"{self._indent()}</{tag}>")
        return self

    def element(self, tag: str, text: object) -> "XmlWriter":
        self._lines.append(f"{self._indent()}<{tag}>{escape_xml(text)}</{tag}>")
        return self

    def empty(self, tag: str, attrs: dict[str, str] | None = None) -> "XmlWriter":
        self._lines.append(f"{self._indent()}<{tag}{self._attrs(attrs)}/>")
        return self

    def to_string(self) -> str:
        if self._stack:
            raise ValueError(f"Unclosed XML elements: {self._stack}")
        return "\n".join(self._lines)


def _urlset(extra_namespaces: dict[str, str] | None = None) -> XmlWriter:
    attrs = {"xmlns": SITEMAP_NS}
    for prefix, uri in (extra_namespaces or {}).items():
        attrs[f"xmlns:{prefix}"] = uri
    return XmlWriter().open("urlset", attrs)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_standard(entries: Iterable[SitemapEntry]) -> str:
    entries = list(entries)
    has_alternates = any(entry.alternates for entry in entries)
    xml = _urlset({"xhtml": XHTML_NS} if has_alternates else None)

    for entry in entries:
        xml.open("url")
        xml.element("loc", entry.url)
        xml.element("lastmod", format_lastmod(entry.last_modified))
        if entry.change_frequency:
            xml.element("changefreq", entry.change_frequency)
        if entry.priority is not None:
            xml.element("priority", format_priority(entry.priority))
        for alternate in entry.alternates:
            xml.empty(
                "xhtml:link",
                {"rel": "alternate", "hreflang": alternate.hreflang, "href": alternate.href},
            )
        xml.close()

    return xml.close().to_string()


def render_images(entries: Iterable[SitemapEntry]) -> str:
    xml = _urlset({"image": IMAGE_NS})

    for entry in entries:
        if not entry.images:
            continue
        xml.open("url")
        xml.element("loc", entry.url)
        for image in entry.images:
            xml.open("image:image")
            xml.element("image:loc", image)
            xml.close()
        xml.close()

    return xml.close().to_string()


def render_videos(entries: Iterable[SitemapEntry]) -> str:
    xml = _urlset({"video": VIDEO_NS})

    for entry in entries:
        if not entry.videos:
            continue
        xml.open("url")
        xml.element("loc", entry.url)
        for video in entry.videos:
            xml.open("video:video")
            if video.thumbnail_url:
                xml.element("video:thumbnail_loc", video.thumbnail_url)
            if video.title:
                xml.element("video:title", video.title)
            if video.description:
                xml.element("video:description", video.description)
            if video.duration_seconds is not None:
                xml.element("video:duration", int(video.duration_seconds))
            xml.close()
        xml.close()

    return xml.close().to_string()


def render_news(entries: Iterable[SitemapEntry]) -> str:
    xml = _urlset({"news": NEWS_NS})

    for entry in entries:
        if entry.news is None:
            continue
        xml.open("url")
        xml.element("loc", entry.url)
        xml.open("news:news")
        xml.open("news:publication")
        xml.element("news:name", ORG_NAME)
        xml.element("news:language", REGION["news_language"])
        xml.close()
        xml.element("news:publication_date", entry.news.publish_date)
        xml.element("news:title", entry.news.title)
        if entry.news.keywords:
            xml.element("news:keywords", ", ".join(entry.news.keywords))
        xml.close()
        xml.close()

    return xml.close().to_string()


RENDERERS: dict[str, Callable[[Iterable[SitemapEntry]], str]] = {
    "standard": render_standard,
    "image": render_images,
    "video": render_videos,
    "news": render_news,
}


def render_sitemap(entries: Iterable[SitemapEntry], variant: str = "standard") -> str:
    """Render entries for a variant; unknown variants use the standard renderer."""
    renderer = RENDERERS.get(variant, render_standard)
    return renderer(entries)


# ---------------------------------------------------------------------------
# Entry collection
# ---------------------------------------------------------------------------


def _parse_timestamp(value: str | datetime | None) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.now(timezone.utc)
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _content_images(row: ContentRow) -> tuple[str, ...]:
    candidates = [row.get("image_url"), *(row.get("images") or [])]
    return tuple(image for image in candidates if image)


def _content_entries(rows: list[ContentRow], base_url: str, path: str, priority: float) -> list[SitemapEntry]:
    return [
        SitemapEntry(
            url=f"{base_url}/{path}/{row['id']}",
            last_modified=_parse_timestamp(row.get("updated_at")),
            change_frequency="monthly",
            priority=priority,
            images=_content_images(row),
        )
        for row in rows
    ]


def collect_entries(conn: sqlite3.Connection, sitemap_type: str = "main", base_url: str = SITE_URL) -> list[SitemapEntry]:
    """
    Gather sitemap entries for a sitemap type.

    Static routes come first (main only), then services (main/services/images),
    then projects (main/projects/images). Store errors propagate.
    """
    base_url = base_url.rstrip("/")
    entries: list[SitemapEntry] = []
    now = datetime.now(timezone.utc)
    include_listings = sitemap_type in ("main", "images")

    if sitemap_type == "main":
        for path, change_frequency, priority in STATIC_ROUTES:
            entries.append(
                SitemapEntry(
                    url=f"{base_url}{path}",
                    last_modified=now,
                    change_frequency=change_frequency,
                    priority=priority,
                )
            )

    if include_listings or sitemap_type == "services":
        entries.extend(_content_entries(list_active_services(conn), base_url, "services", 0.7))

    if include_listings or sitemap_type == "projects":
        entries.extend(_content_entries(list_active_projects(conn), base_url, "projects", 0.6))

    logger.debug("Collected %d sitemap entries for type=%s", len(entries), sitemap_type)
    return entries


def generate_sitemap(conn: sqlite3.Connection, sitemap_type: str = "main", base_url: str = SITE_URL) -> str:
    """Collect entries for `sitemap_type` and render them with the matching variant."""
    entries = collect_entries(conn, sitemap_type, base_url)
    return render_sitemap(entries, SITEMAP_TYPES.get(sitemap_type, "standard"))
