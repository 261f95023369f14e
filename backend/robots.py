"""robots.txt generation from the robots_config directive table."""

import logging
import sqlite3
from typing import Iterable

from config import ORG_NAME, SITE_URL
from database import list_robots_directives
from models import RobotsDirectiveRow

logger = logging.getLogger(__name__)

SITEMAP_PATHS = [
    "sitemap.xml",
    "sitemap-services.xml",
    "sitemap-projects.xml",
    "sitemap-images.xml",
]


def _directive_name(directive: str) -> str:
    # "crawl-delay" -> "Crawl-delay"; only the first letter changes.
    return directive[:1].upper() + directive[1:]


def group_by_user_agent(directives: Iterable[RobotsDirectiveRow]) -> dict[str, list[RobotsDirectiveRow]]:
    """Partition non-sitemap directives by user agent, keeping first-seen agent order."""
    groups: dict[str, list[RobotsDirectiveRow]] = {}
    for row in directives:
        if row["directive"].lower() == "sitemap":
            continue
        groups.setdefault(row["user_agent"], []).append(row)
    return groups


def render_robots_txt(directives: Iterable[RobotsDirectiveRow], base_url: str = SITE_URL) -> str:
    """Render directive rows (already in priority order) as robots.txt text."""
    directives = list(directives)
    base_url = base_url.rstrip("/")

    lines = [
        f"# Robots.txt for {ORG_NAME}",
        "# Generated automatically",
        "",
    ]

    for user_agent, rows in group_by_user_agent(directives).items():
        lines.append(f"User-agent: {user_agent}")
        for row in rows:
            lines.append(f"{_directive_name(row['directive'])}: {row['value']}")
        lines.append("")

    sitemap_urls = [f"{base_url}/{path}" for path in SITEMAP_PATHS]
    for row in directives:
        if row["directive"].lower() == "sitemap":
            value = row["value"].strip()
            if value and value not in sitemap_urls:
                sitemap_urls.append(value)

    lines.extend(f"Sitemap: {url}" for url in sitemap_urls)
    return "\n".join(lines) + "\n"


def generate_robots_txt(conn: sqlite3.Connection, base_url: str = SITE_URL) -> str:
    """Load active directives and render robots.txt. Store errors propagate."""
    directives = list_robots_directives(conn)
    logger.debug("Rendering robots.txt from %d directives", len(directives))
    return render_robots_txt(directives, base_url)
