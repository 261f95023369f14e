"""SQLite database setup and SEO data storage.

Tables:
- seo_configurations: per-page meta overrides keyed by (page_type, page_id)
- robots_config: robots.txt directive rows
- services / projects: content listings feeding the sitemaps

Every read/write takes an explicit connection; the HTTP layer opens one per request.
"""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from config import DB_PATH
from models import ContentRow, RobotsDirectiveRow, SEOConfigRow

SCHEMA = """
CREATE TABLE IF NOT EXISTS seo_configurations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    page_type TEXT NOT NULL,
    page_id TEXT,
    title TEXT,
    description TEXT,
    keywords TEXT,
    canonical_url TEXT,
    og_title TEXT,
    og_description TEXT,
    og_image TEXT,
    og_type TEXT,
    twitter_card TEXT,
    twitter_title TEXT,
    twitter_description TEXT,
    twitter_image TEXT,
    structured_data TEXT,
    custom_meta TEXT,
    meta_robots TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_seo_page_type ON seo_configurations (page_type, page_id);

CREATE TABLE IF NOT EXISTS robots_config (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_agent TEXT NOT NULL DEFAULT '*',
    directive TEXT NOT NULL,
    value TEXT NOT NULL,
    priority INTEGER NOT NULL DEFAULT 100,
    is_active INTEGER NOT NULL DEFAULT 1,
    comment TEXT
);

CREATE TABLE IF NOT EXISTS services (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT,
    category TEXT,
    image_url TEXT,
    images TEXT,
    active INTEGER NOT NULL DEFAULT 1,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS projects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT,
    location TEXT,
    start_date TEXT,
    end_date TEXT,
    image_url TEXT,
    images TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    updated_at TEXT NOT NULL
);
"""

CONFIG_FIELDS = (
    "page_type",
    "page_id",
    "title",
    "description",
    "keywords",
    "canonical_url",
    "og_title",
    "og_description",
    "og_image",
    "og_type",
    "twitter_card",
    "twitter_title",
    "twitter_description",
    "twitter_image",
    "structured_data",
    "custom_meta",
    "meta_robots",
    "is_active",
)
_JSON_CONFIG_FIELDS = {"keywords", "structured_data", "custom_meta"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_connection(db_path: Path | str = DB_PATH) -> sqlite3.Connection:
    """Return a connection to the SQLite database."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables if they do not exist."""
    conn.executescript(SCHEMA)
    conn.commit()


def _loads(raw: str | None):
    if raw is None or raw == "":
        return None
    return json.loads(raw)


def _config_from_row(row: sqlite3.Row) -> SEOConfigRow:
    data = dict(row)
    for key in _JSON_CONFIG_FIELDS:
        data[key] = _loads(data.get(key))
    data["is_active"] = bool(data["is_active"])
    return data  # type: ignore[return-value]


def _config_params(fields: dict) -> dict:
    params: dict = {}
    for key in CONFIG_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key in _JSON_CONFIG_FIELDS and value is not None:
            value = json.dumps(value)
        elif key == "is_active":
            value = 1 if value else 0
        params[key] = value
    return params


# ---------------------------------------------------------------------------
# SEO configurations
# ---------------------------------------------------------------------------


def get_seo_configuration(
    conn: sqlite3.Connection, page_type: str, page_id: str | None = None
) -> SEOConfigRow | None:
    """
    Return the most specific active configuration for a page.

    A row matching (page_type, page_id) wins; otherwise the page-type row is
    used, preferring one stored without a page_id.
    """
    row = conn.execute(
        """
        SELECT * FROM seo_configurations
        WHERE page_type = ? AND is_active = 1 AND (page_id IS NULL OR page_id = ?)
        ORDER BY (page_id IS NOT NULL AND page_id = ?) DESC, (page_id IS NULL) DESC, id ASC
        LIMIT 1
        """,
        (page_type, page_id or "", page_id or ""),
    ).fetchone()
    if row is None and not page_id:
        row = conn.execute(
            """
            SELECT * FROM seo_configurations
            WHERE page_type = ? AND is_active = 1
            ORDER BY id ASC
            LIMIT 1
            """,
            (page_type,),
        ).fetchone()
    if row is None:
        return None
    return _config_from_row(row)


def list_seo_configurations(conn: sqlite3.Connection) -> list[SEOConfigRow]:
    """Return active configurations, most recently updated first."""
    rows = conn.execute(
        "SELECT * FROM seo_configurations WHERE is_active = 1 ORDER BY updated_at DESC, id DESC"
    ).fetchall()
    return [_config_from_row(row) for row in rows]


def create_seo_configuration(conn: sqlite3.Connection, fields: dict) -> SEOConfigRow:
    """Insert a configuration and return the stored row."""
    params = _config_params(fields)
    params.setdefault("is_active", 1)
    timestamp = _now()
    params["created_at"] = timestamp
    params["updated_at"] = timestamp

    columns = ", ".join(params)
    placeholders = ", ".join(f":{key}" for key in params)
    cursor = conn.execute(
        f"INSERT INTO seo_configurations ({columns}) VALUES ({placeholders})",
        params,
    )
    conn.commit()
    row = conn.execute("SELECT * FROM seo_configurations WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return _config_from_row(row)


def update_seo_configuration(conn: sqlite3.Connection, config_id: int, fields: dict) -> SEOConfigRow | None:
    """Apply a partial update. Returns None when the id does not exist."""
    fields = {key: value for key, value in fields.items() if not (key in ("page_type", "is_active") and value is None)}
    params = _config_params(fields)
    params["updated_at"] = _now()
    assignments = ", ".join(f"{key} = :{key}" for key in params)
    params["id"] = config_id

    cursor = conn.execute(f"UPDATE seo_configurations SET {assignments} WHERE id = :id", params)
    conn.commit()
    if cursor.rowcount == 0:
        return None
    row = conn.execute("SELECT * FROM seo_configurations WHERE id = ?", (config_id,)).fetchone()
    return _config_from_row(row)


# ---------------------------------------------------------------------------
# Robots directives
# ---------------------------------------------------------------------------


def list_robots_directives(conn: sqlite3.Connection) -> list[RobotsDirectiveRow]:
    """Return active directives in ascending priority (ties by insertion order)."""
    rows = conn.execute(
        """
        SELECT id, user_agent, directive, value, priority, is_active, comment
        FROM robots_config
        WHERE is_active = 1
        ORDER BY priority ASC, id ASC
        """
    ).fetchall()
    out: list[RobotsDirectiveRow] = []
    for row in rows:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        out.append(data)  # type: ignore[arg-type]
    return out


def create_robots_directive(
    conn: sqlite3.Connection,
    *,
    directive: str,
    value: str,
    user_agent: str = "*",
    priority: int = 100,
    is_active: bool = True,
    comment: str | None = None,
) -> RobotsDirectiveRow:
    cursor = conn.execute(
        """
        INSERT INTO robots_config (user_agent, directive, value, priority, is_active, comment)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_agent, directive, value, priority, 1 if is_active else 0, comment),
    )
    conn.commit()
    return {
        "id": cursor.lastrowid,
        "user_agent": user_agent,
        "directive": directive,
        "value": value,
        "priority": priority,
        "is_active": is_active,
        "comment": comment,
    }


# ---------------------------------------------------------------------------
# Content listings
# ---------------------------------------------------------------------------


def _content_from_row(row: sqlite3.Row) -> ContentRow:
    data = dict(row)
    data["images"] = _loads(data.get("images")) or []
    data.pop("active", None)
    data.pop("is_active", None)
    return data  # type: ignore[return-value]


def list_active_services(conn: sqlite3.Connection) -> list[ContentRow]:
    rows = conn.execute(
        """
        SELECT id, title, description, category, image_url, images, updated_at
        FROM services
        WHERE active = 1
        ORDER BY id
        """
    ).fetchall()
    return [_content_from_row(row) for row in rows]


def list_active_projects(conn: sqlite3.Connection) -> list[ContentRow]:
    rows = conn.execute(
        """
        SELECT id, title, description, location, start_date, end_date, image_url, images, updated_at
        FROM projects
        WHERE is_active = 1
        ORDER BY id
        """
    ).fetchall()
    return [_content_from_row(row) for row in rows]


def get_service(conn: sqlite3.Connection, service_id: int | str) -> ContentRow | None:
    row = conn.execute(
        """
        SELECT id, title, description, category, image_url, images, updated_at
        FROM services
        WHERE id = ? AND active = 1
        """,
        (service_id,),
    ).fetchone()
    return _content_from_row(row) if row is not None else None


def get_project(conn: sqlite3.Connection, project_id: int | str) -> ContentRow | None:
    row = conn.execute(
        """
        SELECT id, title, description, location, start_date, end_date, image_url, images, updated_at
        FROM projects
        WHERE id = ? AND is_active = 1
        """,
        (project_id,),
    ).fetchone()
    return _content_from_row(row) if row is not None else None


def insert_service(
    conn: sqlite3.Connection,
    *,
    title: str,
    description: str | None = None,
    category: str | None = None,
    image_url: str | None = None,
    images: list[str | None] | None = None,
    active: bool = True,
    updated_at: str | None = None,
) -> int:
    """Store a service listing and return its id."""
    cursor = conn.execute(
        """
        INSERT INTO services (title, description, category, image_url, images, active, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            title,
            description,
            category,
            image_url,
            json.dumps(images or []),
            1 if active else 0,
            updated_at or _now(),
        ),
    )
    conn.commit()
    return cursor.lastrowid


def insert_project(
    conn: sqlite3.Connection,
    *,
    title: str,
    description: str | None = None,
    location: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    image_url: str | None = None,
    images: list[str | None] | None = None,
    is_active: bool = True,
    updated_at: str | None = None,
) -> int:
    """Store a project listing and return its id."""
    cursor = conn.execute(
        """
        INSERT INTO projects (
            title, description, location, start_date, end_date, image_url, images, is_active, updated_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            title,
            description,
            location,
            start_date,
            end_date,
            image_url,
            json.dumps(images or []),
            1 if is_active else 0,
            updated_at or _now(),
        ),
    )
    conn.commit()
    return cursor.lastrowid
