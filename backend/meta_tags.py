"""Meta tag resolution, head-tag rendering and regional landing meta.

Resolution merges three layers, later layers winning field by field:

1. regional defaults (`default_meta_bundle`)
2. the most specific active stored configuration for the page
3. caller overrides

Missing configuration fields fall back to the defaults. `structured_data` and
`custom_meta` from configuration are merged key by key into the defaults;
overrides replace whole top-level fields, nested objects included.
"""

import html
import json
import sqlite3
from typing import Any

from config import ORG_NAME, REGION, SITE_URL
from database import get_seo_configuration
from models import SEOConfigRow
from schemas import OpenGraph, RegionalLandingMeta, SEOMetaBundle, TwitterCard
from structured_data import SCHEMA_CONTEXT, organization_schema

DEFAULT_KEYWORDS = [
    f"construction {REGION['name']}",
    "engineering services",
    f"building contractors {REGION['capital']}",
    f"renovation {REGION['name']}",
    "infrastructure development",
]

# Override keys that cannot be cleared; a null override for them is ignored.
_REQUIRED_FIELDS = {"title", "description", "keywords", "open_graph", "twitter", "structured_data", "custom_meta"}


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def default_meta_bundle(base_url: str = SITE_URL) -> SEOMetaBundle:
    """Hardcoded regional defaults, the bottom layer of every resolution."""
    return SEOMetaBundle(
        title=f"{ORG_NAME} - Expert Construction Services in {REGION['name']}",
        description=(
            f"Leading construction and engineering company in {REGION['name']} providing quality "
            "building, renovation, and infrastructure services across all 47 counties."
        ),
        keywords=list(DEFAULT_KEYWORDS),
        robots="index,follow",
        open_graph=OpenGraph(type="website", url=base_url),
        twitter=TwitterCard(card="summary_large_image"),
        structured_data=organization_schema(base_url),
        custom_meta={
            "geo.region": REGION["country_code"],
            "geo.placename": REGION["name"],
            "language": REGION["locale"],
            "author": ORG_NAME,
            "publisher": ORG_NAME,
            "coverage": REGION["name"],
            "distribution": "global",
        },
    )


def apply_configuration(defaults: SEOMetaBundle, config: SEOConfigRow | None) -> SEOMetaBundle:
    """Layer a stored configuration over the defaults."""
    if config is None:
        return defaults

    title = _first(config.get("title"), defaults.title)
    description = _first(config.get("description"), defaults.description)

    open_graph = OpenGraph(
        title=_first(config.get("og_title"), config.get("title"), defaults.open_graph.title),
        description=_first(config.get("og_description"), config.get("description"), defaults.open_graph.description),
        image=_first(config.get("og_image"), defaults.open_graph.image),
        type=_first(config.get("og_type"), defaults.open_graph.type),
        url=defaults.open_graph.url,
    )
    twitter = TwitterCard(
        card=_first(config.get("twitter_card"), defaults.twitter.card),
        title=_first(config.get("twitter_title"), config.get("title"), defaults.twitter.title),
        description=_first(
            config.get("twitter_description"), config.get("description"), defaults.twitter.description
        ),
        image=_first(config.get("twitter_image"), config.get("og_image"), defaults.twitter.image),
    )

    structured_data = defaults.structured_data
    if isinstance(structured_data, dict):
        structured_data = {**structured_data, **(config.get("structured_data") or {})}

    return SEOMetaBundle(
        title=title,
        description=description,
        keywords=_first(config.get("keywords"), defaults.keywords),
        canonical=_first(config.get("canonical_url"), defaults.canonical),
        robots=_first(config.get("meta_robots"), defaults.robots),
        open_graph=open_graph,
        twitter=twitter,
        structured_data=structured_data,
        custom_meta={**defaults.custom_meta, **(config.get("custom_meta") or {})},
    )


def apply_overrides(bundle: SEOMetaBundle, overrides: dict[str, Any] | None) -> SEOMetaBundle:
    """Replace top-level fields with caller overrides."""
    if not overrides:
        return bundle
    updates = {
        key: value
        for key, value in overrides.items()
        if key in SEOMetaBundle.model_fields and not (value is None and key in _REQUIRED_FIELDS)
    }
    if not updates:
        return bundle
    return SEOMetaBundle.model_validate({**bundle.model_dump(), **updates})


def resolve_meta_tags(
    conn: sqlite3.Connection,
    page_type: str,
    page_id: str | None = None,
    overrides: dict[str, Any] | None = None,
    base_url: str = SITE_URL,
) -> SEOMetaBundle:
    """Build the meta bundle for a page. No stored configuration is not an error."""
    config = get_seo_configuration(conn, page_type, page_id)
    bundle = apply_configuration(default_meta_bundle(base_url.rstrip("/")), config)
    return apply_overrides(bundle, overrides)


# ---------------------------------------------------------------------------
# Head tags
# ---------------------------------------------------------------------------


def _attr(value: object) -> str:
    return html.escape(str(value), quote=True)


def _json_ld(data: Any) -> str:
    # "</" inside a script body would end the tag early.
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


def render_head_tags(bundle: SEOMetaBundle) -> str:
    """Render a bundle as <head> markup, one tag per line. Absent fields emit nothing."""
    tags = [
        f"<title>{html.escape(bundle.title)}</title>",
        f'<meta name="description" content="{_attr(bundle.description)}">',
    ]
    if bundle.keywords:
        tags.append(f'<meta name="keywords" content="{_attr(", ".join(bundle.keywords))}">')
    if bundle.canonical:
        tags.append(f'<link rel="canonical" href="{_attr(bundle.canonical)}">')
    if bundle.robots:
        tags.append(f'<meta name="robots" content="{_attr(bundle.robots)}">')

    for key, value in bundle.open_graph.model_dump().items():
        if value:
            tags.append(f'<meta property="og:{key}" content="{_attr(value)}">')
    for key, value in bundle.twitter.model_dump().items():
        if value:
            tags.append(f'<meta name="twitter:{key}" content="{_attr(value)}">')

    for name, value in bundle.custom_meta.items():
        tags.append(f'<meta name="{_attr(name)}" content="{_attr(value)}">')

    documents = bundle.structured_data if isinstance(bundle.structured_data, list) else [bundle.structured_data]
    for document in documents:
        if document:
            tags.append(f'<script type="application/ld+json">{_json_ld(document)}</script>')

    return "\n".join(tags)


# ---------------------------------------------------------------------------
# Regional landing pages
# ---------------------------------------------------------------------------


def regional_landing_meta(
    county: str | None = None,
    city: str | None = None,
    service_type: str | None = None,
) -> RegionalLandingMeta:
    """Meta for a location landing page; place falls back city -> county -> region."""
    place = city or county or REGION["name"]
    service = service_type or "Construction Services"

    return RegionalLandingMeta(
        title=f"{service} in {place} - {ORG_NAME}",
        description=(
            f"Professional {service_type or 'construction and engineering'} services in {place}. "
            f"Licensed contractors serving {county or 'all counties in ' + REGION['name']} "
            "with quality building solutions."
        ),
        keywords=[
            f"{service_type or 'construction'} {place}",
            f"contractors {place}",
            f"building services {place}",
            f"engineering {place}",
            "NCA licensed contractors",
            f"{REGION['name']} construction company",
        ],
        structured_data=[
            {
                "@context": SCHEMA_CONTEXT,
                "@type": "LocalBusiness",
                "name": f"{ORG_NAME} - {place}",
                "description": f"Professional construction services in {place}",
                "address": {
                    "@type": "PostalAddress",
                    "addressLocality": city or REGION["capital"],
                    "addressRegion": county or REGION["capital_region"],
                    "addressCountry": REGION["country_code"],
                },
                "areaServed": {"@type": "State", "name": county or REGION["name"]},
                "serviceType": service,
            }
        ],
    )
