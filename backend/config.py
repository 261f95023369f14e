"""
Runtime settings for the SEO engine.

Values come from a .env file in the backend root (loaded with python-dotenv)
and fall back to the defaults below:

SITE_URL=https://akibeks.co.ke
SEO_DB_PATH=/path/to/seo.db
SEO_LOG_LEVEL=INFO
SEO_ORG_NAME=AKIBEKS Engineering Solutions
SEO_HOST=127.0.0.1
SEO_PORT=8000
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

DEFAULT_SITE_URL = "https://akibeks.co.ke"

SITE_URL = (os.getenv("SITE_URL", "").strip() or DEFAULT_SITE_URL).rstrip("/")
DB_PATH = Path(os.getenv("SEO_DB_PATH", "").strip() or Path(__file__).parent / "seo.db")
LOG_LEVEL = os.getenv("SEO_LOG_LEVEL", "INFO").strip().upper() or "INFO"
SITEMAP_CACHE_SECONDS = int(os.getenv("SEO_SITEMAP_CACHE_SECONDS", "86400"))
API_CACHE_SECONDS = int(os.getenv("SEO_API_CACHE_SECONDS", "3600"))
HOST = os.getenv("SEO_HOST", "127.0.0.1")
PORT = int(os.getenv("SEO_PORT", "8000"))

ORG_NAME = os.getenv("SEO_ORG_NAME", "").strip() or "AKIBEKS Engineering Solutions"

# Single-locale regional profile shared by meta defaults, schemas and the analyzer.
REGION = {
    "name": "Kenya",
    "country_code": "KE",
    "locale": "en-KE",
    "news_language": "en",
    "capital": "Nairobi",
    "capital_region": "Nairobi County",
    "street_address": "Nairobi CBD",
    "postal_code": "00100",
    "latitude": -1.286389,
    "longitude": 36.817223,
    "service_radius_m": "500000",
    "telephone": "+254-700-000-000",
    "email": "info@akibeks.co.ke",
    "languages": ["en", "sw"],
    "founding_date": "2020",
    "same_as": [
        "https://facebook.com/akibeksengineering",
        "https://twitter.com/akibekseng",
        "https://linkedin.com/company/akibeks",
        "https://instagram.com/akibekseng",
    ],
    # Title check looks for `keyword`; body check matches any of `terms`.
    "keyword": "kenya",
    "terms": ["kenya", "nairobi", "mombasa", "kisumu", "nakuru", "eldoret"],
}
