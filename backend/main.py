"""SEO engine API – FastAPI app serving sitemaps, robots.txt, meta tags, structured data and page analysis."""

import logging
import sqlite3
from typing import Any, Iterator

import uvicorn
from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from analyzer import analyze_page
from config import API_CACHE_SECONDS, HOST, LOG_LEVEL, PORT, SITE_URL, SITEMAP_CACHE_SECONDS
from database import (
    create_robots_directive,
    create_seo_configuration,
    get_connection,
    get_project,
    get_seo_configuration,
    get_service,
    init_db,
    list_robots_directives,
    list_seo_configurations,
    update_seo_configuration,
)
from meta_tags import regional_landing_meta, render_head_tags, resolve_meta_tags
from robots import generate_robots_txt
from schemas import (
    AnalysisResultSchema,
    AnalyzeRequest,
    ApiResponse,
    MetaOverrides,
    RegionalLandingMeta,
    RobotsDirectiveCreate,
    RobotsDirectiveResponse,
    SEOConfigCreate,
    SEOConfigResponse,
    SEOConfigUpdate,
    SEOMetaBundle,
)
from sitemap import generate_sitemap
from structured_data import compose_structured_data

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Engine API",
    description="Sitemaps, robots.txt, meta tags, structured data and page SEO analysis",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SITEMAP_CACHE_CONTROL = f"public, max-age={SITEMAP_CACHE_SECONDS}, s-maxage={SITEMAP_CACHE_SECONDS}"
API_CACHE_CONTROL = f"public, max-age={API_CACHE_SECONDS}, s-maxage={API_CACHE_SECONDS}"

# Failures while reading or decoding stored data: sqlite errors, bad JSON
# columns, unparseable timestamps and rows that fail model validation.
STORE_ERRORS = (sqlite3.Error, ValueError)


def get_db() -> Iterator[sqlite3.Connection]:
    """One connection per request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    if request.url.path == "/api/seo/analyze":
        return _error(400, "URL and content are required")
    return _error(400, "Invalid request body")


@app.on_event("startup")
def startup() -> None:
    conn = get_connection()
    try:
        init_db(conn)
    finally:
        conn.close()
    logger.info("SEO engine ready for %s", SITE_URL)


# ---------------------------------------------------------------------------
# Public SEO files
# ---------------------------------------------------------------------------


def _sitemap_response(conn: sqlite3.Connection, sitemap_type: str) -> Response:
    try:
        xml = generate_sitemap(conn, sitemap_type)
    except STORE_ERRORS:
        logger.exception("Error generating %s sitemap", sitemap_type)
        return JSONResponse(status_code=500, content={"error": f"Failed to generate {sitemap_type} sitemap"})
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


@app.get("/sitemap.xml")
def sitemap_main(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "main")


@app.get("/sitemap-services.xml")
def sitemap_services(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "services")


@app.get("/sitemap-projects.xml")
def sitemap_projects(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "projects")


@app.get("/sitemap-images.xml")
def sitemap_images(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "images")


@app.get("/sitemap-videos.xml")
def sitemap_videos(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "videos")


@app.get("/sitemap-news.xml")
def sitemap_news(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    return _sitemap_response(conn, "news")


@app.get("/robots.txt")
def robots_txt(conn: sqlite3.Connection = Depends(get_db)) -> Response:
    try:
        text = generate_robots_txt(conn)
    except STORE_ERRORS:
        logger.exception("Error generating robots.txt")
        return JSONResponse(status_code=500, content={"error": "Failed to generate robots.txt"})
    return Response(
        content=text,
        media_type="text/plain",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


# ---------------------------------------------------------------------------
# Meta tags and structured data
# ---------------------------------------------------------------------------


@app.get("/api/seo/meta/{page_type}", response_model=ApiResponse[SEOMetaBundle])
@app.get("/api/seo/meta/{page_type}/{page_id}", response_model=ApiResponse[SEOMetaBundle])
@app.post("/api/seo/meta/{page_type}", response_model=ApiResponse[SEOMetaBundle])
@app.post("/api/seo/meta/{page_type}/{page_id}", response_model=ApiResponse[SEOMetaBundle])
def meta_tags(
    page_type: str,
    response: Response,
    page_id: str | None = None,
    overrides: MetaOverrides | None = Body(default=None),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Resolve defaults -> stored configuration -> overrides into one meta bundle."""
    try:
        bundle = resolve_meta_tags(
            conn,
            page_type,
            page_id,
            overrides.model_dump(exclude_unset=True) if overrides is not None else None,
        )
    except STORE_ERRORS:
        logger.exception("Error generating meta tags for %s/%s", page_type, page_id)
        return _error(500, "Failed to generate meta tags")

    response.headers["Cache-Control"] = API_CACHE_CONTROL
    return ApiResponse[SEOMetaBundle](success=True, data=bundle)


@app.get("/api/seo/head/{page_type}", response_class=HTMLResponse)
@app.get("/api/seo/head/{page_type}/{page_id}", response_class=HTMLResponse)
@app.post("/api/seo/head/{page_type}", response_class=HTMLResponse)
@app.post("/api/seo/head/{page_type}/{page_id}", response_class=HTMLResponse)
def head_tags(
    page_type: str,
    page_id: str | None = None,
    overrides: MetaOverrides | None = Body(default=None),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Resolved meta bundle rendered as <head> markup."""
    try:
        bundle = resolve_meta_tags(
            conn,
            page_type,
            page_id,
            overrides.model_dump(exclude_unset=True) if overrides is not None else None,
        )
    except STORE_ERRORS:
        logger.exception("Error rendering head tags for %s/%s", page_type, page_id)
        return _error(500, "Failed to render head tags")

    return HTMLResponse(content=render_head_tags(bundle), headers={"Cache-Control": API_CACHE_CONTROL})


@app.get("/api/seo/structured-data/{page_type}", response_model=ApiResponse[list[dict[str, Any]]])
@app.get("/api/seo/structured-data/{page_type}/{page_id}", response_model=ApiResponse[list[dict[str, Any]]])
@app.post("/api/seo/structured-data/{page_type}", response_model=ApiResponse[list[dict[str, Any]]])
@app.post("/api/seo/structured-data/{page_type}/{page_id}", response_model=ApiResponse[list[dict[str, Any]]])
def structured_data(
    page_type: str,
    response: Response,
    page_id: str | None = None,
    data: dict[str, Any] | None = Body(default=None),
    conn: sqlite3.Connection = Depends(get_db),
):
    """
    Ordered JSON-LD list for a page.

    service/project pages with a page_id and no body are looked up in the store.
    """
    try:
        if not data and page_id:
            if page_type == "service":
                data = get_service(conn, page_id)
            elif page_type == "project":
                data = get_project(conn, page_id)
        schemas = compose_structured_data(page_type, page_id, data)
    except STORE_ERRORS:
        logger.exception("Error loading %s %s for structured data", page_type, page_id)
        return _error(500, "Failed to generate structured data")

    response.headers["Cache-Control"] = API_CACHE_CONTROL
    return ApiResponse[list[dict[str, Any]]](success=True, data=schemas)


@app.get("/api/seo/region", response_model=ApiResponse[RegionalLandingMeta])
def regional_meta(
    response: Response,
    county: str | None = None,
    city: str | None = None,
    service_type: str | None = None,
):
    """Location landing-page meta (title, description, keywords, LocalBusiness JSON-LD)."""
    meta = regional_landing_meta(county=county, city=city, service_type=service_type)
    response.headers["Cache-Control"] = API_CACHE_CONTROL
    return ApiResponse[RegionalLandingMeta](success=True, data=meta)


# ---------------------------------------------------------------------------
# Page analysis
# ---------------------------------------------------------------------------


@app.post("/api/seo/analyze", response_model=ApiResponse[AnalysisResultSchema])
def analyze(body: AnalyzeRequest | None = Body(default=None)):
    """Score raw page HTML and list issues and recommendations."""
    if body is None or not body.url or not body.content:
        return _error(400, "URL and content are required")

    result = analyze_page(body.url, body.content)
    return ApiResponse[AnalysisResultSchema](success=True, data=AnalysisResultSchema(**result))


# ---------------------------------------------------------------------------
# Configuration passthrough
# ---------------------------------------------------------------------------
@app.get("/api/seo/config", response_model=ApiResponse[list[SEOConfigResponse]])
def list_configs(conn: sqlite3.Connection = Depends(get_db)):
    try:
        configs = [SEOConfigResponse(**row) for row in list_seo_configurations(conn)]
    except STORE_ERRORS:
        logger.exception("Error listing SEO configurations")
        return _error(500, "Failed to list SEO configurations")
    return ApiResponse[list[SEOConfigResponse]](success=True, data=configs)


@app.get("/api/seo/config/{page_type}", response_model=ApiResponse[SEOConfigResponse])
@app.get("/api/seo/config/{page_type}/{page_id}", response_model=ApiResponse[SEOConfigResponse])
def get_config(
    page_type: str,
    response: Response,
    page_id: str | None = None,
    conn: sqlite3.Connection = Depends(get_db),
):
    try:
        row = get_seo_configuration(conn, page_type, page_id)
        config = SEOConfigResponse(**row) if row else None
    except STORE_ERRORS:
        logger.exception("Error getting SEO configuration for %s/%s", page_type, page_id)
        return _error(500, "Failed to get SEO configuration")

    response.headers["Cache-Control"] = API_CACHE_CONTROL
    return ApiResponse[SEOConfigResponse](success=True, data=config)


@app.post("/api/seo/config", status_code=201, response_model=ApiResponse[SEOConfigResponse])
def create_config(body: SEOConfigCreate, conn: sqlite3.Connection = Depends(get_db)):
    try:
        config = SEOConfigResponse(**create_seo_configuration(conn, body.model_dump()))
    except STORE_ERRORS:
        logger.exception("Error creating SEO configuration")
        return _error(500, "Failed to create SEO configuration")
    return ApiResponse[SEOConfigResponse](success=True, data=config)


@app.put("/api/seo/config/{config_id}", response_model=ApiResponse[SEOConfigResponse])
def update_config(config_id: int, body: SEOConfigUpdate, conn: sqlite3.Connection = Depends(get_db)):
    try:
        row = update_seo_configuration(conn, config_id, body.model_dump(exclude_unset=True))
        config = SEOConfigResponse(**row) if row else None
    except STORE_ERRORS:
        logger.exception("Error updating SEO configuration %s", config_id)
        return _error(500, "Failed to update SEO configuration")
    if config is None:
        return _error(404, "SEO configuration not found")
    return ApiResponse[SEOConfigResponse](success=True, data=config)


@app.get("/api/seo/robots", response_model=ApiResponse[list[RobotsDirectiveResponse]])
def list_robots(conn: sqlite3.Connection = Depends(get_db)):
    try:
        directives = [RobotsDirectiveResponse(**row) for row in list_robots_directives(conn)]
    except STORE_ERRORS:
        logger.exception("Error listing robots directives")
        return _error(500, "Failed to list robots directives")
    return ApiResponse[list[RobotsDirectiveResponse]](success=True, data=directives)


@app.post("/api/seo/robots", status_code=201, response_model=ApiResponse[RobotsDirectiveResponse])
def create_robots(body: RobotsDirectiveCreate, conn: sqlite3.Connection = Depends(get_db)):
    try:
        directive = RobotsDirectiveResponse(**create_robots_directive(conn, **body.model_dump()))
    except STORE_ERRORS:
        logger.exception("Error creating robots directive")
        return _error(500, "Failed to create robots directive")
    return ApiResponse[RobotsDirectiveResponse](success=True, data=directive)


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
