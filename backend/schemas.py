"""Pydantic schemas for API request/response."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every JSON endpoint."""

    success: bool
    data: T | None = None
    error: str | None = None


class OpenGraph(BaseModel):
    """Open Graph tags (og:*)."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    image: str | None = None
    type: str | None = None
    url: str | None = None


class TwitterCard(BaseModel):
    """Twitter card tags (twitter:*)."""

    model_config = ConfigDict(frozen=True)

    card: str | None = None
    title: str | None = None
    description: str | None = None
    image: str | None = None


class SEOMetaBundle(BaseModel):
    """Resolved meta tags for one page."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    keywords: list[str] = Field(default_factory=list)
    canonical: str | None = None
    robots: str | None = None
    open_graph: OpenGraph = Field(default_factory=OpenGraph)
    twitter: TwitterCard = Field(default_factory=TwitterCard)
    structured_data: Any = Field(default_factory=dict)
    custom_meta: dict[str, str] = Field(default_factory=dict)


class MetaOverrides(BaseModel):
    """Caller overrides for POST /api/seo/meta. Only fields actually sent are applied."""

    title: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    canonical: str | None = None
    robots: str | None = None
    open_graph: OpenGraph | None = None
    twitter: TwitterCard | None = None
    structured_data: Any = None
    custom_meta: dict[str, str] | None = None


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/seo/analyze. Emptiness is checked by the endpoint."""

    url: str | None = None
    content: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, value: object) -> str | None:
        if value is None:
            return None
        return str(value).strip()


class AnalysisIssueSchema(BaseModel):
    """One analyzer finding."""

    severity: Literal["error", "warning", "info"]
    message: str


class AnalysisResultSchema(BaseModel):
    """Analyzer score, issues and recommendations for one page."""

    score: int = Field(ge=0, le=100)
    issues: list[AnalysisIssueSchema]
    recommendations: list[str]


class SEOConfigBase(BaseModel):
    """Fields shared by stored SEO configuration bodies."""

    page_id: str | None = None
    title: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    canonical_url: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    og_type: str | None = None
    twitter_card: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None
    structured_data: dict[str, Any] | None = None
    custom_meta: dict[str, str] | None = None
    meta_robots: str | None = None

    @field_validator("page_id", mode="before")
    @classmethod
    def normalize_page_id(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class SEOConfigCreate(SEOConfigBase):
    page_type: str = Field(min_length=1)
    is_active: bool = True

    @field_validator("page_type", mode="before")
    @classmethod
    def normalize_page_type(cls, value: object) -> str:
        return str(value or "").strip()


class SEOConfigUpdate(SEOConfigBase):
    page_type: str | None = None
    is_active: bool | None = None


class SEOConfigResponse(SEOConfigBase):
    id: int
    page_type: str
    is_active: bool
    created_at: str
    updated_at: str


class RobotsDirectiveCreate(BaseModel):
    """Request body for POST /api/seo/robots."""

    user_agent: str = "*"
    directive: str
    value: str
    priority: int = Field(default=100, ge=1, le=1000)
    is_active: bool = True
    comment: str | None = None

    @field_validator("directive", mode="before")
    @classmethod
    def normalize_directive(cls, value: object) -> str:
        text = str(value or "").strip().lower()
        if not text:
            raise ValueError("Directive is required")
        return text

    @field_validator("user_agent", "value", mode="before")
    @classmethod
    def normalize_text_fields(cls, value: object) -> str:
        return str(value or "").strip()


class RobotsDirectiveResponse(RobotsDirectiveCreate):
    id: int


class RegionalLandingMeta(BaseModel):
    """Location landing-page meta for GET /api/seo/region."""

    title: str
    description: str
    keywords: list[str]
    structured_data: list[dict[str, Any]]
