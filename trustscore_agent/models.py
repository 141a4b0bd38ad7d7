from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CheckStatus = Literal["pass", "warning", "fail"]


class UrlRequest(BaseModel):
    url: str = ""


class Audit(BaseModel):
    id: str
    title: str
    description: str = ""
    # 0-1, None means not applicable
    score: float | None = None
    display_value: str | None = None
    score_display_mode: str = "binary"


class Metrics(BaseModel):
    fcp: str = "N/A"
    lcp: str = "N/A"
    tbt: str = "N/A"
    cls: str = "N/A"
    speed_index: str = "N/A"


class OgTag(BaseModel):
    property: str
    content: str


class TwitterTag(BaseModel):
    name: str
    content: str


class WebsiteQuality(BaseModel):
    word_count: int = 0
    has_favicon: bool = False
    has_open_graph: bool = False
    og_tags: list[OgTag] = []
    has_twitter_cards: bool = False
    twitter_tags: list[TwitterTag] = []
    has_sitemap: bool = False
    schema_count: int = 0
    has_canonical: bool = False
    canonical_url: str | None = None
    has_hreflang: bool = False
    score: int = Field(0, ge=0, le=100)


class TrustSecurity(BaseModel):
    has_https: bool = False
    has_hsts: bool = False
    hsts_max_age: int | None = None
    has_csp: bool = False
    has_x_frame_options: bool = False
    has_x_content_type_options: bool = False
    has_referrer_policy: bool = False
    has_permissions_policy: bool = False
    score: int = Field(0, ge=0, le=100)


class CategoryScores(BaseModel):
    performance: int = Field(0, ge=0, le=100)
    seo: int = Field(0, ge=0, le=100)
    accessibility: int = Field(0, ge=0, le=100)
    best_practices: int = Field(0, ge=0, le=100)
    overall: int = Field(0, ge=0, le=100)


class AnalysisResult(BaseModel):
    url: str
    performance_score: int = Field(..., ge=0, le=100)
    seo_score: int = Field(..., ge=0, le=100)
    accessibility_score: int = Field(..., ge=0, le=100)
    best_practices_score: int = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100)
    metrics: Metrics
    screenshot: str | None = None
    passed_audits: list[Audit] = Field(default_factory=list, max_length=10)
    failed_audits: list[Audit] = Field(default_factory=list, max_length=10)
    opportunities: list[Audit] = Field(default_factory=list, max_length=5)
    website_quality: WebsiteQuality
    trust_security: TrustSecurity

    # metadata
    analyzed_at: str
    timings_ms: dict[str, int] = {}
    warnings: list[str] = []

    def category_scores(self) -> CategoryScores:
        return CategoryScores(
            performance=self.performance_score,
            seo=self.seo_score,
            accessibility=self.accessibility_score,
            best_practices=self.best_practices_score,
            overall=self.overall_score,
        )


class AnalyzeResponse(BaseModel):
    success: bool
    data: AnalysisResult | None = None
    error: str | None = None


class CheckItem(BaseModel):
    name: str
    value: str | None = None
    status: CheckStatus
    description: str


class MetaCheckResponse(BaseModel):
    url: str
    tags: list[CheckItem]
    score: int


class SecurityHeadersResponse(BaseModel):
    url: str
    https: bool
    headers: list[CheckItem]
    score: int


class OgPreviewResponse(BaseModel):
    title: str | None = None
    description: str | None = None
    image: str | None = None
    site_name: str | None = None
    url: str | None = None
    type: str | None = None
    twitter_card: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None


class AuditScores(BaseModel):
    """Snapshot of one audit, as written to a certification and its history."""

    performance: int
    seo: int
    accessibility: int
    best_practices: int
    overall: int
    website_quality: int | None = None
    trust_security: int | None = None

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AuditScores":
        return cls(
            performance=result.performance_score,
            seo=result.seo_score,
            accessibility=result.accessibility_score,
            best_practices=result.best_practices_score,
            overall=result.overall_score,
            website_quality=result.website_quality.score,
            trust_security=result.trust_security.score,
        )


class AuditHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    website_id: str
    score: int
    performance_score: int
    seo_score: int
    accessibility_score: int
    best_practices_score: int
    website_quality_score: int | None = None
    trust_security_score: int | None = None
    audited_at: datetime


class CertificationRecord(BaseModel):
    id: str
    user_email: str
    domain: str
    url: str
    current_score: int
    performance_score: int
    seo_score: int
    accessibility_score: int
    best_practices_score: int
    website_quality_score: int | None = None
    trust_security_score: int | None = None
    website_quality: WebsiteQuality | None = None
    trust_security: TrustSecurity | None = None
    metrics: dict[str, Any] | None = None
    certified_date: datetime
    last_audit_date: datetime
    is_active: bool = True

    def record_audit(self, scores: AuditScores, timestamp: datetime) -> AuditHistoryEntry:
        """Apply a fresh audit to the live score fields and return the history row for it."""
        self.current_score = scores.overall
        self.performance_score = scores.performance
        self.seo_score = scores.seo
        self.accessibility_score = scores.accessibility
        self.best_practices_score = scores.best_practices
        if scores.website_quality is not None:
            self.website_quality_score = scores.website_quality
        if scores.trust_security is not None:
            self.trust_security_score = scores.trust_security
        self.last_audit_date = timestamp
        return history_entry(self.id, scores, timestamp)


def history_entry(website_id: str, scores: AuditScores, timestamp: datetime) -> AuditHistoryEntry:
    return AuditHistoryEntry(
        website_id=website_id,
        score=scores.overall,
        performance_score=scores.performance,
        seo_score=scores.seo,
        accessibility_score=scores.accessibility,
        best_practices_score=scores.best_practices,
        website_quality_score=scores.website_quality,
        trust_security_score=scores.trust_security,
        audited_at=timestamp,
    )


class CheckoutRequest(BaseModel):
    email: str = Field(..., min_length=3)
    domain: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    scores: CategoryScores
    metrics: Metrics | None = None


class CertificationOrder(BaseModel):
    email: str = Field(..., min_length=3)
    domain: str = Field(..., min_length=1)
    url: str | None = None


class CertificationOutcome(BaseModel):
    received: bool = True
    status: Literal["certified", "already_certified"]
    domain: str
    certification: CertificationRecord | None = None


class CertificationDetail(BaseModel):
    certification: CertificationRecord
    history: list[AuditHistoryEntry]


class ReauditResult(BaseModel):
    domain: str
    success: bool
    score: int | None = None
    error: str | None = None


class ReauditSummary(BaseModel):
    success: bool = True
    audited: int
    failed: int
    results: list[ReauditResult]


class RecentAnalysis(BaseModel):
    domain: str
    score: int
    label: str
    time: str
    color: Literal["emerald", "yellow", "red"]


class RecentAnalysesResponse(BaseModel):
    analyses: list[RecentAnalysis]
