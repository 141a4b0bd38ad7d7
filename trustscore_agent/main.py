from __future__ import annotations

import logging
from pathlib import Path

import httpx
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .analyzer import analyze, analyze_website
from .badge import render_badge
from .certification import (
    CertificationStore,
    InMemoryCertificationStore,
    build_checkout_metadata,
    certify_after_payment,
    get_active_certification,
    reaudit_all,
    recent_certifications,
)
from .config import Settings
from .errors import AnalysisError, FetchError, InvalidInput, PersistenceError, UpstreamError
from .models import (
    AnalyzeResponse,
    CertificationDetail,
    CertificationOrder,
    CertificationOutcome,
    CertificationRecord,
    CheckoutRequest,
    MetaCheckResponse,
    OgPreviewResponse,
    ReauditSummary,
    RecentAnalysesResponse,
    SecurityHeadersResponse,
    UrlRequest,
)
from .tools import check_meta_tags, check_security_headers, preview_open_graph


# Load environment variables from the repo root .env (so GOOGLE_PAGESPEED_API_KEY works in local dev)
_HERE = Path(__file__).resolve()
_REPO_ROOT = _HERE.parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

_settings = Settings.from_env()

logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TrustScore Agent", version="0.1.0")

# For local dev, this defaults to allowing http://localhost:3000.
# In production, set TRUSTSCORE_CORS_ORIGINS to your deployed frontend origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_store: CertificationStore = InMemoryCertificationStore()


def get_settings() -> Settings:
    return _settings


def get_store() -> CertificationStore:
    return _store


def get_transport() -> httpx.BaseTransport | None:
    return None


def _http_error(e: AnalysisError) -> HTTPException:
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, FetchError) and e.status_code is not None:
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, (UpstreamError, FetchError)):
        return HTTPException(status_code=502, detail=e.message)
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=500, detail=PersistenceError.default_message)
    return HTTPException(status_code=500, detail=e.message)


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(
    req: UrlRequest,
    settings: Settings = Depends(get_settings),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    return analyze_website(req.url, settings, transport)


@app.post("/tools/meta-checker", response_model=MetaCheckResponse)
def meta_checker_endpoint(
    req: UrlRequest,
    settings: Settings = Depends(get_settings),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    try:
        return check_meta_tags(req.url, settings, transport)
    except AnalysisError as e:
        raise _http_error(e)


@app.post("/tools/security-headers", response_model=SecurityHeadersResponse)
def security_headers_endpoint(
    req: UrlRequest,
    settings: Settings = Depends(get_settings),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    try:
        return check_security_headers(req.url, settings, transport)
    except AnalysisError as e:
        raise _http_error(e)


@app.post("/tools/og-preview", response_model=OgPreviewResponse)
def og_preview_endpoint(
    req: UrlRequest,
    settings: Settings = Depends(get_settings),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    try:
        return preview_open_graph(req.url, settings, transport)
    except AnalysisError as e:
        raise _http_error(e)


@app.post("/checkout/metadata")
def checkout_metadata_endpoint(req: CheckoutRequest) -> dict[str, str]:
    return build_checkout_metadata(req.email, req.domain, req.url, req.scores, req.metrics)


@app.post("/webhooks/certification", response_model=CertificationOutcome)
def certification_webhook(
    order: CertificationOrder,
    settings: Settings = Depends(get_settings),
    store: CertificationStore = Depends(get_store),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    try:
        return certify_after_payment(order, store, lambda url: analyze(url, settings, transport))
    except AnalysisError as e:
        logger.error("Error processing certification webhook for %s: %s", order.domain, e.message)
        raise _http_error(e)


@app.get("/cron/audit", response_model=ReauditSummary)
def cron_audit(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    store: CertificationStore = Depends(get_store),
    transport: httpx.BaseTransport | None = Depends(get_transport),
):
    if settings.cron_secret and authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        return reaudit_all(
            store,
            lambda url: analyze(url, settings, transport),
            pause_s=settings.reaudit_pause_s,
        )
    except PersistenceError as e:
        logger.error("Cron job failed: %s", e.message)
        raise HTTPException(status_code=500, detail="Failed to fetch websites")


@app.get("/certifications", response_model=list[CertificationRecord])
def list_certifications(store: CertificationStore = Depends(get_store)):
    return store.list_active()


@app.get("/certifications/{domain}", response_model=CertificationDetail)
def certification_detail(domain: str, store: CertificationStore = Depends(get_store)):
    record = get_active_certification(store, domain)
    if record is None:
        raise HTTPException(status_code=404, detail="Not certified")
    return CertificationDetail(certification=record, history=store.history(record.id, limit=30))


@app.get("/badge")
def badge_endpoint(domain: str | None = None, store: CertificationStore = Depends(get_store)):
    if not domain:
        raise HTTPException(status_code=400, detail="Domain required")
    record = get_active_certification(store, domain)
    if record is None:
        raise HTTPException(status_code=404, detail="Not certified")
    return Response(
        content=render_badge(record.domain, record.current_score),
        media_type="image/svg+xml",
        headers={"cache-control": "public, max-age=3600"},
    )


@app.get("/recent-analyses", response_model=RecentAnalysesResponse)
def recent_analyses(store: CertificationStore = Depends(get_store)):
    try:
        return {"analyses": recent_certifications(store)}
    except Exception:
        logger.exception("Error fetching recent analyses")
        return {"analyses": []}
