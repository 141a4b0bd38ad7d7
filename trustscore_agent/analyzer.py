from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from .audits import classify_audits, extract_metrics, extract_screenshot
from .config import Settings
from .errors import AnalysisError
from .fetcher import PageFetch, fetch_page, probe_sitemap
from .html_facts import extract_facts
from .lighthouse import LighthouseReport, fetch_report
from .models import AnalysisResult, AnalyzeResponse, TrustSecurity, WebsiteQuality
from .scoring import category_scores, website_quality_score
from .security_headers import extract_trust_security
from .urls import is_https, normalize_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSignals:
    website_quality: WebsiteQuality
    trust_security: TrustSecurity
    note: str | None = None


def degraded_signals(url: str, note: str | None = None) -> PageSignals:
    """Signals for a page that could not be fetched: zeroed quality, HTTPS still credited from the scheme."""
    return PageSignals(
        website_quality=WebsiteQuality(),
        trust_security=extract_trust_security({}, https=is_https(url)),
        note=note,
    )


def build_website_quality(html: str, has_sitemap: bool) -> WebsiteQuality:
    facts = extract_facts(html)
    quality = WebsiteQuality(
        word_count=facts.word_count,
        has_favicon=facts.has_favicon,
        has_open_graph=len(facts.og_tags) > 0,
        og_tags=facts.og_tags,
        has_twitter_cards=len(facts.twitter_tags) > 0,
        twitter_tags=facts.twitter_tags,
        has_sitemap=has_sitemap,
        schema_count=facts.schema_count,
        has_canonical=facts.has_canonical,
        canonical_url=facts.canonical_url,
        has_hreflang=facts.has_hreflang,
    )
    quality.score = website_quality_score(quality)
    return quality


def collect_page_signals(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> PageSignals:
    settings = settings or Settings()
    page: PageFetch = fetch_page(
        url,
        timeout_s=settings.page_timeout_s,
        user_agent=settings.user_agent,
        transport=transport,
    )
    if page.degraded:
        return degraded_signals(url, page.note or "Page content wasn't available for automated checks.")

    has_sitemap = probe_sitemap(
        url,
        timeout_s=settings.sitemap_timeout_s,
        user_agent=settings.user_agent,
        transport=transport,
    )
    try:
        quality = build_website_quality(page.html, has_sitemap)
        security = extract_trust_security(page.headers, https=is_https(url))
    except Exception:
        logger.exception("Signal extraction failed for %s", url)
        return degraded_signals(url, "Page content could not be analyzed.")
    return PageSignals(website_quality=quality, trust_security=security)


def assemble_result(
    url: str,
    report: LighthouseReport,
    signals: PageSignals,
    timings: dict[str, int] | None = None,
) -> AnalysisResult:
    scores = category_scores(report)
    buckets = classify_audits(report.audits)
    warnings: list[str] = []
    if signals.note:
        warnings.append(f"Page fetch degraded: {signals.note}")

    return AnalysisResult(
        url=url,
        performance_score=scores.performance,
        seo_score=scores.seo,
        accessibility_score=scores.accessibility,
        best_practices_score=scores.best_practices,
        overall_score=scores.overall,
        metrics=extract_metrics(report),
        screenshot=extract_screenshot(report),
        passed_audits=buckets.passed,
        failed_audits=buckets.failed,
        opportunities=buckets.opportunities,
        website_quality=signals.website_quality,
        trust_security=signals.trust_security,
        analyzed_at=datetime.now(timezone.utc).isoformat(),
        timings_ms=dict(timings or {}),
        warnings=warnings,
    )


def analyze(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> AnalysisResult:
    """Full analysis of one URL.

    Raises InvalidInput/InvalidUrl for bad input and UpstreamError when the
    report provider fails. An unreachable target page never raises; its
    quality and security signals are degraded instead.
    """
    t0 = time.perf_counter()
    settings = settings or Settings()
    normalized_url = normalize_url(url)

    timings: dict[str, int] = {}

    def timed(name: str, fn):
        start = time.perf_counter()
        try:
            return fn()
        finally:
            timings[name] = int((time.perf_counter() - start) * 1000)

    # Report and page fetch run in parallel; the sitemap probe follows the page fetch.
    with ThreadPoolExecutor(max_workers=2) as pool:
        report_fut = pool.submit(
            timed,
            "report",
            lambda: fetch_report(
                normalized_url,
                api_key=settings.pagespeed_api_key,
                endpoint=settings.pagespeed_endpoint,
                timeout_s=settings.pagespeed_timeout_s,
                transport=transport,
            ),
        )
        page_fut = pool.submit(timed, "page", lambda: collect_page_signals(normalized_url, settings, transport))

        signals = page_fut.result()
        report = report_fut.result()

    timings["total"] = int((time.perf_counter() - t0) * 1000)
    return assemble_result(normalized_url, report, signals, timings)


def analyze_website(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> AnalyzeResponse:
    """Tagged-result wrapper for the interactive flow."""
    try:
        return AnalyzeResponse(success=True, data=analyze(url, settings, transport))
    except AnalysisError as e:
        return AnalyzeResponse(success=False, error=e.message)
    except Exception:
        logger.exception("Analyze error for %s", url)
        return AnalyzeResponse(success=False, error="An unexpected error occurred. Please try again.")
