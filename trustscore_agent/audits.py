from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .lighthouse import LighthouseReport
from .models import Audit, Metrics

# SEO, accessibility and performance-opportunity checks shown to users, in display order.
INTERESTING_AUDITS = (
    "meta-description",
    "document-title",
    "html-has-lang",
    "meta-viewport",
    "image-alt",
    "link-text",
    "robots-txt",
    "canonical",
    "font-display",
    "uses-https",
    "viewport",
    "color-contrast",
    "button-name",
    "link-name",
    "tap-targets",
    "render-blocking-resources",
    "uses-optimized-images",
    "uses-webp-images",
    "uses-text-compression",
    "uses-responsive-images",
    "efficient-animated-content",
    "server-response-time",
    "redirects",
    "uses-rel-preconnect",
    "uses-rel-preload",
    "critical-request-chains",
)

MAX_PASSED = 10
MAX_FAILED = 10
MAX_OPPORTUNITIES = 5

_METRIC_AUDITS = {
    "fcp": "first-contentful-paint",
    "lcp": "largest-contentful-paint",
    "tbt": "total-blocking-time",
    "cls": "cumulative-layout-shift",
    "speed_index": "speed-index",
}


@dataclass(frozen=True)
class AuditBuckets:
    passed: list[Audit] = field(default_factory=list)
    failed: list[Audit] = field(default_factory=list)
    opportunities: list[Audit] = field(default_factory=list)


def _score(raw: Any) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return float(raw)


def _text(raw: Any) -> str | None:
    if raw is None:
        return None
    return str(raw)


def to_audit(audit_id: str, raw: dict[str, Any]) -> Audit:
    return Audit(
        id=audit_id,
        title=_text(raw.get("title")) or audit_id,
        description=_text(raw.get("description")) or "",
        score=_score(raw.get("score")),
        display_value=_text(raw.get("displayValue")),
        score_display_mode=_text(raw.get("scoreDisplayMode")) or "binary",
    )


def classify_audits(
    audits: dict[str, Any],
    allow_list: tuple[str, ...] = INTERESTING_AUDITS,
) -> AuditBuckets:
    """Split allow-listed audits into passed/failed/opportunity buckets.

    Allow-list order is kept and each bucket is truncated to its display cap.
    Audits missing from the report, or with a null score, are skipped.
    """
    passed: list[Audit] = []
    failed: list[Audit] = []
    opportunities: list[Audit] = []

    for audit_id in allow_list:
        raw = audits.get(audit_id)
        if not isinstance(raw, dict):
            continue
        audit = to_audit(audit_id, raw)
        if audit.score is None:
            continue

        if audit.score_display_mode == "opportunity" and audit.score < 1:
            opportunities.append(audit)
        elif audit.score == 1:
            passed.append(audit)
        elif audit.score < 1:
            failed.append(audit)

    return AuditBuckets(
        passed=passed[:MAX_PASSED],
        failed=failed[:MAX_FAILED],
        opportunities=opportunities[:MAX_OPPORTUNITIES],
    )


def extract_metrics(report: LighthouseReport) -> Metrics:
    values: dict[str, str] = {}
    for key, audit_id in _METRIC_AUDITS.items():
        raw = report.audits.get(audit_id)
        display = raw.get("displayValue") if isinstance(raw, dict) else None
        if display:
            values[key] = str(display)
    return Metrics(**values)


def extract_screenshot(report: LighthouseReport) -> str | None:
    raw = report.audits.get("final-screenshot")
    if not isinstance(raw, dict):
        return None
    details = raw.get("details")
    if not isinstance(details, dict):
        return None
    data = details.get("data")
    return data if isinstance(data, str) and data else None
