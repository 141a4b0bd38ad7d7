"""Deterministic 0-100 scores.

Every function here is pure. The overall score is the plain mean of the
four Lighthouse categories; the interactive analysis, the certification
webhook and the daily re-audit all go through ``overall_score`` so stored
history stays comparable.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

from .lighthouse import CATEGORIES, LighthouseReport
from .models import CategoryScores, CheckStatus, TrustSecurity, WebsiteQuality

# Website Quality weights
WORDS_RICH = 300
WORDS_SOME = 100
QUALITY_POINTS = {
    "words_rich": 15,
    "words_some": 10,
    "words_any": 5,
    "favicon": 10,
    "open_graph": 15,
    "twitter_cards": 10,
    "sitemap": 15,
    "schema": 15,
    "canonical": 10,
    "hreflang": 10,
}

# Trust & Security weights, summing to 100
SECURITY_POINTS = {
    "https": 30,
    "hsts": 20,
    "csp": 20,
    "x_frame_options": 10,
    "x_content_type_options": 10,
    "referrer_policy": 10,
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


def category_score(report: LighthouseReport, name: str) -> int:
    raw = report.category_score(name)
    if raw is None:
        return 0
    return _clamp_score(round_half_up(raw * 100))


def overall_score(performance: int, seo: int, accessibility: int, best_practices: int) -> int:
    return round_half_up((performance + seo + accessibility + best_practices) / 4)


def category_scores(report: LighthouseReport) -> CategoryScores:
    scores = {name: category_score(report, name) for name in CATEGORIES}
    return CategoryScores(**scores, overall=overall_score(**scores))


def word_count_points(word_count: int) -> int:
    if word_count >= WORDS_RICH:
        return QUALITY_POINTS["words_rich"]
    if word_count >= WORDS_SOME:
        return QUALITY_POINTS["words_some"]
    if word_count > 0:
        return QUALITY_POINTS["words_any"]
    return 0


def website_quality_score(q: WebsiteQuality) -> int:
    score = word_count_points(q.word_count)
    if q.has_favicon:
        score += QUALITY_POINTS["favicon"]
    if q.has_open_graph:
        score += QUALITY_POINTS["open_graph"]
    if q.has_twitter_cards:
        score += QUALITY_POINTS["twitter_cards"]
    if q.has_sitemap:
        score += QUALITY_POINTS["sitemap"]
    if q.schema_count > 0:
        score += QUALITY_POINTS["schema"]
    if q.has_canonical:
        score += QUALITY_POINTS["canonical"]
    if q.has_hreflang:
        score += QUALITY_POINTS["hreflang"]
    return min(score, 100)


def trust_security_score(t: TrustSecurity) -> int:
    score = 0
    if t.has_https:
        score += SECURITY_POINTS["https"]
    if t.has_hsts:
        score += SECURITY_POINTS["hsts"]
    if t.has_csp:
        score += SECURITY_POINTS["csp"]
    if t.has_x_frame_options:
        score += SECURITY_POINTS["x_frame_options"]
    if t.has_x_content_type_options:
        score += SECURITY_POINTS["x_content_type_options"]
    if t.has_referrer_policy:
        score += SECURITY_POINTS["referrer_policy"]
    return score


def checklist_score(statuses: Iterable[CheckStatus]) -> int:
    """Free-tool score: each item is worth 100/n, half that on a warning, nothing on a fail."""
    statuses = list(statuses)
    if not statuses:
        return 0
    weight = 100 / len(statuses)
    total = 0.0
    for status in statuses:
        if status == "pass":
            total += weight
        elif status == "warning":
            total += weight * 0.5
    return round_half_up(total)


def score_label(score: int) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Needs Work"
    return "Poor"


def badge_color(score: int) -> str:
    if score >= 90:
        return "#10b981"
    if score >= 70:
        return "#f59e0b"
    if score >= 50:
        return "#f97316"
    return "#ef4444"


def feed_color(score: int) -> str:
    if score >= 90:
        return "emerald"
    if score >= 70:
        return "yellow"
    return "red"
