import itertools

import pytest

from trustscore_agent.lighthouse import LighthouseReport
from trustscore_agent.models import TrustSecurity, WebsiteQuality
from trustscore_agent.scoring import (
    badge_color,
    category_score,
    category_scores,
    checklist_score,
    overall_score,
    round_half_up,
    score_label,
    trust_security_score,
    website_quality_score,
    word_count_points,
)


def test_overall_is_rounded_mean():
    assert overall_score(80, 70, 90, 60) == 75
    assert overall_score(90, 80, 100, 70) == 85


def test_overall_rounds_halves_up():
    # 342 / 4 = 85.5, 338 / 4 = 84.5
    assert overall_score(86, 86, 85, 85) == 86
    assert overall_score(85, 85, 84, 84) == 85


def test_overall_matches_mean_across_grid():
    values = (0, 1, 33, 50, 67, 99, 100)
    for combo in itertools.product(values, repeat=4):
        expected = int(sum(combo) / 4 + 0.5)
        assert overall_score(*combo) == expected
        assert 0 <= overall_score(*combo) <= 100


def test_category_scores_from_report(report_payload):
    report = LighthouseReport.from_payload(
        report_payload({"performance": 0.9, "seo": 0.8, "accessibility": 1.0, "best-practices": 0.7})
    )
    scores = category_scores(report)
    assert (scores.performance, scores.seo, scores.accessibility, scores.best_practices) == (90, 80, 100, 70)
    assert scores.overall == 85


def test_missing_or_null_categories_default_to_zero(report_payload):
    report = LighthouseReport.from_payload(report_payload({"performance": None, "seo": 0.5}))
    assert category_score(report, "performance") == 0
    assert category_score(report, "accessibility") == 0
    assert category_score(report, "seo") == 50
    assert category_scores(LighthouseReport()).overall == 0


def test_category_score_rounds_like_display():
    report = LighthouseReport.from_payload({"lighthouseResult": {"categories": {"seo": {"score": 0.575}}}})
    assert category_score(report, "seo") == 57
    report = LighthouseReport.from_payload({"lighthouseResult": {"categories": {"seo": {"score": 0.125}}}})
    assert category_score(report, "seo") == 13


@pytest.mark.parametrize(
    "words,points",
    [(0, 0), (1, 5), (99, 5), (100, 10), (299, 10), (300, 15), (5000, 15)],
)
def test_word_count_tiers_are_exclusive(words, points):
    assert word_count_points(words) == points


def _quality(**kwargs) -> WebsiteQuality:
    return WebsiteQuality(**kwargs)


def test_website_quality_full_marks_capped():
    q = _quality(
        word_count=1000,
        has_favicon=True,
        has_open_graph=True,
        has_twitter_cards=True,
        has_sitemap=True,
        schema_count=3,
        has_canonical=True,
        has_hreflang=True,
    )
    assert website_quality_score(q) == 100


def test_website_quality_is_monotonic():
    flags = ["has_favicon", "has_open_graph", "has_twitter_cards", "has_sitemap", "has_canonical", "has_hreflang"]
    previous = website_quality_score(_quality())
    assert previous == 0
    state: dict = {}
    for words in (50, 150, 300):
        state["word_count"] = words
        current = website_quality_score(_quality(**state))
        assert current >= previous
        previous = current
    for flag in flags:
        state[flag] = True
        current = website_quality_score(_quality(**state))
        assert previous < current <= 100
        previous = current
    state["schema_count"] = 1
    assert website_quality_score(_quality(**state)) >= previous


def test_trust_security_weights():
    assert trust_security_score(TrustSecurity()) == 0
    assert trust_security_score(TrustSecurity(has_https=True)) == 30
    assert trust_security_score(TrustSecurity(has_https=True, has_hsts=True)) == 50
    full = TrustSecurity(
        has_https=True,
        has_hsts=True,
        has_csp=True,
        has_x_frame_options=True,
        has_x_content_type_options=True,
        has_referrer_policy=True,
    )
    assert trust_security_score(full) == 100


def test_checklist_score():
    assert checklist_score(["pass"] * 8) == 100
    assert checklist_score(["fail"] * 7) == 0
    assert checklist_score(["pass", "warning", "fail", "fail"]) == 38
    assert checklist_score(["pass"] * 6 + ["warning"]) == 93
    assert checklist_score([]) == 0


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2


@pytest.mark.parametrize(
    "score,label,color",
    [(95, "Excellent", "#10b981"), (75, "Good", "#f59e0b"), (55, "Needs Work", "#f97316"), (10, "Poor", "#ef4444")],
)
def test_labels_and_colors(score, label, color):
    assert score_label(score) == label
    assert badge_color(score) == color
