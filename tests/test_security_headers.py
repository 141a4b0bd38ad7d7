import pytest

from trustscore_agent.security_headers import extract_trust_security, hsts_max_age

ALL_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "Content-Security-Policy": "default-src 'self'",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=()",
}


def test_everything_present_scores_100():
    facts = extract_trust_security(ALL_HEADERS, https=True)
    assert facts.score == 100
    assert facts.hsts_max_age == 63072000
    assert facts.has_permissions_policy


def test_https_only_scores_30():
    facts = extract_trust_security({}, https=True)
    assert facts.score == 30
    assert facts.has_https
    assert not facts.has_hsts
    assert facts.hsts_max_age is None


def test_no_headers_over_http_scores_zero():
    assert extract_trust_security(None, https=False).score == 0


def test_report_only_csp_counts():
    facts = extract_trust_security({"content-security-policy-report-only": "default-src *"}, https=False)
    assert facts.has_csp
    assert facts.score == 20


def test_header_names_are_case_insensitive():
    facts = extract_trust_security({"x-FRAME-options": "SAMEORIGIN"}, https=False)
    assert facts.has_x_frame_options


def test_permissions_policy_is_not_scored():
    facts = extract_trust_security({"permissions-policy": "geolocation=()"}, https=False)
    assert facts.has_permissions_policy
    assert facts.score == 0


@pytest.mark.parametrize(
    "value,expected",
    [
        ("max-age=31536000", 31536000),
        ("includeSubDomains; MAX-AGE=600", 600),
        ('max-age="300"', 300),
        ("includeSubDomains", None),
        (None, None),
    ],
)
def test_hsts_max_age(value, expected):
    assert hsts_max_age(value) == expected


def test_hsts_without_max_age_is_still_present():
    facts = extract_trust_security({"strict-transport-security": "includeSubDomains"}, https=True)
    assert facts.has_hsts
    assert facts.hsts_max_age is None
    assert facts.score == 50
