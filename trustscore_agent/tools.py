"""Free single-purpose checks: meta tags, security headers, social preview."""
from __future__ import annotations

import httpx

from . import html_facts
from .config import Settings
from .errors import FetchError
from .fetcher import PageFetch, request_page
from .models import CheckItem, MetaCheckResponse, OgPreviewResponse, SecurityHeadersResponse
from .scoring import checklist_score
from .security_headers import extract_trust_security
from .urls import is_https, normalize_url


def _fetch(url: str, settings: Settings | None, transport: httpx.BaseTransport | None, require_ok: bool) -> PageFetch:
    settings = settings or Settings()
    page = request_page(
        url,
        timeout_s=settings.page_timeout_s,
        user_agent=settings.user_agent,
        transport=transport,
    )
    if require_ok and not page.ok:
        raise FetchError(f"Failed to fetch: {page.status}", status_code=page.status)
    return page


def _length_check(name: str, value: str | None, low: int, high: int, missing: str) -> CheckItem:
    if not value:
        return CheckItem(name=name, value=value, status="fail", description=missing)
    n = len(value)
    if low <= n <= high:
        return CheckItem(name=name, value=value, status="pass", description=f"Good length ({n} chars)")
    return CheckItem(
        name=name,
        value=value,
        status="warning",
        description=f"Length: {n} chars (recommended: {low}-{high})",
    )


def meta_tag_checks(html: str) -> list[CheckItem]:
    page_title = html_facts.title(html)
    description = html_facts.meta_content(html, "description")
    _, canonical = html_facts.canonical_url(html_facts.link_tags(html))
    lang = html_facts.html_lang(html)
    viewport = html_facts.meta_content(html, "viewport")
    charset = html_facts.charset(html)
    robots = html_facts.meta_content(html, "robots")
    og_title = html_facts.meta_content(html, "og:title", attr="property")

    checks = [
        _length_check("Title Tag", page_title, 30, 60, "Missing title tag. This is critical for SEO."),
        _length_check(
            "Meta Description",
            description,
            120,
            160,
            "Missing meta description. Important for SERP click-through rate.",
        ),
    ]

    if canonical:
        checks.append(CheckItem(
            name="Canonical URL", value=canonical, status="pass",
            description="Canonical URL is set, preventing duplicate content issues",
        ))
    else:
        checks.append(CheckItem(
            name="Canonical URL", value=None, status="warning",
            description="No canonical URL. May cause duplicate content issues.",
        ))

    if lang:
        checks.append(CheckItem(name="Language Attribute", value=lang, status="pass", description=f'Language set to "{lang}"'))
    else:
        checks.append(CheckItem(
            name="Language Attribute", value=None, status="warning",
            description="Missing lang attribute on <html> tag. Important for accessibility and SEO.",
        ))

    if viewport and "width=device-width" in viewport:
        checks.append(CheckItem(
            name="Viewport Meta", value=viewport, status="pass",
            description="Viewport is properly configured for mobile devices",
        ))
    else:
        checks.append(CheckItem(
            name="Viewport Meta", value=viewport, status="warning" if viewport else "fail",
            description="Missing or incomplete viewport meta. Site may not be mobile-friendly.",
        ))

    if charset and charset.lower() == "utf-8":
        checks.append(CheckItem(
            name="Character Encoding", value=charset, status="pass",
            description="Using UTF-8 encoding (recommended)",
        ))
    elif charset:
        checks.append(CheckItem(
            name="Character Encoding", value=charset, status="warning",
            description=f"Using {charset} encoding. UTF-8 is recommended.",
        ))
    else:
        checks.append(CheckItem(
            name="Character Encoding", value=None, status="fail",
            description="Missing charset declaration.",
        ))

    if robots and "noindex" in robots.lower():
        checks.append(CheckItem(
            name="Robots Meta", value=robots, status="warning",
            description="Page is set to noindex - will not appear in search results",
        ))
    elif robots:
        checks.append(CheckItem(name="Robots Meta", value=robots, status="pass", description=f"Robots directive: {robots}"))
    else:
        checks.append(CheckItem(
            name="Robots Meta", value=None, status="pass",
            description="No robots meta tag (defaults to index, follow - good)",
        ))

    if og_title:
        checks.append(CheckItem(
            name="Open Graph Title", value=og_title, status="pass",
            description="OG title is set for social sharing",
        ))
    else:
        checks.append(CheckItem(
            name="Open Graph Title", value=None, status="warning",
            description="Missing og:title. Social shares may not display correctly.",
        ))

    return checks


def check_meta_tags(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> MetaCheckResponse:
    normalized_url = normalize_url(url)
    page = _fetch(normalized_url, settings, transport, require_ok=True)
    tags = meta_tag_checks(page.html)
    return MetaCheckResponse(url=normalized_url, tags=tags, score=checklist_score(t.status for t in tags))


def security_header_checks(headers: dict[str, str], https: bool) -> list[CheckItem]:
    facts = extract_trust_security(headers, https=https)
    h = {k.lower(): v for k, v in headers.items()}
    csp = h.get("content-security-policy") or h.get("content-security-policy-report-only")
    nosniff = (h.get("x-content-type-options") or "").strip().lower() == "nosniff"

    return [
        CheckItem(
            name="HTTPS",
            value="Enabled" if https else "Not enabled",
            status="pass" if https else "fail",
            description="Connection is encrypted with HTTPS" if https
            else "Website is not using HTTPS. All traffic is unencrypted.",
        ),
        CheckItem(
            name="Strict-Transport-Security (HSTS)",
            value=h.get("strict-transport-security"),
            status="pass" if facts.has_hsts else "fail",
            description="Browser will only connect via HTTPS" if facts.has_hsts
            else "Missing HSTS header. Browser may connect via insecure HTTP.",
        ),
        CheckItem(
            name="Content-Security-Policy",
            value="Present" if csp else None,
            status="pass" if facts.has_csp else "warning",
            description="CSP restricts which resources can be loaded" if facts.has_csp
            else "Missing CSP. May be vulnerable to XSS attacks.",
        ),
        CheckItem(
            name="X-Frame-Options",
            value=h.get("x-frame-options"),
            status="pass" if facts.has_x_frame_options else "warning",
            description="Page cannot be embedded in iframes (clickjacking protection)" if facts.has_x_frame_options
            else "Missing X-Frame-Options. Page may be vulnerable to clickjacking.",
        ),
        CheckItem(
            name="X-Content-Type-Options",
            value=h.get("x-content-type-options"),
            status="pass" if nosniff else "warning",
            description="Browser respects declared content types" if nosniff
            else "Missing nosniff directive. Browser may MIME-sniff content.",
        ),
        CheckItem(
            name="Referrer-Policy",
            value=h.get("referrer-policy"),
            status="pass" if facts.has_referrer_policy else "warning",
            description="Referrer information is controlled" if facts.has_referrer_policy
            else "Missing Referrer-Policy. Full URL may be leaked to third parties.",
        ),
        CheckItem(
            name="Permissions-Policy",
            value="Present" if facts.has_permissions_policy else None,
            status="pass" if facts.has_permissions_policy else "warning",
            description="Browser features are restricted" if facts.has_permissions_policy
            else "Missing Permissions-Policy. All browser features are enabled.",
        ),
    ]


def check_security_headers(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> SecurityHeadersResponse:
    normalized_url = normalize_url(url)
    # Headers are judged whatever the status code.
    page = _fetch(normalized_url, settings, transport, require_ok=False)
    https = is_https(normalized_url)
    checks = security_header_checks(page.headers, https)
    return SecurityHeadersResponse(
        url=normalized_url,
        https=https,
        headers=checks,
        score=checklist_score(c.status for c in checks),
    )


def og_preview(html: str) -> OgPreviewResponse:
    def prop(key: str) -> str | None:
        return html_facts.meta_content(html, key, attr="property")

    def named(key: str) -> str | None:
        return html_facts.meta_content(html, key)

    return OgPreviewResponse(
        title=prop("og:title") or html_facts.title(html),
        description=prop("og:description") or named("description"),
        image=prop("og:image"),
        site_name=prop("og:site_name"),
        url=prop("og:url"),
        type=prop("og:type"),
        twitter_card=prop("twitter:card") or named("twitter:card"),
        twitter_title=prop("twitter:title") or named("twitter:title"),
        twitter_description=prop("twitter:description") or named("twitter:description"),
        twitter_image=prop("twitter:image") or named("twitter:image"),
    )


def preview_open_graph(
    url: str,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> OgPreviewResponse:
    page = _fetch(normalize_url(url), settings, transport, require_ok=True)
    return og_preview(page.html)
