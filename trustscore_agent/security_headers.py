from __future__ import annotations

import re
from collections.abc import Mapping

from .models import TrustSecurity
from .scoring import trust_security_score

_MAX_AGE_RE = re.compile(r"max-age\s*=\s*\"?(\d+)", re.IGNORECASE)


def _lower(headers: Mapping[str, str] | None) -> dict[str, str]:
    return {k.lower(): v for k, v in (headers or {}).items()}


def hsts_max_age(value: str | None) -> int | None:
    if not value:
        return None
    m = _MAX_AGE_RE.search(value)
    return int(m.group(1)) if m else None


def extract_trust_security(headers: Mapping[str, str] | None, https: bool) -> TrustSecurity:
    """Security facts from response headers. ``https`` comes from the URL scheme, not the response."""
    h = _lower(headers)
    hsts = h.get("strict-transport-security")
    facts = TrustSecurity(
        has_https=https,
        has_hsts=hsts is not None,
        hsts_max_age=hsts_max_age(hsts),
        has_csp="content-security-policy" in h or "content-security-policy-report-only" in h,
        has_x_frame_options="x-frame-options" in h,
        has_x_content_type_options="x-content-type-options" in h,
        has_referrer_policy="referrer-policy" in h,
        has_permissions_policy="permissions-policy" in h,
    )
    facts.score = trust_security_score(facts)
    return facts
