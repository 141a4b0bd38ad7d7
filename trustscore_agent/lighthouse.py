"""
Lighthouse report client backed by the PageSpeed Insights API.

One request per call: no retries and no caching, since provider quota is
spent per request. Retrying is left to whoever schedules the analysis.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import PAGESPEED_ENDPOINT
from .errors import UpstreamError

logger = logging.getLogger(__name__)

# Report category ids, keyed by the name used in results.
CATEGORIES = {
    "performance": "performance",
    "seo": "seo",
    "accessibility": "accessibility",
    "best_practices": "best-practices",
}
STRATEGY = "mobile"


@dataclass(frozen=True)
class LighthouseReport:
    categories: dict[str, Any] = field(default_factory=dict)
    audits: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "LighthouseReport":
        lighthouse = payload.get("lighthouseResult") if isinstance(payload, dict) else None
        if not isinstance(lighthouse, dict):
            return cls()
        categories = lighthouse.get("categories")
        audits = lighthouse.get("audits")
        return cls(
            categories=categories if isinstance(categories, dict) else {},
            audits=audits if isinstance(audits, dict) else {},
        )

    def category_score(self, name: str) -> float | None:
        """Raw 0-1 score for a result category name (``best_practices`` etc.)."""
        category = self.categories.get(CATEGORIES.get(name, name))
        if not isinstance(category, dict):
            return None
        score = category.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return None
        return float(score)


def _error_message(res: httpx.Response) -> str | None:
    try:
        data = res.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def build_params(url: str, api_key: str | None = None) -> list[tuple[str, str]]:
    params = [("url", url)]
    for category in CATEGORIES.values():
        params.append(("category", category))
    params.append(("strategy", STRATEGY))
    if api_key:
        params.append(("key", api_key))
    return params


def fetch_report(
    url: str,
    *,
    api_key: str | None = None,
    endpoint: str = PAGESPEED_ENDPOINT,
    timeout_s: float = 60.0,
    transport: httpx.BaseTransport | None = None,
) -> LighthouseReport:
    try:
        with httpx.Client(timeout=timeout_s, follow_redirects=True, transport=transport) as client:
            res = client.get(
                endpoint,
                params=build_params(url, api_key),
                headers={"accept": "application/json", "cache-control": "no-cache"},
            )
    except httpx.HTTPError as e:
        logger.warning("PageSpeed request failed for %s: %s", url, e)
        raise UpstreamError() from e

    if res.status_code < 200 or res.status_code >= 300:
        message = _error_message(res)
        logger.warning("PageSpeed API error for %s: HTTP %d %s", url, res.status_code, message or "")
        raise UpstreamError(message, status_code=res.status_code)

    try:
        payload = res.json()
    except ValueError as e:
        logger.warning("PageSpeed returned a non-JSON body for %s", url)
        raise UpstreamError() from e

    return LighthouseReport.from_payload(payload)
