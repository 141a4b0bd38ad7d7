from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from .config import DEFAULT_USER_AGENT
from .errors import FetchError
from .urls import origin_of

logger = logging.getLogger(__name__)

PAGE_TIMEOUT_S = 10.0
SITEMAP_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class PageFetch:
    url: str
    status: int | None = None
    html: str = ""
    # lowercased header names
    headers: dict[str, str] = field(default_factory=dict)
    note: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    @property
    def degraded(self) -> bool:
        return not self.ok


def request_page(
    url: str,
    *,
    timeout_s: float = PAGE_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    accept: str = "text/html",
    transport: httpx.BaseTransport | None = None,
) -> PageFetch:
    """Single GET of ``url``; returns whatever the server answered, any status.

    Raises FetchError when the page could not be reached at all.
    """
    try:
        with httpx.Client(timeout=timeout_s, follow_redirects=True, transport=transport) as client:
            res = client.get(url, headers={"user-agent": user_agent, "accept": accept})
            return PageFetch(
                url=url,
                status=res.status_code,
                html=res.text,
                headers={k.lower(): v for k, v in res.headers.items()},
            )
    except httpx.TimeoutException as e:
        raise FetchError("Timed out fetching page.") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError("Unable to fetch page.") from e


def fetch_page(
    url: str,
    *,
    timeout_s: float = PAGE_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.BaseTransport | None = None,
) -> PageFetch:
    """Fetch the page for analysis. Never raises: failures come back degraded, with no HTML or headers."""
    try:
        page = request_page(url, timeout_s=timeout_s, user_agent=user_agent, transport=transport)
    except FetchError as e:
        logger.info("Degraded fetch for %s: %s", url, e.message)
        return PageFetch(url=url, note=e.message)

    if not page.ok:
        logger.info("Degraded fetch for %s: HTTP %s", url, page.status)
        return PageFetch(url=url, status=page.status, note=f"Page returned HTTP {page.status}.")
    return page


def probe_sitemap(
    url: str,
    *,
    timeout_s: float = SITEMAP_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.BaseTransport | None = None,
) -> bool:
    sitemap_url = origin_of(url) + "/sitemap.xml"
    try:
        with httpx.Client(timeout=timeout_s, follow_redirects=True, transport=transport) as client:
            res = client.head(sitemap_url, headers={"user-agent": user_agent})
    except (httpx.HTTPError, httpx.InvalidURL):
        return False
    return 200 <= res.status_code < 300
