from __future__ import annotations

import re
from urllib.parse import urlparse

import httpx

from .errors import InvalidInput, InvalidUrl

# Code points a URL host may never contain. IPv6 colons are allowed because
# urlparse hands the host back without its brackets.
_FORBIDDEN_HOST_CHARS = frozenset("#%/<>?@[\\]^|")


def normalize_url(raw: str | None) -> str:
    """Canonicalize free-text input into an absolute http(s) URL.

    Lowercases the whole value, drops trailing slashes and defaults the
    scheme to https. Normalizing an already-normalized URL is a no-op.
    Internationalized hosts and bracketed IPv6 literals are accepted.
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidInput()

    value = value.lower().rstrip("/")
    if not value.startswith(("http://", "https://")):
        value = "https://" + value

    if any(ch.isspace() for ch in value):
        raise InvalidUrl()
    parsed = urlparse(value)
    if not parsed.netloc or not parsed.hostname:
        raise InvalidUrl()
    if _FORBIDDEN_HOST_CHARS.intersection(parsed.hostname):
        raise InvalidUrl()
    try:
        parsed.port
        httpx.URL(value)
    except (ValueError, httpx.InvalidURL):
        raise InvalidUrl() from None

    return value


def is_https(url: str) -> bool:
    return urlparse(url).scheme == "https"


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def clean_domain(value: str) -> str:
    """Certification key: lowercase host with scheme, ``www.`` and one trailing slash removed."""
    domain = (value or "").strip().lower()
    domain = re.sub(r"^https?://", "", domain)
    domain = re.sub(r"^www\.", "", domain)
    if domain.endswith("/"):
        domain = domain[:-1]
    return domain
