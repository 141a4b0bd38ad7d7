"""Pattern-based fact extraction from raw page HTML.

No DOM is built. Tags are located with regexes and their attributes read
into dicts, so attribute order and quote style do not matter. The facts
produced here are the only input the quality scoring needs; swapping the
tag finder for a real parser leaves that contract unchanged.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from .models import OgTag, TwitterTag

_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")

_META_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_LINK_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_SCRIPT_OPEN_RE = re.compile(r"<script\b[^>]*>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html\b[^>]*>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title\b[^>]*>([^<]*)</title>", re.IGNORECASE)
_CHARSET_FALLBACK_RE = re.compile(r"charset=([^\"'\s>;]+)", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))""",
)

_FAVICON_RELS = {"icon", "shortcut icon", "apple-touch-icon"}


def parse_attrs(tag: str) -> dict[str, str]:
    """Attributes of a single start tag, names lowercased; the first occurrence wins."""
    attrs: dict[str, str] = {}
    for m in _ATTR_RE.finditer(tag):
        name = m.group(1).lower()
        if name in attrs:
            continue
        value = next((g for g in m.group(2, 3, 4) if g is not None), "")
        attrs[name] = value
    return attrs


def _tags(pattern: re.Pattern[str], html: str) -> list[dict[str, str]]:
    return [parse_attrs(m.group(0)) for m in pattern.finditer(html or "")]


def meta_tags(html: str) -> list[dict[str, str]]:
    return _tags(_META_RE, html)


def link_tags(html: str) -> list[dict[str, str]]:
    return _tags(_LINK_RE, html)


def _rel(attrs: dict[str, str]) -> str:
    return _WS_RE.sub(" ", attrs.get("rel", "")).strip().lower()


def word_count(html: str) -> int:
    if not html:
        return 0
    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    return len([w for w in _WS_RE.split(text) if w])


def has_favicon(links: list[dict[str, str]]) -> bool:
    return any(_rel(attrs) in _FAVICON_RELS for attrs in links)


def og_tags(metas: list[dict[str, str]]) -> list[OgTag]:
    return [
        OgTag(property=attrs["property"], content=attrs.get("content", ""))
        for attrs in metas
        if attrs.get("property", "").lower().startswith("og:")
    ]


def twitter_tags(metas: list[dict[str, str]]) -> list[TwitterTag]:
    return [
        TwitterTag(name=attrs["name"], content=attrs.get("content", ""))
        for attrs in metas
        if attrs.get("name", "").lower().startswith("twitter:")
    ]


def schema_count(html: str) -> int:
    count = 0
    for m in _SCRIPT_OPEN_RE.finditer(html or ""):
        if parse_attrs(m.group(0)).get("type", "").strip().lower() == "application/ld+json":
            count += 1
    return count


def canonical_url(links: list[dict[str, str]]) -> tuple[bool, str | None]:
    for attrs in links:
        if "canonical" in _rel(attrs).split():
            href = attrs.get("href", "").strip()
            return True, href or None
    return False, None


def has_hreflang(links: list[dict[str, str]]) -> bool:
    return any(attrs.get("hreflang", "").strip() for attrs in links)


@dataclass(frozen=True)
class HtmlFacts:
    word_count: int = 0
    has_favicon: bool = False
    og_tags: list[OgTag] = field(default_factory=list)
    twitter_tags: list[TwitterTag] = field(default_factory=list)
    schema_count: int = 0
    has_canonical: bool = False
    canonical_url: str | None = None
    has_hreflang: bool = False


def extract_facts(html: str) -> HtmlFacts:
    if not html:
        return HtmlFacts()
    metas = meta_tags(html)
    links = link_tags(html)
    has_canonical, canonical = canonical_url(links)
    return HtmlFacts(
        word_count=word_count(html),
        has_favicon=has_favicon(links),
        og_tags=og_tags(metas),
        twitter_tags=twitter_tags(metas),
        schema_count=schema_count(html),
        has_canonical=has_canonical,
        canonical_url=canonical,
        has_hreflang=has_hreflang(links),
    )


# Lookups used by the free tools.

def meta_content(html: str, key: str, attr: str = "name") -> str | None:
    """Content of the first ``<meta {attr}="{key}">``, matched case-insensitively."""
    wanted = key.lower()
    for attrs in meta_tags(html):
        if attrs.get(attr, "").lower() == wanted and "content" in attrs:
            return attrs["content"]
    return None


def title(html: str) -> str | None:
    m = _TITLE_RE.search(html or "")
    if not m:
        return None
    return m.group(1).strip() or None


def html_lang(html: str) -> str | None:
    m = _HTML_OPEN_RE.search(html or "")
    if not m:
        return None
    return parse_attrs(m.group(0)).get("lang") or None


def charset(html: str) -> str | None:
    for attrs in meta_tags(html):
        if attrs.get("charset"):
            return attrs["charset"]
    m = _CHARSET_FALLBACK_RE.search(html or "")
    return m.group(1) if m else None
