from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

PAGESPEED_HOST = "www.googleapis.com"

Handler = Callable[[httpx.Request], httpx.Response]


def build_report(categories: dict[str, float | None] | None = None, audits: dict | None = None) -> dict:
    cats = {}
    for name, score in (categories or {}).items():
        cats[name] = {"id": name, "score": score}
    return {"lighthouseResult": {"categories": cats, "audits": audits or {}}}


def route_transport(routes: dict[tuple[str, str], Handler | httpx.Response]) -> httpx.MockTransport:
    """MockTransport dispatching on (host, path); unknown routes answer 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        target = routes.get((request.url.host, request.url.path))
        if target is None:
            return httpx.Response(404)
        if isinstance(target, httpx.Response):
            # routes may be hit more than once, hand out a fresh copy each time
            return httpx.Response(target.status_code, headers=target.headers, content=target.content)
        return target(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def report_payload():
    return build_report


@pytest.fixture
def make_transport():
    return route_transport


@pytest.fixture
def sample_html() -> str:
    body = " ".join(f"word{i}" for i in range(350))
    return f"""<!doctype html>
<html lang="en">
<head>
  <link rel="icon" href="/favicon.ico">
  <meta property="og:title" content="Example">
  <script>var ignored = "these words are not counted";</script>
  <style>body {{ color: red; }}</style>
</head>
<body><p>{body}</p></body>
</html>"""
