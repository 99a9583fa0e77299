# src/search/adapters/http_client.py — v1
"""Shared httpx client builder and HTML-to-text helpers.

Every adapter takes an injected `httpx.AsyncClient`, so tests can swap in
`httpx.MockTransport` and hosts control connection pooling and lifetime.
"""

from __future__ import annotations

import html as html_lib
import re

import httpx
from bs4 import BeautifulSoup

from originality.config.settings import Settings

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_NON_CONTENT_TAGS = ("script", "style", "noscript", "header", "footer", "nav", "iframe")


def build_async_client(
    settings: Settings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with browser-like headers and timeouts."""
    settings = settings or Settings()
    headers: dict[str, str] = {
        "User-Agent": settings.http_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": settings.http_accept_language,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_s),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def strip_html_tags(text: str) -> str:
    """Remove tags (e.g. <b>, <mark>) and decode entities in search titles/snippets."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", html_lib.unescape(_TAG.sub("", text))).strip()


def html_to_text(markup: str) -> str:
    """Readable body text of an HTML page, whitespace-collapsed."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    return _WHITESPACE.sub(" ", soup.get_text(" ", strip=True)).strip()


def parse_retry_after(value: str | None) -> float | None:
    """Seconds from a numeric Retry-After header; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
