"""Async HTTP client helpers for outbound feed requests."""

from typing import AsyncGenerator
from urllib.parse import urlsplit

import httpx

from app.config import settings


def new_feed_client() -> httpx.AsyncClient:
    """Build a plain client: no custom headers, redirects followed."""
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=True,
    )

async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Yield a request-scoped HTTP client, closed when the request finishes."""
    async with new_feed_client() as client:
        yield client

def describe_feed_url(url: str) -> str:
    """Return a sanitized, human-readable description of a feed URL for logging.

    Example: "https://feeds.example.com/show/rss"
    Credentials and query strings are never included.
    """
    try:
        u = urlsplit(url)
        host = u.hostname or "?"
        port = f":{u.port}" if u.port else ""
        return f"{u.scheme or '?'}://{host}{port}{u.path}"
    except ValueError:
        # On parse failure, do not log the raw URL; hint only
        return "<unparseable feed URL>"
