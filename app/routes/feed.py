"""Podcast feed API routes.

Provides endpoints for:
- Fetching a remote feed as channel JSON
- Fetching a remote feed as the full RSS wrapper JSON
"""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.config import settings
from app.services.feed_errors import FeedInputError
from app.services.feed_service import encode_channel, encode_feed, load_feed
from app.utils.http_async import get_http_client

router = APIRouter(prefix="/api", tags=["feed"])


def resolve_feed_url(feed: Optional[str]) -> str:
    """Pick the requested feed URL, falling back to the configured default."""
    url = (feed or "").strip() or settings.default_feed_url
    if not url:
        raise FeedInputError("feed param empty")
    return url


@router.get("")
async def get_channel(
    feed: Optional[str] = Query(default=None, description="URL of the RSS feed"),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Fetch a podcast feed and return its channel as JSON."""
    rss = await load_feed(resolve_feed_url(feed), client)
    return Response(content=encode_channel(rss), media_type="application/json")


@router.get("/rss")
async def get_rss(
    feed: Optional[str] = Query(default=None, description="URL of the RSS feed"),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Fetch a podcast feed and return the whole document, channel under ``podcast``."""
    rss = await load_feed(resolve_feed_url(feed), client)
    return Response(content=encode_feed(rss), media_type="application/json")
