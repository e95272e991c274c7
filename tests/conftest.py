"""Pytest fixtures: the app wired to a fake upstream feed host."""

from typing import AsyncGenerator, Optional, Union

import httpx
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport

FEED_URL = "https://feeds.example.com/draft-pod/rss"

SAMPLE_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <atom:link href="https://feeds.example.com/draft-pod/rss" rel="self" type="application/rss+xml"/>
    <title>Draft Pod</title>
    <link>https://example.com/draft-pod</link>
    <description><![CDATA[Weekly prospect talk.]]></description>
    <language>en-us</language>
    <copyright>2024 Draft Pod</copyright>
    <lastBuildDate>Mon, 01 Apr 2024 10:00:00 GMT</lastBuildDate>
    <ttl>60</ttl>
    <image>
      <url>https://example.com/art.png</url>
      <title>Draft Pod</title>
      <link>https://example.com/draft-pod</link>
      <width>144</width>
      <height>144</height>
    </image>
    <skipHours><hour>1</hour><hour>2</hour></skipHours>
    <itunes:author>Jane Host</itunes:author>
    <itunes:summary>All about the draft.</itunes:summary>
    <itunes:explicit>false</itunes:explicit>
    <itunes:image href="https://example.com/itunes.png"/>
    <itunes:owner>
      <itunes:name>Jane Host</itunes:name>
      <itunes:email>jane@example.com</itunes:email>
    </itunes:owner>
    <itunes:category text="Sports">
      <itunes:category text="Basketball"/>
      <itunes:category text="Fantasy Sports"/>
    </itunes:category>
    <itunes:category text="News"/>
    <itunes:new-feed-url>https://feeds.example.com/draft-pod/new</itunes:new-feed-url>
    <item>
      <title>Episode 2: Lottery Night</title>
      <link>https://example.com/draft-pod/2</link>
      <guid isPermaLink="false">ep-2</guid>
      <description>Lottery odds and fallout.</description>
      <pubDate>Mon, 01 Apr 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/ep2.mp3" length="12345678" type="audio/mpeg"/>
      <itunes:duration>45:30</itunes:duration>
      <itunes:season>1</itunes:season>
      <itunes:episode>2</itunes:episode>
      <itunes:episodeType>full</itunes:episodeType>
      <content:encoded><![CDATA[<p>Show notes at http://example.com/notes</p>]]></content:encoded>
    </item>
    <item>
      <title>Episode 1: Combine Week</title>
      <link>https://example.com/draft-pod/1</link>
      <guid>ep-1</guid>
      <description>Measurements and risers.</description>
    </item>
  </channel>
</rss>
"""


# Every modelled field, with channel fields after the items and categories
FULL_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"
     xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <item>
      <guid>full-1</guid>
      <title>Mock Draft 1.0</title>
      <link>https://example.com/draft-pod/full-1</link>
      <description>First round picks.</description>
      <author>jane@example.com (Jane Host)</author>
      <category>Sports</category>
      <comments>https://example.com/draft-pod/full-1#comments</comments>
      <source url="https://example.com/rss">Draft Wire</source>
      <pubDate>Tue, 02 Apr 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/full-1.mp3" length="2048" type="audio/mpeg"/>
      <itunes:author>Jane Host</itunes:author>
      <itunes:subtitle>Round one</itunes:subtitle>
      <itunes:summary>Every pick in round one.</itunes:summary>
      <itunes:image href="https://example.com/full-1.png"/>
      <itunes:duration>01:02:03</itunes:duration>
      <itunes:explicit>true</itunes:explicit>
      <itunes:isClosedCaptioned>Yes</itunes:isClosedCaptioned>
      <itunes:order>1</itunes:order>
      <itunes:season>2</itunes:season>
      <itunes:episode>7</itunes:episode>
      <itunes:episodeType>bonus</itunes:episodeType>
    </item>
    <itunes:category text="Sports"/>
    <title>Draft Pod</title>
    <link>https://example.com/draft-pod</link>
    <description>Weekly prospect talk.</description>
    <category>Basketball</category>
    <cloud domain="rpc.example.com" port="80" path="/RPC2" registerProcedure="pingMe" protocol="soap"/>
    <copyright>2024 Draft Pod</copyright>
    <docs>https://www.rssboard.org/rss-specification</docs>
    <generator>draft-pod-cms</generator>
    <language>en-us</language>
    <lastBuildDate>Tue, 02 Apr 2024 10:00:00 GMT</lastBuildDate>
    <managingEditor>jane@example.com (Jane Host)</managingEditor>
    <pubDate>Tue, 02 Apr 2024 09:00:00 GMT</pubDate>
    <rating>PG</rating>
    <skipHours><hour>0</hour><hour>23</hour></skipHours>
    <skipDays><day>Saturday</day><day>Sunday</day></skipDays>
    <ttl>30</ttl>
    <webMaster>ops@example.com (Ops)</webMaster>
    <image>
      <url>https://example.com/art.png</url>
      <title>Draft Pod</title>
      <link>https://example.com/draft-pod</link>
      <description>Cover art</description>
      <width>88</width>
      <height>31</height>
    </image>
    <textInput>
      <title>Search</title>
      <description>Search episodes</description>
      <name>q</name>
      <link>https://example.com/search</link>
    </textInput>
    <atom:link href="https://feeds.example.com/draft-pod/rss" rel="self" type="application/rss+xml"/>
    <itunes:author>Jane Host</itunes:author>
    <itunes:subtitle>Prospects, weekly</itunes:subtitle>
    <itunes:summary>All about the draft.</itunes:summary>
    <itunes:block>No</itunes:block>
    <itunes:image href="https://example.com/itunes.png"/>
    <itunes:duration>00:45:00</itunes:duration>
    <itunes:explicit>false</itunes:explicit>
    <itunes:complete>Yes</itunes:complete>
    <itunes:new-feed-url>https://feeds.example.com/draft-pod/new</itunes:new-feed-url>
    <itunes:owner>
      <itunes:name>Jane Host</itunes:name>
      <itunes:email>jane@example.com</itunes:email>
    </itunes:owner>
  </channel>
</rss>
"""


def make_rss(channel_body: str) -> bytes:
    """Wrap channel children in a minimal RSS document."""
    return (
        '<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">'
        f"<channel>{channel_body}</channel></rss>"
    ).encode()


class FakeFeedHost:
    """Upstream feed host served through ``httpx.MockTransport``.

    Unknown URLs fail with a connection error, like an unreachable host.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, Union[tuple[int, bytes], type[httpx.HTTPError]]] = {}

    def serve(self, url: str, body: bytes, status_code: int = 200) -> None:
        self._routes[url] = (status_code, body)

    def fail(self, url: str, error: type[httpx.HTTPError]) -> None:
        self._routes[url] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get(str(request.url))
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(route, tuple):
            status_code, body = route
            return httpx.Response(status_code, content=body)
        raise route("upstream failure", request=request)

    def client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler),
            timeout=timeout,
            follow_redirects=True,
        )


@pytest.fixture()
def feed_host() -> FakeFeedHost:
    """Provide an empty fake upstream host."""
    return FakeFeedHost()


@pytest_asyncio.fixture()
async def app_client(feed_host: FakeFeedHost) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client with the application wired to the fake feed host."""
    from app.main import app
    from app.utils.http_async import get_http_client

    async def _get_http_client_override() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with feed_host.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _get_http_client_override
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_http_client, None)
