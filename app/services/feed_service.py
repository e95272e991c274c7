"""Podcast feed fetch and transform pipeline.

Fetches a remote RSS document, rewrites namespaced tag prefixes so the
decoder sees plain element names, maps the document onto the models in
``app.models.feed`` and encodes the result as JSON.
"""

import logging
import re
from urllib.parse import urlsplit

import httpx
from lxml import etree
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from app.models.feed import Item, ItunesCategory, Rss
from app.services.feed_errors import (
    FeedDecodeError,
    FeedFetchError,
    FeedInputError,
    FeedTimeoutError,
)
from app.utils.http_async import describe_feed_url

logger = logging.getLogger(__name__)

# "<itunes:" / "</itunes:" -> "<itunes-" / "</itunes-"; tag names only
_TAG_PREFIX_RE = re.compile(rb"<(/?)([a-z]*):")

# Elements whose children are records; every other element is read as text
_CONTAINER_TAGS = frozenset({
    "rss",
    "channel",
    "item",
    "image",
    "textInput",
    "cloud",
    "skipHours",
    "skipDays",
    "enclosure",
    "atom-link",
    "itunes-owner",
    "itunes-category",
    "itunes-image",
})


async def load_feed(url: str, client: httpx.AsyncClient) -> Rss:
    """Fetch, normalize and decode a podcast feed.

    Args:
        url: Feed URL to fetch
        client: HTTP client used for the outbound request

    Returns:
        Decoded feed document
    """
    target = describe_feed_url(url)
    logger.info(f"Fetching feed {target}")

    body = await fetch_feed(url, client)
    logger.debug(f"  Fetched {len(body)} bytes from {target}")

    rss = decode_feed(normalize_namespaces(body))
    logger.info(f"  Decoded {len(rss.channel.items)} item(s) from {target}")
    return rss


async def fetch_feed(url: str, client: httpx.AsyncClient) -> bytes:
    """GET a feed URL and return the raw response body.

    Args:
        url: Absolute http(s) URL of the feed
        client: HTTP client used for the request

    Returns:
        Response body bytes

    Raises:
        FeedInputError: URL is not a usable http(s) URL
        FeedTimeoutError: Upstream did not answer within the client timeout
        FeedFetchError: Network failure or non-2xx upstream status
    """
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError as exc:
        raise FeedInputError(f"invalid feed URL: {exc}") from exc
    if scheme not in ("http", "https"):
        raise FeedInputError(f"unsupported feed URL: {url}")

    try:
        # client.get reads the whole body and closes the response
        response = await client.get(url)
        response.raise_for_status()
    except httpx.InvalidURL as exc:
        raise FeedInputError(f"invalid feed URL: {exc}") from exc
    except httpx.TimeoutException as exc:
        raise FeedTimeoutError(f"timed out fetching {describe_feed_url(url)}") from exc
    except httpx.HTTPStatusError as exc:
        raise FeedFetchError(
            f"upstream returned {exc.response.status_code} for {describe_feed_url(url)}"
        ) from exc
    except httpx.HTTPError as exc:
        reason = str(exc) or type(exc).__name__
        raise FeedFetchError(f"failed to fetch {describe_feed_url(url)}: {reason}") from exc

    return response.content


def normalize_namespaces(data: bytes) -> bytes:
    """Replace the prefix colon of lowercase-namespaced tags with a hyphen.

    ``<itunes:author>`` becomes ``<itunes-author>`` and ``</itunes:author>``
    becomes ``</itunes-author>``. Only the colon directly after a ``<`` or
    ``</`` and a run of lowercase letters is touched, so attribute values and
    text such as ``http://example.com`` pass through unchanged.
    """
    return _TAG_PREFIX_RE.sub(rb"<\1\2-", data)


def decode_feed(data: bytes) -> Rss:
    """Parse normalized feed bytes into an ``Rss`` document.

    Elements without a counterpart in the models are ignored. Items and
    iTunes categories keep their document order.

    Raises:
        FeedDecodeError: Bytes are not well-formed XML, the root is not
            ``<rss>``, or the document has no ``<channel>``
    """
    parser = etree.XMLParser(
        resolve_entities=False, no_network=True, remove_comments=True, remove_pis=True
    )
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise FeedDecodeError(f"invalid feed XML: {exc}") from exc

    if root is None or etree.QName(root).localname != "rss":
        tag = "nothing" if root is None else f"<{root.tag}>"
        raise FeedDecodeError(f"expected an <rss> root element, got {tag}")

    _strip_default_namespace(root)
    _flatten_character_data(root)

    channel = root.find("channel")
    if channel is None:
        raise FeedDecodeError("invalid feed document: missing <channel>")

    # Repeated children are detached and decoded one by one; the model's
    # own search does not keep sibling order.
    item_elements = channel.findall("item")
    category_elements = channel.findall("itunes-category")
    for child in item_elements + category_elements:
        channel.remove(child)

    try:
        rss = Rss.from_xml_tree(root)
        rss.channel.items = [Item.from_xml_tree(el) for el in item_elements]
        rss.channel.itunes_categories = [_decode_category(el) for el in category_elements]
    except ValueError as exc:  # pydantic.ValidationError is a ValueError
        raise FeedDecodeError(f"invalid feed document: {exc}") from exc
    return rss


def _decode_category(el: etree._Element) -> ItunesCategory:
    return ItunesCategory(
        text=el.get("text", ""),
        sub_categories=[_decode_category(sub) for sub in el.findall("itunes-category")],
    )


def _strip_default_namespace(root: etree._Element) -> None:
    """Rename elements in the root's default namespace to their local names."""
    default_ns = root.nsmap.get(None)
    if not default_ns:
        return
    prefix = f"{{{default_ns}}}"
    for el in root.iter():
        if isinstance(el.tag, str) and el.tag.startswith(prefix):
            el.tag = el.tag[len(prefix):]


def _flatten_character_data(root: etree._Element) -> None:
    """Reduce text elements holding inline markup to their own character data.

    ``<description>Hi <b>bold</b> there</description>`` reads as
    ``"Hi  there"``: the element's text plus the tail of each child.
    """
    for el in list(root.iter()):
        if el.tag in _CONTAINER_TAGS or len(el) == 0:
            continue
        el.text = (el.text or "") + "".join(child.tail or "" for child in el)
        for child in list(el):
            el.remove(child)


def encode_channel(rss: Rss) -> str:
    """Encode only the channel of a feed as camelCase JSON."""
    return _dump_json(rss.channel)


def encode_feed(rss: Rss) -> str:
    """Encode the whole feed, channel under ``podcast``, as camelCase JSON."""
    return _dump_json(rss)


def _dump_json(model: BaseModel) -> str:
    try:
        return model.model_dump_json(by_alias=True)
    except PydanticSerializationError as exc:
        raise FeedDecodeError(f"failed to encode feed: {exc}") from exc
