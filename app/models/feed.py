"""RSS 2.0 + iTunes podcast document models.

The XML bindings use hyphenated tag names (``itunes-author``) because feed
bytes are run through ``normalize_namespaces`` before decoding. JSON output
uses the camelCase ``serialization_alias`` of each field.
"""

from typing import Any, ClassVar, Optional

from pydantic import (
    SerializationInfo,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
)
from pydantic_xml import BaseXmlModel, attr, element


def _lenient_int(value: Any) -> Optional[int]:
    """Coerce feed text to int, treating blank or non-numeric text as absent."""
    if value is None or isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


class FeedElement(BaseXmlModel, search_mode="unordered"):
    """Base for every feed record.

    Fields listed in ``always_emit`` are serialized even when empty; every
    other field is dropped from the dump when absent or blank.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_absent(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if name in self.always_emit:
                continue
            key = field.serialization_alias if info.by_alias and field.serialization_alias else name
            if key in data and _is_absent(data[key]):
                del data[key]
        return data


class AtomLink(FeedElement, tag="atom-link", search_mode="unordered"):
    href: Optional[str] = attr(name="href", default=None)
    rel: Optional[str] = attr(name="rel", default=None)
    type: Optional[str] = attr(name="type", default=None)


class ItunesOwner(FeedElement, tag="itunes-owner", search_mode="unordered"):
    name: Optional[str] = element(tag="itunes-name", default=None, serialization_alias="itunesName")
    email: Optional[str] = element(tag="itunes-email", default=None, serialization_alias="itunesEmail")


class Enclosure(FeedElement, tag="enclosure", search_mode="unordered"):
    """Downloadable media attached to an item.

    ``length`` is kept as an int and formatted as a string only when dumped.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset({"url"})

    url: str = attr(name="url", default="")
    length: Optional[int] = attr(name="length", default=None)
    type: Optional[str] = attr(name="type", default=None)

    @field_validator("length", mode="before")
    @classmethod
    def _parse_length(cls, value: Any) -> Optional[int]:
        return _lenient_int(value)

    @field_serializer("length")
    def _format_length(self, length: Optional[int]) -> Optional[str]:
        return None if length is None else str(length)


class ItunesCategory(FeedElement, tag="itunes-category", search_mode="unordered"):
    """iTunes category node; sub-categories nest under their parent."""

    always_emit: ClassVar[frozenset[str]] = frozenset({"text"})

    text: str = attr(name="text", default="")
    sub_categories: list["ItunesCategory"] = element(
        tag="itunes-category", default_factory=list, serialization_alias="subCategories"
    )


ItunesCategory.model_rebuild()


class ItunesImage(FeedElement, tag="itunes-image", search_mode="unordered"):
    href: Optional[str] = attr(name="href", default=None)


class ItunesSummary(FeedElement, tag="itunes-summary", search_mode="unordered"):
    text: Optional[str] = None


class Image(FeedElement, tag="image", search_mode="unordered"):
    url: Optional[str] = element(tag="url", default=None)
    title: Optional[str] = element(tag="title", default=None)
    link: Optional[str] = element(tag="link", default=None)
    description: Optional[str] = element(tag="description", default=None)
    width: Optional[int] = element(tag="width", default=None)
    height: Optional[int] = element(tag="height", default=None)

    @field_validator("width", "height", mode="before")
    @classmethod
    def _parse_dimension(cls, value: Any) -> Optional[int]:
        return _lenient_int(value)


class TextInput(FeedElement, tag="textInput", search_mode="unordered"):
    title: Optional[str] = element(tag="title", default=None)
    description: Optional[str] = element(tag="description", default=None)
    name: Optional[str] = element(tag="name", default=None)
    link: Optional[str] = element(tag="link", default=None)


class Cloud(FeedElement, tag="cloud", search_mode="unordered"):
    domain: Optional[str] = attr(name="domain", default=None)
    port: Optional[str] = attr(name="port", default=None)
    path: Optional[str] = attr(name="path", default=None)
    register_procedure: Optional[str] = attr(
        name="registerProcedure", default=None, serialization_alias="registerProcedure"
    )
    protocol: Optional[str] = attr(name="protocol", default=None)


class SkipHours(FeedElement, tag="skipHours", search_mode="unordered"):
    hours: list[int] = element(tag="hour", default_factory=list)

    @field_validator("hours", mode="before")
    @classmethod
    def _parse_hours(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        hours = (_lenient_int(hour) for hour in value)
        return [hour for hour in hours if hour is not None]


class SkipDays(FeedElement, tag="skipDays", search_mode="unordered"):
    days: list[str] = element(tag="day", default_factory=list)


class Item(FeedElement, tag="item", search_mode="unordered"):
    """A single published episode."""

    always_emit: ClassVar[frozenset[str]] = frozenset({"guid", "title", "link", "description"})

    guid: str = element(tag="guid", default="")
    title: str = element(tag="title", default="")
    link: str = element(tag="link", default="")
    description: str = element(tag="description", default="")
    author: Optional[str] = element(tag="author", default=None)
    category: Optional[str] = element(tag="category", default=None)
    comments: Optional[str] = element(tag="comments", default=None)
    source: Optional[str] = element(tag="source", default=None)
    pub_date: Optional[str] = element(tag="pubDate", default=None, serialization_alias="publishDate")
    enclosure: Optional[Enclosure] = element(tag="enclosure", default=None)

    # https://help.apple.com/itc/podcasts_connect/#/itcb54353390
    itunes_author: Optional[str] = element(tag="itunes-author", default=None, serialization_alias="itunesAuthor")
    itunes_subtitle: Optional[str] = element(tag="itunes-subtitle", default=None, serialization_alias="itunesSubtitle")
    itunes_summary: Optional[ItunesSummary] = element(tag="itunes-summary", default=None, serialization_alias="itunesSummary")
    itunes_image: Optional[ItunesImage] = element(tag="itunes-image", default=None, serialization_alias="itunesImage")
    itunes_duration: Optional[str] = element(tag="itunes-duration", default=None, serialization_alias="itunesDuration")
    itunes_explicit: Optional[str] = element(tag="itunes-explicit", default=None, serialization_alias="itunesExplicit")
    itunes_is_closed_captioned: Optional[str] = element(
        tag="itunes-isClosedCaptioned", default=None, serialization_alias="itunesIsClosedCaptioned"
    )
    itunes_order: Optional[str] = element(tag="itunes-order", default=None, serialization_alias="itunesOrder")
    itunes_season: Optional[str] = element(tag="itunes-season", default=None, serialization_alias="itunesSeason")
    itunes_episode: Optional[str] = element(tag="itunes-episode", default=None, serialization_alias="itunesEpisode")
    itunes_episode_type: Optional[str] = element(
        tag="itunes-episodeType", default=None, serialization_alias="itunesEpisodeType"
    )


class Channel(FeedElement, tag="channel", search_mode="unordered"):
    """Podcast channel: show metadata plus its items in feed order."""

    always_emit: ClassVar[frozenset[str]] = frozenset({"title", "link", "description", "items"})

    title: str = element(tag="title", default="")
    link: str = element(tag="link", default="")
    description: str = element(tag="description", default="")
    category: Optional[str] = element(tag="category", default=None)
    cloud: Optional[Cloud] = element(tag="cloud", default=None)
    copyright: Optional[str] = element(tag="copyright", default=None)
    docs: Optional[str] = element(tag="docs", default=None)
    generator: Optional[str] = element(tag="generator", default=None)
    language: Optional[str] = element(tag="language", default=None)
    last_build_date: Optional[str] = element(tag="lastBuildDate", default=None, serialization_alias="lastBuildDate")
    managing_editor: Optional[str] = element(tag="managingEditor", default=None, serialization_alias="managingEditor")
    pub_date: Optional[str] = element(tag="pubDate", default=None, serialization_alias="publishDate")
    rating: Optional[str] = element(tag="rating", default=None)
    skip_hours: Optional[SkipHours] = element(tag="skipHours", default=None, serialization_alias="skipHours")
    skip_days: Optional[SkipDays] = element(tag="skipDays", default=None, serialization_alias="skipDays")
    ttl: Optional[int] = element(tag="ttl", default=None, serialization_alias="timeToLive")
    web_master: Optional[str] = element(tag="webMaster", default=None, serialization_alias="webMaster")
    image: Optional[Image] = element(tag="image", default=None)
    text_input: Optional[TextInput] = element(tag="textInput", default=None, serialization_alias="textInput")
    atom_link: Optional[AtomLink] = element(tag="atom-link", default=None, serialization_alias="atomLink")

    itunes_author: Optional[str] = element(tag="itunes-author", default=None, serialization_alias="itunesAuthor")
    itunes_subtitle: Optional[str] = element(tag="itunes-subtitle", default=None, serialization_alias="itunesSubtitle")
    itunes_summary: Optional[ItunesSummary] = element(tag="itunes-summary", default=None, serialization_alias="itunesSummary")
    itunes_block: Optional[str] = element(tag="itunes-block", default=None, serialization_alias="itunesBlock")
    itunes_image: Optional[ItunesImage] = element(tag="itunes-image", default=None, serialization_alias="itunesImage")
    itunes_duration: Optional[str] = element(tag="itunes-duration", default=None, serialization_alias="itunesDuration")
    itunes_explicit: Optional[str] = element(tag="itunes-explicit", default=None, serialization_alias="itunesExplicit")
    itunes_complete: Optional[str] = element(tag="itunes-complete", default=None, serialization_alias="itunesComplete")
    itunes_new_feed_url: Optional[str] = element(
        tag="itunes-new-feed-url", default=None, serialization_alias="itunesNewFeedUrl"
    )
    itunes_owner: Optional[ItunesOwner] = element(tag="itunes-owner", default=None, serialization_alias="itunesOwner")
    # items and categories are read in document order by decode_feed
    itunes_categories: list[ItunesCategory] = element(
        tag="itunes-category", default_factory=list, serialization_alias="itunesCategories"
    )

    items: list[Item] = element(tag="item", default_factory=list)

    @field_validator("ttl", mode="before")
    @classmethod
    def _parse_ttl(cls, value: Any) -> Optional[int]:
        return _lenient_int(value)

    @field_serializer("skip_hours")
    def _flatten_skip_hours(self, skip_hours: Optional[SkipHours]) -> Optional[list[int]]:
        return skip_hours.hours if skip_hours is not None else None

    @field_serializer("skip_days")
    def _flatten_skip_days(self, skip_days: Optional[SkipDays]) -> Optional[list[str]]:
        return skip_days.days if skip_days is not None else None


class Rss(FeedElement, tag="rss", search_mode="unordered"):
    """Feed document root: exactly one channel."""

    always_emit: ClassVar[frozenset[str]] = frozenset({"channel"})

    channel: Channel = element(tag="channel", serialization_alias="podcast")
