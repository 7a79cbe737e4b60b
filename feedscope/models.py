"""
Feed models.

Canonical representation of RSS 2.0 / Atom channels and the results of
feed discovery. Python attributes are snake_case; JSON output uses the
camelCase and namespaced names via ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeedModel(BaseModel):
    """Base for all feed models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Category(FeedModel):
    value: str | None = None
    domain: str | None = None


class Guid(FeedModel):
    value: str | None = None
    is_perma_link: str | None = None


class Enclosure(FeedModel):
    url: str | None = None
    length: str | None = None
    type: str | None = None


class Source(FeedModel):
    """The RSS channel an item came from."""

    value: str | None = None
    url: str | None = None


class Image(FeedModel):
    """Channel image (RSS ``image``, Atom ``logo``/``icon``)."""

    url: str | None = None
    title: str | None = None
    link: str | None = None
    width: str | None = None
    height: str | None = None
    description: str | None = None


class Cloud(FeedModel):
    """Publish-subscribe endpoint for update notifications."""

    domain: str | None = None
    path: str | None = None
    port: str | None = None
    protocol: str | None = None
    register_procedure: str | None = None


class TextInput(FeedModel):
    title: str | None = None
    description: str | None = None
    name: str | None = None
    link: str | None = None


class AtomLink(FeedModel):
    href: str | None = None
    rel: str | None = None
    type: str | None = None
    title: str | None = None
    hreflang: str | None = None
    length: str | None = None


class ItemExtensions(FeedModel):
    """Values derived from an item rather than read from one element."""

    image_url: str | None = None


class Item(FeedModel):
    """A single feed item (RSS ``item`` or Atom ``entry``)."""

    title: str | None = None
    description: str | None = None
    link: str | None = None
    author: str | None = None
    pub_date: str | None = None
    updated: str | None = None
    comments: str | None = None
    categories: list[Category] | None = None
    guid: Guid | None = None
    enclosure: Enclosure | None = None
    source: Source | None = None

    dc_creator: str | None = Field(default=None, alias="dc:creator")
    trackback_about: str | None = Field(default=None, alias="trackback:about")
    trackback_ping: str | None = Field(default=None, alias="trackback:ping")
    creative_commons_license: str | None = Field(default=None, alias="creativeCommons:license")
    content_encoded: str | None = Field(default=None, alias="content:encoded")

    extensions: ItemExtensions = Field(default_factory=ItemExtensions)


class Feed(FeedModel):
    """A parsed channel; every field is optional."""

    title: str | None = None
    link: str | None = None
    description: str | None = None
    language: str | None = None
    copyright: str | None = None
    managing_editor: str | None = None
    web_master: str | None = None
    pub_date: str | None = None
    last_build_date: str | None = None
    generator: str | None = None
    docs: str | None = None
    rating: str | None = None
    ttl: str | None = None
    image: Image | None = None
    cloud: Cloud | None = None
    text_input: TextInput | None = None
    skip_hours: list[str] | None = None
    skip_days: list[str] | None = None
    categories: list[Category] | None = None
    rss_version: str | None = None

    content_encoded: str | None = Field(default=None, alias="content:encoded")
    creative_commons_license: str | None = Field(default=None, alias="creativeCommons:license")
    atom_link: AtomLink | None = Field(default=None, alias="atom:link")

    items: list[Item] = Field(default_factory=list)


class ChannelMeta(FeedModel):
    """Lightweight channel metadata used during discovery."""

    title: str = ""
    description: str | None = None


class DiscoveredFeed(FeedModel):
    """A feed document found while crawling."""

    url: str
    raw_document: str = Field(alias="feedXml")
    content: ChannelMeta = Field(default_factory=ChannelMeta)

    @property
    def title(self) -> str | None:
        return self.content.title or None

    @property
    def description(self) -> str | None:
        return self.content.description


class LoadedFeed(FeedModel):
    """A fetched and parsed feed together with its fingerprint."""

    url: str
    feed: Feed
    fingerprint: str
    last_build_date: str | None = None
    # Cache validators from the response, for the next conditional load
    etag: str | None = None
    last_modified: str | None = None
