"""
RSS/Atom feed parser.

Maps channel documents of either dialect, plus the common namespaced
extensions, onto the Feed model. Each model is described by a table of
fields: name, selector list in fallback order, and a value transform.
One generic routine interprets the tables.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup

from .detector import channel_element
from .document import Document, Element, parse_document
from .exceptions import FeedParseError
from .models import (
    AtomLink,
    Category,
    Cloud,
    Enclosure,
    Feed,
    Guid,
    Image,
    Item,
    ItemExtensions,
    Source,
    TextInput,
)

Transform = Callable[[Element], Any]


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _text(element: Element) -> str | None:
    return _clean(element.text())


def _markup(element: Element) -> str | None:
    # Raw inner markup: entities and CDATA sections stay as written
    return _clean(element.inner_markup())


def _text_or_attr(*attrs: str) -> Transform:
    """Element text, falling back to the first non-empty attribute."""

    def transform(element: Element) -> str | None:
        value = _text(element)
        for attr in attrs:
            if value is not None:
                break
            value = _clean(element.attr(attr))
        return value

    return transform


_link = _text_or_attr("href")
_resource = _text_or_attr("rdf:resource")


@dataclass(frozen=True)
class FieldSpec:
    """How one model field is read from an element's direct children."""

    name: str
    selectors: tuple[str, ...]
    transform: Transform = _text
    many: bool = False


def field(name: str, *selectors: str, transform: Transform = _text, many: bool = False) -> FieldSpec:
    return FieldSpec(name, selectors, transform, many)


def _first(element: Element, spec: FieldSpec) -> Any:
    for selector in spec.selectors:
        for match in element.children(selector):
            value = spec.transform(match)
            if value is not None:
                return value
    return None


def extract(element: Element, fields: tuple[FieldSpec, ...]) -> dict[str, Any]:
    """
    Read every field of a table from ``element``.

    Single-valued fields take the first direct child that yields a value,
    trying selectors in order. Multi-valued fields collect all matching
    direct children in document order; none found yields None.
    """
    values: dict[str, Any] = {}
    for spec in fields:
        if spec.many:
            matches = element.children(", ".join(spec.selectors))
            found = [value for value in map(spec.transform, matches) if value is not None]
            values[spec.name] = found or None
        else:
            values[spec.name] = _first(element, spec)
    return values


# Structured fields


def _category(element: Element) -> Category:
    return Category(
        value=_markup(element) or _clean(element.attr("term")),
        domain=element.attr("domain") or element.attr("scheme"),
    )


def _guid(element: Element) -> Guid:
    return Guid(value=_markup(element), is_perma_link=element.attr("isPermaLink"))


def _enclosure(element: Element) -> Enclosure:
    return Enclosure(
        url=element.attr("url") or element.attr("href"),
        length=element.attr("length"),
        type=element.attr("type"),
    )


def _source(element: Element) -> Source:
    return Source(value=_markup(element), url=element.attr("url"))


def _cloud(element: Element) -> Cloud:
    return Cloud(
        domain=element.attr("domain"),
        path=element.attr("path"),
        port=element.attr("port"),
        protocol=element.attr("protocol"),
        register_procedure=element.attr("registerProcedure"),
    )


def _atom_link(element: Element) -> AtomLink:
    return AtomLink(
        href=element.attr("href"),
        rel=element.attr("rel"),
        type=element.attr("type"),
        title=element.attr("title"),
        hreflang=element.attr("hreflang"),
        length=element.attr("length"),
    )


IMAGE_FIELDS = (
    field("url", "url"),
    field("title", "title"),
    field("link", "link"),
    field("width", "width"),
    field("height", "height"),
    field("description", "description"),
)


def _image(element: Element) -> Image:
    if element.name == "image":
        return Image(**extract(element, IMAGE_FIELDS))
    # Atom logo/icon carry the URL as text
    return Image(url=_text(element))


TEXT_INPUT_FIELDS = (
    field("title", "title"),
    field("description", "description"),
    field("name", "name"),
    field("link", "link"),
)


def _text_input(element: Element) -> TextInput:
    return TextInput(**extract(element, TEXT_INPUT_FIELDS))


# Item image heuristics


def _is_image(element: Element) -> bool:
    media_type = (element.attr("type") or "").lower()
    return media_type.startswith("image/") or (element.attr("medium") or "").lower() == "image"


def _first_img_src(markup: str) -> str | None:
    if "<img" not in markup.lower():
        return None
    img = BeautifulSoup(markup, "lxml").find("img", src=True)
    return _clean(img["src"]) if img is not None else None


def find_image_url(item: Element) -> str | None:
    """
    Best single image for an item.

    Priority: ``itunes:image`` href, then an image-typed ``enclosure`` or
    ``media:content`` url, then the first ``<img src>`` inside
    ``content:encoded`` or ``description``.
    """
    for element in item.children(r"itunes\:image"):
        if url := _clean(element.attr("href")):
            return url

    for element in item.children(r"enclosure, media\:content"):
        if _is_image(element) and (url := _clean(element.attr("url"))):
            return url

    for selector in (r"content\:encoded", "description"):
        for element in item.children(selector):
            # Escaped HTML decodes through text(); embedded elements need the markup
            html = element.inner_markup() if element.children() else element.text()
            if url := _first_img_src(html):
                return url

    return None


ITEM_FIELDS = (
    field("title", "title", transform=_markup),
    field("description", "description", "summary", "content", transform=_markup),
    field("link", 'link:not([rel]), link[rel="alternate"]', "link", transform=_link),
    field("author", "author > name", "author"),
    field("pub_date", "pubDate", "published"),
    field("updated", "updated"),
    field("comments", "comments"),
    field("categories", "category", transform=_category, many=True),
    field("guid", "guid", "id", transform=_guid),
    field("enclosure", "enclosure", 'link[rel="enclosure"]', transform=_enclosure),
    field("source", "source", transform=_source),
    field("dc_creator", r"dc\:creator"),
    field("trackback_about", r"trackback\:about", transform=_resource),
    field("trackback_ping", r"trackback\:ping", transform=_resource),
    field("creative_commons_license", r"creativeCommons\:license"),
    field("content_encoded", r"content\:encoded", transform=_markup),
)


def _item(element: Element) -> Item:
    return Item(
        **extract(element, ITEM_FIELDS),
        extensions=ItemExtensions(image_url=find_image_url(element)),
    )


CHANNEL_FIELDS = (
    field("title", "title", transform=_markup),
    field("link", 'link:not([rel]), link[rel="alternate"]', "link", transform=_link),
    field("description", "description", "subtitle", transform=_markup),
    field("language", "language"),
    field("copyright", "copyright", "rights"),
    field("managing_editor", "managingEditor", "author > name"),
    field("web_master", "webMaster"),
    field("pub_date", "pubDate", "published"),
    field("last_build_date", "lastBuildDate", "updated"),
    field("generator", "generator"),
    field("docs", "docs"),
    field("rating", "rating"),
    field("ttl", "ttl"),
    field("image", "image", "logo", "icon", transform=_image),
    field("cloud", "cloud", transform=_cloud),
    field("text_input", "textInput", transform=_text_input),
    field("skip_hours", "skipHours > hour", many=True),
    field("skip_days", "skipDays > day", many=True),
    field("categories", "category", transform=_category, many=True),
    field("content_encoded", r"content\:encoded", transform=_markup),
    field("creative_commons_license", r"creativeCommons\:license"),
    field("atom_link", r"atom\:link", transform=_atom_link),
    field("items", "item", "entry", transform=_item, many=True),
)


def parse_feed(content: Document | str) -> Feed:
    """
    Parse an RSS or Atom document into a Feed.

    Every field is optional; only a missing channel/feed root is an error.

    Args:
        content: Parsed document or raw feed text.

    Returns:
        Parsed feed.

    Raises:
        FeedParseError: If there is no ``channel`` or ``feed`` element.
    """
    document = parse_document(content) if isinstance(content, str) else content

    channel = channel_element(document)
    if channel is None:
        raise FeedParseError("Failed to parse feed: no channel or feed element")

    values = extract(channel, CHANNEL_FIELDS)
    values["items"] = values["items"] or []

    rss = document.select("rss")
    if rss:
        values["rss_version"] = _clean(rss[0].attr("version"))

    return Feed(**values)
