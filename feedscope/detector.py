"""
Feed format detection.

Classifies a parsed document as an RSS/Atom channel, an OPML outline
document, or neither, and pulls the minimal channel metadata needed
while crawling.
"""

from enum import Enum

from .document import Document, Element
from .models import ChannelMeta

CHANNEL_ROOT_QUERY = "feed, rss"
CHANNEL_QUERY = "feed, channel"


class FeedFormat(str, Enum):
    CHANNEL = "channel"
    OPML = "opml"
    UNKNOWN = "unknown"


def is_channel(document: Document) -> bool:
    """A channel document has exactly one ``feed`` or ``rss`` element."""
    return len(document.select(CHANNEL_ROOT_QUERY)) == 1


def is_opml(document: Document) -> bool:
    root = document.root
    return root.name == "opml" and bool(root.select("body outline"))


def detect_format(document: Document) -> FeedFormat:
    """
    Classify a document.

    Zero or several channel roots is not an error, only UNKNOWN, so that
    callers fall back to link harvesting.
    """
    if is_channel(document):
        return FeedFormat.CHANNEL
    if is_opml(document):
        return FeedFormat.OPML
    return FeedFormat.UNKNOWN


def channel_element(document: Document) -> Element | None:
    """The first ``channel`` (RSS) or ``feed`` (Atom) element."""
    found = document.select(CHANNEL_QUERY)
    return found[0] if found else None


def get_channel_meta(document: Document) -> ChannelMeta:
    """
    Extract title and description from the channel's direct children.

    Description is the first of ``description`` or ``subtitle`` in
    document order; nested item titles are never considered.
    """
    channel = channel_element(document)
    if channel is None:
        return ChannelMeta()

    title = channel.first_child("title")
    description = channel.first_child("description, subtitle")

    return ChannelMeta(
        title=title.text().strip() if title is not None else "",
        description=(description.text().strip() or None) if description is not None else None,
    )
