"""
OPML expansion.

Flattens OPML subscription lists into the feed references they contain.
"""

from dataclasses import dataclass

from .document import Document, Element

# Feed reference attribute; some exporters lowercase it
_XML_URL_ATTRS = ("xmlUrl", "xmlurl")


@dataclass(frozen=True)
class OutlineEntry:
    """A feed reference from an OPML outline."""

    xml_url: str
    # Subscription name as the exporting reader labelled it
    title: str | None = None


def _xml_url(outline: Element) -> str | None:
    for attr in _XML_URL_ATTRS:
        value = (outline.attr(attr) or "").strip()
        if value:
            return value
    return None


def parse_opml(document: Document) -> list[OutlineEntry]:
    """
    Collect feed references from an OPML document.

    Outlines are visited depth-first in document order, so folder nesting
    is flattened. Outlines without a feed URL (folders) are skipped and
    duplicates are kept.

    Args:
        document: Parsed OPML document.

    Returns:
        Outline entries in document order.
    """
    entries = []
    for outline in document.select("opml > body outline"):
        xml_url = _xml_url(outline)
        if xml_url is None:
            continue

        title = (outline.attr("title") or outline.attr("text") or "").strip()
        entries.append(OutlineEntry(xml_url=xml_url, title=title or None))

    return entries


def expand_opml(document: Document) -> list[str]:
    """Feed URLs referenced by an OPML document, in document order."""
    return [entry.xml_url for entry in parse_opml(document)]
