"""
Feed link harvesting.

Finds ``<link>`` and ``<a>`` elements in an HTML page that look like they
reference a feed.
"""

from .document import Document

FEED_MIME_TYPES = ("application/rss+xml", "application/atom+xml")

RSS_LINK_QUERY = ", ".join(
    [
        *(f'[rel~="alternate" i][type="{mime}" i]' for mime in FEED_MIME_TYPES),
        '[href*="rss" i]',
        '[href*="feed" i]',
        '[href*="atom" i]',
        '[title*="rss" i]',
        '[title*="feed" i]',
        '[title*="atom" i]',
    ]
)


def parse_links(document: Document) -> list[str]:
    """
    Collect candidate feed hrefs from an HTML page.

    Hrefs are returned as written (relative or absolute), in document
    order. Elements without a non-empty href are skipped.

    Args:
        document: Parsed page.

    Returns:
        List of href strings.
    """
    links = []
    for tag in document.html().select(RSS_LINK_QUERY):
        if tag.name not in ("link", "a"):
            continue

        href = tag.get("href")
        if not isinstance(href, str) or not href.strip():
            continue

        links.append(href.strip())

    return links
