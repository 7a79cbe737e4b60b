"""
RSS feed discovery.

Crawls from a seed URL to the feed documents it references:

1. A feed document is returned as is.
2. An OPML document yields the feeds it lists.
3. Any other page is scanned for feed-like links on the same site, which
   are followed recursively up to a depth ceiling.
"""

import asyncio
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, replace
from urllib.parse import urljoin, urlsplit, urlunsplit

from .config import settings
from .detector import FeedFormat, detect_format, get_channel_meta, is_channel
from .document import parse_document
from .exceptions import (
    DiscoveryError,
    FetchError,
    InvalidUrlError,
    MaxDepthExceededError,
    NoLinksFoundError,
)
from .fetcher import Fetcher, HttpxFetcher
from .links import parse_links
from .logging_config import get_logger
from .models import DiscoveredFeed
from .opml import parse_opml

logger = get_logger(__name__)

# A link counts as same-site when its hostname contains this many trailing
# characters of the current page's hostname. Approximate: short or numeric
# hostnames can match too loosely or not at all.
SAME_SITE_SUFFIX_LENGTH = 5


def normalize_href(url: str) -> str:
    """
    Lowercase scheme and host and drop trailing slashes.

    Raises:
        InvalidUrlError: If the URL cannot be split, e.g. an unbalanced IPv6 bracket.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise InvalidUrlError(url, f"Invalid URL {url!r}: {e}") from e
    normalized = urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, parts.fragment)
    )
    return normalized.rstrip("/")


def href_to_compare(url: str) -> str:
    """Key used to deduplicate discovered feeds."""
    return normalize_href(url).replace("www.", "", 1)


def hostname(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def resolve_href(base: str, href: str) -> str | None:
    """Absolute URL for ``href`` found on ``base``, or None when it is malformed."""
    try:
        return urljoin(base, href)
    except ValueError:
        logger.debug("Skipped malformed href", extra={"url": base, "href": href})
        return None


@dataclass(frozen=True)
class RecursionState:
    """
    Crawl-local state threaded through recursive calls.

    Immutable: each call derives its own copy, so concurrently explored
    siblings never observe each other's visits while every branch still
    carries its full ancestor chain.
    """

    depth: int = 0
    visited: frozenset[str] = frozenset()
    anchor_host: str | None = None

    def visit(self, href: str) -> "RecursionState":
        return replace(self, visited=self.visited | {href})

    def descend(self, host: str) -> "RecursionState":
        """State for links followed from a page on ``host``."""
        return replace(self, depth=self.depth + 1, anchor_host=self.anchor_host or host)


class FeedDiscoverer:
    """Discovers feeds reachable from a URL."""

    def __init__(self, fetcher: Fetcher | None = None, max_depth: int | None = None):
        """
        Initialize discoverer.

        Args:
            fetcher: Fetch adapter. Defaults to HttpxFetcher.
            max_depth: Recursion ceiling, at least 1.
        """
        self.fetcher = fetcher or HttpxFetcher()
        self.max_depth = max_depth if max_depth is not None else settings.max_depth
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    async def discover(
        self,
        url: str,
        cancel: asyncio.Event | None = None,
        state: RecursionState | None = None,
    ) -> list[DiscoveredFeed]:
        """
        Discover feeds starting from ``url``.

        Args:
            url: Page, feed or OPML URL.
            cancel: Optional cancellation signal shared by the whole crawl.
            state: Recursion state; a fresh one is created for top-level calls.

        Returns:
            Deduplicated feeds in traversal order. Empty when every explored
            branch failed.

        Raises:
            MaxDepthExceededError: Depth ceiling reached or URL already visited.
            InvalidUrlError: URL is malformed or could not be fetched.
            NoLinksFoundError: Page is not a feed and has no same-site feed links.
        """
        state = state or RecursionState()

        href = normalize_href(url)
        if state.depth >= self.max_depth or href in state.visited:
            raise MaxDepthExceededError(url)

        text = await self._fetch(url, cancel)
        state = state.visit(href)

        document = parse_document(text)
        feed_format = detect_format(document)
        logger.debug(
            "Classified document",
            extra={"url": url, "format": feed_format.value, "depth": state.depth},
        )

        if feed_format is FeedFormat.CHANNEL:
            return [DiscoveredFeed(url=url, raw_document=text, content=get_channel_meta(document))]

        if feed_format is FeedFormat.OPML:
            entries = [
                (feed_url, entry.title)
                for entry in parse_opml(document)
                if (feed_url := resolve_href(url, entry.xml_url)) is not None
            ]
            return await self._gather(
                self._fetch_channel(feed_url, cancel, state, title)
                for feed_url, title in entries
            )

        host = hostname(url)
        if state.anchor_host and state.anchor_host not in host:
            logger.debug("Page left the anchor site", extra={"url": url, "anchor": state.anchor_host})
            return []

        same_site = host[-SAME_SITE_SUFFIX_LENGTH:]
        candidates = [
            link
            for link in (resolve_href(url, href) for href in parse_links(document))
            if link is not None and same_site in hostname(link)
        ]
        if not candidates:
            raise NoLinksFoundError(url)

        child_state = state.descend(host)
        if len(candidates) == 1:
            return await self.discover(candidates[0], cancel, child_state)

        return await self._gather(self.discover(link, cancel, child_state) for link in candidates)

    async def _fetch(self, url: str, cancel: asyncio.Event | None) -> str:
        if not normalize_href(url).startswith(("http://", "https://")):
            raise InvalidUrlError(url)

        try:
            return await self.fetcher.fetch(url, cancel)
        except FetchError as e:
            raise InvalidUrlError(url, str(e)) from e

    async def _fetch_channel(
        self,
        url: str,
        cancel: asyncio.Event | None,
        state: RecursionState,
        outline_title: str | None = None,
    ) -> list[DiscoveredFeed]:
        """
        Fetch an OPML entry, which is expected to be a feed; no links are followed.

        The outline's title stands in when the channel itself has none.
        """
        if normalize_href(url) in state.visited:
            raise MaxDepthExceededError(url)

        text = await self._fetch(url, cancel)
        document = parse_document(text)
        if not is_channel(document):
            raise NoLinksFoundError(url, f"OPML entry is not a feed: {url}")

        content = get_channel_meta(document)
        if not content.title and outline_title:
            content = content.model_copy(update={"title": outline_title})

        return [DiscoveredFeed(url=url, raw_document=text, content=content)]

    async def _gather(
        self, branches: Iterable[Awaitable[list[DiscoveredFeed]]]
    ) -> list[DiscoveredFeed]:
        """Run branches concurrently, keep the successful ones, dedupe by URL."""
        results = await asyncio.gather(*branches, return_exceptions=True)

        feeds: list[DiscoveredFeed] = []
        seen: set[str] = set()
        for result in results:
            if isinstance(result, DiscoveryError):
                logger.debug(
                    "Discarded discovery branch",
                    extra={"url": result.url, "error": result.code},
                )
                continue
            if isinstance(result, BaseException):
                raise result

            for feed in result:
                key = href_to_compare(feed.url)
                if key in seen:
                    continue
                seen.add(key)
                feeds.append(feed)

        return feeds


async def discover_feeds(
    url: str,
    cancel: asyncio.Event | None = None,
    fetcher: Fetcher | None = None,
    max_depth: int | None = None,
) -> list[DiscoveredFeed]:
    """
    Discover feeds reachable from a URL.

    Args:
        url: URL to discover feeds from.
        cancel: Optional cancellation signal.
        fetcher: Optional fetch adapter.
        max_depth: Optional recursion ceiling.

    Returns:
        Discovered feeds, possibly empty.

    Raises:
        DiscoveryError: If the seed URL itself fails.
    """
    discoverer = FeedDiscoverer(fetcher=fetcher, max_depth=max_depth)
    return await discoverer.discover(url, cancel)
