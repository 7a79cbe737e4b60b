"""
Feed service.

Entry points for presentation layers: feed discovery that never fails
the caller, and single-feed loading with fingerprinting.
"""

import asyncio
from urllib.parse import urlsplit

from .detector import is_channel
from .discoverer import FeedDiscoverer
from .document import parse_document
from .exceptions import DiscoveryError, FeedParseError, FetchError, InvalidUrlError
from .fetcher import ConditionalFetcher, Fetcher, HttpxFetcher
from .fingerprint import feed_hash
from .logging_config import get_logger
from .models import DiscoveredFeed, LoadedFeed
from .parser import parse_feed

logger = get_logger(__name__)


def to_url(value: str | None) -> str:
    """
    Validate an absolute http(s) URL.

    Raises:
        InvalidUrlError: If the value is empty, relative, malformed or not http(s).
    """
    url = (value or "").strip()
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as e:
        raise InvalidUrlError(url, f"Invalid URL format: {value!r}") from e
    if parts.scheme not in ("http", "https") or not host:
        raise InvalidUrlError(url, f"Invalid URL format: {value!r}")
    return url


class FeedService:
    """Discover and load feeds."""

    def __init__(self, fetcher: Fetcher | None = None, max_depth: int | None = None):
        self.fetcher = fetcher or HttpxFetcher()
        self.discoverer = FeedDiscoverer(fetcher=self.fetcher, max_depth=max_depth)

    async def find_feeds(
        self, url: str | None, cancel: asyncio.Event | None = None
    ) -> list[DiscoveredFeed]:
        """
        Discover feeds for a user-supplied URL.

        Any discovery failure, including an invalid URL, resolves to an
        empty list.
        """
        try:
            feeds = await self.discoverer.discover(to_url(url), cancel)
        except DiscoveryError as e:
            logger.info("No feeds discovered", extra={"url": url, "error": e.code})
            return []

        logger.info("Discovered feeds", extra={"url": url, "count": len(feeds)})
        return feeds

    async def load_feed(
        self,
        url: str | None,
        cancel: asyncio.Event | None = None,
        etag: str | None = None,
        last_modified: str | None = None,
    ) -> LoadedFeed | None:
        """
        Fetch, parse and fingerprint one feed.

        When the fetcher supports conditional requests, ``etag`` and
        ``last_modified`` (taken from a previous LoadedFeed) are sent as
        validators and the new response's validators are recorded.

        Args:
            url: Feed URL.
            cancel: Optional cancellation signal.
            etag: Optional ETag from a previous load.
            last_modified: Optional Last-Modified from a previous load.

        Returns:
            Loaded feed, or None if the server reports it unchanged.

        Raises:
            InvalidUrlError: If the URL is malformed or cannot be fetched.
            FeedParseError: If the document is not an RSS/Atom channel.
        """
        feed_url = to_url(url)
        cache_headers: dict[str, str] = {}
        try:
            if isinstance(self.fetcher, ConditionalFetcher):
                result = await self.fetcher.fetch_conditional(feed_url, etag, last_modified, cancel)
                if result is None:
                    logger.info("Feed not modified", extra={"url": feed_url})
                    return None
                text, cache_headers = result
            else:
                text = await self.fetcher.fetch(feed_url, cancel)
        except FetchError as e:
            raise InvalidUrlError(feed_url, f"Failed to fetch from url: {e.reason}") from e

        document = parse_document(text)
        if not is_channel(document):
            raise FeedParseError(f"Is not a valid rss feed: {feed_url}")

        feed = parse_feed(document)
        return LoadedFeed(
            url=feed_url,
            feed=feed,
            fingerprint=feed_hash(feed),
            last_build_date=feed.last_build_date,
            etag=cache_headers.get("etag"),
            last_modified=cache_headers.get("last-modified"),
        )
