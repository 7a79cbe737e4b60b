"""
Feed discovery and parsing package.

Provides feed discovery from arbitrary URLs, RSS/Atom parsing into a
canonical model, OPML expansion and feed fingerprinting.
"""

__version__ = "0.1.0"

from .discoverer import FeedDiscoverer, RecursionState, discover_feeds
from .document import Document, Element, parse_document
from .exceptions import (
    DiscoveryError,
    FeedParseError,
    FeedscopeError,
    FetchError,
    InvalidUrlError,
    MaxDepthExceededError,
    NoLinksFoundError,
)
from .fetcher import ConditionalFetcher, Fetcher, HttpxFetcher
from .fingerprint import feed_hash
from .logging_config import get_logger, init_logging
from .models import DiscoveredFeed, Feed, Item, LoadedFeed
from .opml import OutlineEntry, expand_opml, parse_opml
from .parser import parse_feed
from .service import FeedService, to_url

__all__ = [
    "parse_feed",
    "parse_document",
    "Document",
    "Element",
    "Feed",
    "Item",
    "feed_hash",
    "discover_feeds",
    "FeedDiscoverer",
    "RecursionState",
    "DiscoveredFeed",
    "Fetcher",
    "HttpxFetcher",
    "ConditionalFetcher",
    "parse_opml",
    "expand_opml",
    "OutlineEntry",
    "FeedService",
    "LoadedFeed",
    "to_url",
    "FeedscopeError",
    "FetchError",
    "DiscoveryError",
    "NoLinksFoundError",
    "InvalidUrlError",
    "MaxDepthExceededError",
    "FeedParseError",
    "init_logging",
    "get_logger",
]
