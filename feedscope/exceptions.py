"""
Feedscope exceptions.

All errors derive from ValueError so callers that treat fetch and
discovery failures as bad input keep working.
"""


class FeedscopeError(ValueError):
    """Base class for feedscope errors."""


class FetchError(FeedscopeError):
    """Fetching a URL failed (network error, non-2xx status or cancellation)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class DiscoveryError(FeedscopeError):
    """Feed discovery failed for a URL."""

    code = "discovery-error"

    def __init__(self, url: str, message: str | None = None):
        super().__init__(message or f"{self.code}: {url}")
        self.url = url


class NoLinksFoundError(DiscoveryError):
    """Page is neither a feed nor OPML and references no feed-like links."""

    code = "no-links"


class InvalidUrlError(DiscoveryError):
    """URL is malformed or could not be fetched."""

    code = "invalid-url"


class MaxDepthExceededError(DiscoveryError):
    """Recursion ceiling reached or URL already visited on this branch."""

    code = "max-depth"


class FeedParseError(FeedscopeError):
    """Document has no channel or feed root element."""
