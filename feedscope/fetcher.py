"""
HTTP fetch adapter.

Fetches page and feed text over HTTP. The crawler only depends on the
Fetcher protocol, so any object with a matching ``fetch`` can be injected.
Fetchers that also implement ConditionalFetcher let feed loading skip
unchanged feeds via ETag / Last-Modified validators.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar, runtime_checkable

import httpx

from .config import settings
from .exceptions import FetchError
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Response headers worth sending back as validators on the next request
CACHE_HEADERS = ("etag", "last-modified")


class Fetcher(Protocol):
    """Fetch capability used by the discovery crawler."""

    async def fetch(self, url: str, cancel: asyncio.Event | None = None) -> str:
        """Return the body text at ``url`` or raise FetchError."""
        ...


@runtime_checkable
class ConditionalFetcher(Protocol):
    """Fetch capability honouring HTTP cache validators."""

    async def fetch_conditional(
        self,
        url: str,
        etag: str | None = None,
        last_modified: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> tuple[str, dict[str, str]] | None:
        """Return body text and cache headers, or None when not modified."""
        ...


class HttpxFetcher:
    """Fetcher backed by httpx, with connection retries and redirects."""

    def __init__(
        self,
        timeout: float | None = None,
        retries: int | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize fetcher.

        Args:
            timeout: Request timeout in seconds.
            retries: Connection retries per request.
            user_agent: User-Agent header value.
            transport: Optional transport override (used by tests).
        """
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.retries = retries if retries is not None else settings.fetch_retries
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport

    def _client(self, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent, **(headers or {})},
            transport=self._transport or httpx.AsyncHTTPTransport(retries=self.retries),
        )

    async def fetch(self, url: str, cancel: asyncio.Event | None = None) -> str:
        """
        Fetch text content.

        Args:
            url: URL to fetch.
            cancel: Optional cancellation signal. Setting it fails pending
                and future fetches with FetchError.

        Returns:
            Response body text.

        Raises:
            FetchError: If the request fails, returns a non-2xx status or
                is cancelled.
        """
        response = await self._cancellable(url, cancel, lambda: self._get(url))
        return response.text

    async def fetch_conditional(
        self,
        url: str,
        etag: str | None = None,
        last_modified: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> tuple[str, dict[str, str]] | None:
        """
        Fetch feed content with conditional request support.

        Args:
            url: Feed URL.
            etag: Optional ETag from a previous response.
            last_modified: Optional Last-Modified from a previous response.
            cancel: Optional cancellation signal.

        Returns:
            Body text and the response's cache headers, or None if the
            server answered 304 Not Modified.

        Raises:
            FetchError: If the request fails or is cancelled.
        """
        validators = {}
        if etag:
            validators["If-None-Match"] = etag
        if last_modified:
            validators["If-Modified-Since"] = last_modified

        response = await self._cancellable(url, cancel, lambda: self._get(url, validators))
        if response.status_code == 304:
            logger.debug("Not modified", extra={"url": url})
            return None

        cache_headers = {name: response.headers[name] for name in CACHE_HEADERS if name in response.headers}
        return response.text, cache_headers

    async def _cancellable(
        self,
        url: str,
        cancel: asyncio.Event | None,
        request: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``request`` unless ``cancel`` is or becomes set first."""
        if cancel is not None and cancel.is_set():
            raise FetchError(url, "cancelled")

        if cancel is None:
            return await request()

        task = asyncio.ensure_future(request())
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        logger.debug("Fetch cancelled", extra={"url": url})
        raise FetchError(url, "cancelled")

    async def _get(self, url: str, validators: dict[str, str] | None = None) -> httpx.Response:
        async with self._client(validators) as client:
            try:
                response = await client.get(url)
                # 304 only answers a conditional request
                if not (validators and response.status_code == 304):
                    response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise FetchError(url, str(e)) from e

        logger.debug("Fetched", extra={"url": url, "status": response.status_code})
        return response
