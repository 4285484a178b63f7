"""
HTTP fetching for feeds and article pages.

Feeds and articles are both fetched as raw bytes through a shared
httpx.AsyncClient. The client follows redirects, respects environment proxy
settings when trust_env is enabled, and retries transport failures with a
linear backoff.
"""

from __future__ import annotations

from dataclasses import dataclass
import asyncio

import httpx

from ..core.errors import FetchError


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either content will be populated (success) or error will be populated
    (failure), but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was requested
        status_code: HTTP status code, or None if the request failed before a response
        content: The raw response body, or None on error
        content_type: Value of the Content-Type header, if any
        final_url: URL after redirects (same as url when no redirect happened)
        error: Error message if the fetch failed, None on success
    """
    url: str
    status_code: int | None
    content: bytes | None
    content_type: str | None = None
    final_url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None

    def unwrap(self) -> bytes:
        """Return the body or raise FetchError describing the failure."""
        if self.error is not None or self.content is None:
            raise FetchError(self.url, self.error or "Empty response", self.status_code)
        return self.content


async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    retries: int = 0,
    backoff: float = 0.5,
) -> FetchResult:
    """Fetch a URL with retry logic.

    HTTP error statuses (>= 400) are returned as failures without retrying;
    transport errors and timeouts are retried up to `retries` times.

    Args:
        client: Configured httpx async client
        url: The URL to fetch
        retries: Number of retry attempts after the initial failure
        backoff: Base delay in seconds; attempt n waits backoff * n

    Returns:
        FetchResult with content on success or an error message on failure
    """
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            resp = await client.get(url)
        except (httpx.InvalidURL, ValueError) as exc:
            # A malformed URL fails the same way on every attempt
            return FetchResult(url=url, status_code=None, content=None, error=f"InvalidURL: {exc}")
        except httpx.TimeoutException as exc:
            last_error = f"TimeoutError: {exc}"
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
        else:
            content_type = resp.headers.get("content-type")
            if resp.status_code >= 400:
                return FetchResult(
                    url=url,
                    status_code=resp.status_code,
                    content=None,
                    content_type=content_type,
                    final_url=str(resp.url),
                    error=f"HTTP {resp.status_code}",
                )
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                content=resp.content,
                content_type=content_type,
                final_url=str(resp.url),
            )
        if attempt < retries:
            # Linear backoff: 0.5s, 1.0s, 1.5s...
            await asyncio.sleep(backoff * (attempt + 1))

    return FetchResult(url=url, status_code=None, content=None, error=last_error)


class Fetcher:
    """Async context manager owning the HTTP client for one session.

    Example:
        >>> async with Fetcher(timeout=5.0) as fetcher:
        ...     body = await fetcher.fetch_bytes("https://example.com/feed.xml")
    """

    def __init__(
        self,
        timeout: float = 5.0,
        retries: int = 0,
        user_agent: str = DEFAULT_USER_AGENT,
        trust_env: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.retries = retries
        self.user_agent = user_agent
        self.trust_env = trust_env
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Fetcher:
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            trust_env=self.trust_env,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Fetcher is not open. Use 'async with Fetcher(...)'.")
        return self._client

    async def fetch(self, url: str) -> FetchResult:
        return await fetch_url(self.client, url, retries=self.retries)

    async def fetch_bytes(self, url: str) -> bytes:
        """Fetch a URL and return its body, raising FetchError on failure."""
        result = await self.fetch(url)
        return result.unwrap()
