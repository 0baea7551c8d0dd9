"""
Web page fetcher built on an aiohttp client session.
"""

import asyncio
import aiohttp
import logging
import time
from typing import Optional, Dict
from dataclasses import dataclass
from aiohttp import ClientSession, ClientTimeout, ClientError

from ..errors import FetchError


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: str = ""
    headers: Optional[Dict[str, str]] = None
    fetch_time: float = 0.0
    content_type: Optional[str] = None
    encoding: Optional[str] = None


class WebFetcher:
    """
    Fetches web pages over HTTP.

    There is no retry policy. Any transport failure or non-success status
    raises ``FetchError``. ``request_timeout`` and ``max_concurrent_requests``
    default to ``None``, which means no timeout and no cap on in-flight
    requests.
    """

    def __init__(self, user_agent: str, request_timeout: Optional[float] = None,
                 max_concurrent_requests: Optional[int] = None):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests

        self.logger = logging.getLogger(__name__)

        # Session management
        self.session: Optional[ClientSession] = None
        self.semaphore = (
            asyncio.Semaphore(max_concurrent_requests) if max_concurrent_requests else None
        )

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent}

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers,
                connector=aiohttp.TCPConnector(
                    limit=self.max_concurrent_requests or 0,
                    ttl_dns_cache=300,
                    use_dns_cache=True
                )
            )
            self.logger.info("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.info("WebFetcher session closed")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult with the decoded response body

        Raises:
            FetchError: on timeout, transport error or non-success status
        """
        if self.session is None:
            await self.start()

        if self.semaphore is None:
            return await self._fetch(url)

        async with self.semaphore:
            return await self._fetch(url)

    async def _fetch(self, url: str) -> FetchResult:
        if self.session is None:
            self.stats['failed_requests'] += 1
            raise FetchError(url, "Fetcher is closed")

        start_time = time.time()
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise FetchError(url, f"HTTP {response.status}", status_code=response.status)

                body = await response.read()
                content = self._decode(body, response.charset)
                fetch_time = time.time() - start_time

                self.stats['successful_requests'] += 1
                self.stats['total_bytes_downloaded'] += len(body)

                self.logger.debug(f"Fetched {url}: {response.status} ({len(body)} bytes)")
                return FetchResult(
                    url=url,
                    status_code=response.status,
                    content=content,
                    headers=dict(response.headers),
                    content_type=response.headers.get('content-type', '').lower(),
                    encoding=response.charset,
                    fetch_time=fetch_time
                )

        except FetchError:
            self.stats['failed_requests'] += 1
            self.logger.warning(f"Non-success status fetching {url}")
            raise

        except asyncio.TimeoutError as e:
            self.stats['failed_requests'] += 1
            self.logger.warning(f"Timeout fetching {url}")
            raise FetchError(url, "Request timeout") from e

        except ClientError as e:
            self.stats['failed_requests'] += 1
            self.logger.warning(f"Client error fetching {url}: {e}")
            raise FetchError(url, f"Client error: {e}") from e

    def _decode(self, body: bytes, charset: Optional[str]) -> str:
        """Decode a response body, falling back through common encodings."""
        encoding = charset or 'utf-8'
        try:
            return body.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            for fallback_encoding in ['utf-8', 'cp1252', 'latin-1']:
                try:
                    return body.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue

            return body.decode('utf-8', errors='ignore')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0
