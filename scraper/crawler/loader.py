"""
Document loading through the URL rewriter and the raw page cache.
"""

import logging
from typing import Dict, Optional

from .fetcher import WebFetcher
from .parser import ContentParser, Document
from .rewriter import UrlRewriter
from ..storage.page_cache import PageCache
from ..utils.logger import get_scraper_logger
from ..utils.monitoring import Measure, MetricsCollector


class DocumentLoader:
    """
    Opens documents by URL, serving them from the page cache when possible.

    A cache hit is parsed from disk without touching the network. A miss is
    fetched, parsed, and only then written to the cache, so content that
    fails to fetch or parse is never persisted.
    """

    def __init__(self, rewriter: UrlRewriter, cache: PageCache, fetcher: WebFetcher,
                 parser: Optional[ContentParser] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.rewriter = rewriter
        self.cache = cache
        self.fetcher = fetcher
        self.parser = parser or ContentParser()
        self.metrics = metrics
        self.stats = {
            'cache_hits': 0,
            'cache_misses': 0
        }
        self.logger = get_scraper_logger(__name__, component='loader')

    async def open(self, url: str) -> Document:
        """
        Load and parse the document at a URL.

        Raises:
            FetchError: if the page is not cached and cannot be fetched
            ParseError: if cached or fetched content cannot be parsed
            FilesystemError: if the cache cannot be read or written
        """
        url = self.rewriter.rewrite(url)

        with Measure(f"Loading page {url}", logger=self.logger.logger,
                     collector=self.metrics, operation='load_page'):
            if self.cache.exists(url):
                self.stats['cache_hits'] += 1
                self.logger.log_url_event(logging.DEBUG, url, f"Cache hit: {url}")
                content = await self.cache.read(url)
                return self.parser.parse(url, content)

            self.stats['cache_misses'] += 1
            self.logger.log_url_event(logging.DEBUG, url, f"Cache miss: {url}")
            result = await self.fetcher.fetch(url)
            document = self.parser.parse(url, result.content)
            await self.cache.write(url, result.content)
            return document

    def get_stats(self) -> Dict[str, int]:
        """Get cache hit/miss counts for documents opened by this loader."""
        return self.stats.copy()
