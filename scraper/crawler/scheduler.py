"""
Scrape scheduler that drives the index → state pages pipeline.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional
from dataclasses import dataclass

from .extractor import StateExtractor, StateRecord
from .fetcher import WebFetcher
from .loader import DocumentLoader
from .parser import ContentParser
from .rewriter import UrlRewriter
from ..storage.page_cache import PageCache
from ..utils.config import Config
from ..utils.monitoring import Measure, MetricsCollector


@dataclass
class ScrapeStats:
    """Statistics for a scrape run."""
    start_time: float
    end_time: Optional[float] = None
    links_discovered: int = 0
    records_extracted: int = 0
    missing_fields: int = 0

    @property
    def elapsed_time(self) -> float:
        end_time = self.end_time if self.end_time is not None else time.time()
        return end_time - self.start_time


class ScrapeScheduler:
    """
    Loads the index page, discovers state links and extracts one record
    per linked page.

    All state pages are retrieved concurrently, one task per link. Results
    are returned in link order regardless of completion order. The first
    failure aborts the run. Sibling tasks that are already running are not
    cancelled, but their results are discarded.
    """

    def __init__(self, loader: DocumentLoader, extractor: StateExtractor,
                 metrics: Optional[MetricsCollector] = None):
        self.loader = loader
        self.extractor = extractor
        self.rewriter = loader.rewriter
        self.metrics = metrics
        self.logger = logging.getLogger(__name__)
        self.stats = ScrapeStats(start_time=time.time())

    @classmethod
    def from_config(cls, config: Config,
                    metrics: Optional[MetricsCollector] = None) -> 'ScrapeScheduler':
        """Build a scheduler and its components from configuration."""
        scraper_config = config.scraper

        fetcher = WebFetcher(
            user_agent=scraper_config.user_agent,
            request_timeout=scraper_config.request_timeout,
            max_concurrent_requests=scraper_config.max_concurrent_requests
        )
        loader = DocumentLoader(
            rewriter=UrlRewriter(config.rewrite.rules),
            cache=PageCache(config.cache.base_dir),
            fetcher=fetcher,
            parser=ContentParser(),
            metrics=metrics
        )
        extractor = StateExtractor(
            link_selector=scraper_config.link_selector,
            heading_selector=scraper_config.heading_selector,
            label_selector=scraper_config.label_selector,
            field_keyword=scraper_config.field_keyword,
            missing_value=scraper_config.missing_value
        )
        return cls(loader, extractor, metrics=metrics)

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        """Start the fetcher session."""
        await self.loader.fetcher.start()
        self.logger.info("Scrape scheduler initialized")

    async def run(self, index_url: str) -> List[StateRecord]:
        """
        Scrape all state pages linked from the index page.

        Args:
            index_url: URL of the listing page

        Returns:
            One StateRecord per discovered link, in link order
        """
        self.stats = ScrapeStats(start_time=time.time())

        try:
            with Measure("Processing page", logger=self.logger,
                         collector=self.metrics, operation='run'):
                index_document = await self.loader.open(index_url)

                with Measure("Parsing anchors", logger=self.logger,
                             collector=self.metrics, operation='discover_links'):
                    links = [
                        self.rewriter.rewrite(link)
                        for link in self.extractor.discover_links(index_document)
                    ]

                self.stats.links_discovered = len(links)
                self.logger.info(f"Discovered {len(links)} state links on {index_document.url}")

                tasks = [self._scrape_state(link) for link in links]
                records = await asyncio.gather(*tasks)
        finally:
            self.stats.end_time = time.time()

        self.stats.records_extracted = len(records)
        self.stats.missing_fields = sum(
            1 for record in records if record.capital == self.extractor.missing_value
        )
        self.logger.info(
            f"Extracted {len(records)} records "
            f"({self.stats.missing_fields} without {self.extractor.field_keyword!r}) "
            f"in {self.stats.elapsed_time:.2f}s"
        )
        return list(records)

    async def _scrape_state(self, url: str) -> StateRecord:
        """Load one state page and extract its record."""
        with Measure(f"State information for {url}", logger=self.logger,
                     collector=self.metrics, operation='extract_state'):
            try:
                document = await self.loader.open(url)
                return self.extractor.extract_record(document, url)
            except Exception as e:
                self.logger.error(f"Error processing {url}: {e}")
                raise

    async def close(self):
        """Close the fetcher session."""
        await self.loader.fetcher.close()
        self.logger.info("Scrape scheduler closed")

    def get_stats(self) -> Dict:
        """Get run, fetcher and cache statistics."""
        return {
            'links_discovered': self.stats.links_discovered,
            'records_extracted': self.stats.records_extracted,
            'missing_fields': self.stats.missing_fields,
            'elapsed_time': self.stats.elapsed_time,
            'loader': self.loader.get_stats(),
            'fetcher': self.loader.fetcher.get_stats(),
            'cache': self.loader.cache.get_stats()
        }
