"""
Scraper core components.
"""

from .rewriter import UrlRewriter
from .fetcher import WebFetcher, FetchResult
from .parser import ContentParser, Document
from .loader import DocumentLoader
from .extractor import StateExtractor, StateRecord
from .scheduler import ScrapeScheduler, ScrapeStats

__all__ = [
    'UrlRewriter',
    'WebFetcher', 'FetchResult',
    'ContentParser', 'Document',
    'DocumentLoader',
    'StateExtractor', 'StateRecord',
    'ScrapeScheduler', 'ScrapeStats'
]
