"""
Error types raised by the scraper pipeline.
"""

from typing import Optional


class ScraperError(Exception):
    """Base exception for scraper operations."""
    pass


class FetchError(ScraperError):
    """Network or transport failure while retrieving a page."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class ParseError(ScraperError):
    """Malformed markup in fetched or cached content."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to parse {url}: {message}")


class CacheMissError(ScraperError):
    """No cached copy exists for the URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No cached page for {url}")


class FilesystemError(ScraperError):
    """Cache directory or file I/O failure."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Cache I/O error at {path}: {message}")
