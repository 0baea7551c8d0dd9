"""
State Scraper

Fetches a listing page, follows its state links concurrently and extracts
one record per state, caching raw pages on disk.
"""

__version__ = "1.0.0"
__description__ = "Concurrent state page scraper with an on-disk page cache"
