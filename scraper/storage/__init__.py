"""
Storage layer for raw page content.
"""

from .page_cache import PageCache

__all__ = ['PageCache']
