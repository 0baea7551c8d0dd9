"""
HTML parsing into queryable documents.
"""

import re
import logging
from typing import List, Optional
from dataclasses import dataclass, field
from bs4 import BeautifulSoup, Comment, Tag

from ..errors import ParseError


@dataclass
class Document:
    """A parsed page: its URL, raw markup and element tree."""
    url: str
    source: str
    soup: BeautifulSoup = field(repr=False, compare=False)

    def select(self, selector: str) -> List[Tag]:
        """Select all elements matching a CSS selector, in document order."""
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        """Select the first element matching a CSS selector."""
        return self.soup.select_one(selector)

    @staticmethod
    def text_of(element) -> str:
        """Normalized text of an element or string node."""
        if element is None:
            return ""
        if isinstance(element, Tag):
            text = element.get_text(separator=' ')
        else:
            text = str(element)
        return ContentParser.whitespace_pattern.sub(' ', text).strip()


class ContentParser:
    """
    Parses raw HTML into ``Document`` objects using BeautifulSoup and lxml.
    """

    whitespace_pattern = re.compile(r'\s+')

    def __init__(self, features: str = 'lxml'):
        self.features = features
        self.logger = logging.getLogger(__name__)

    def parse(self, url: str, html_content: str) -> Document:
        """
        Parse HTML content into a document.

        Args:
            url: The URL of the page
            html_content: Raw HTML content

        Returns:
            Document wrapping the parsed tree

        Raises:
            ParseError: if the content is empty or cannot be parsed
        """
        if not html_content or not html_content.strip():
            raise ParseError(url, "empty document")

        try:
            soup = BeautifulSoup(html_content, self.features)
        except Exception as e:
            self.logger.error(f"Error parsing content from {url}: {e}")
            raise ParseError(url, str(e)) from e

        if soup.find(True) is None:
            raise ParseError(url, "no elements found")

        # Remove comments
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        self.logger.debug(f"Parsed {len(html_content)} chars from {url}")
        return Document(url=url, source=html_content, soup=soup)
