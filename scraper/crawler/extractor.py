"""
Extraction of state links and state records from parsed documents.
"""

import logging
from dataclasses import dataclass
from typing import List
from urllib.parse import urljoin

from bs4 import Tag

from .parser import Document
from ..errors import ParseError
from ..utils.config import MISSING_VALUE


@dataclass(frozen=True)
class StateRecord:
    """Structured result extracted from one state page."""
    name: str
    capital: str
    source_url: str

    def to_line(self) -> str:
        """Render the record as a single output line."""
        return f"{self.name} {self.capital} {self.source_url}"


class StateExtractor:
    """
    Applies structural queries to index and state pages.

    The index page yields the links in the third column of its wikitable
    rows. A state page yields its heading and the value of the first
    infobox row whose label contains ``field_keyword``.
    """

    def __init__(self,
                 link_selector: str = ".wikitable tr > td:nth-child(3) > a",
                 heading_selector: str = "h1",
                 label_selector: str = "table.infobox th.infobox-label",
                 field_keyword: str = "Capital",
                 missing_value: str = MISSING_VALUE):
        self.link_selector = link_selector
        self.heading_selector = heading_selector
        self.label_selector = label_selector
        self.field_keyword = field_keyword
        self.missing_value = missing_value
        self.logger = logging.getLogger(__name__)

    def discover_links(self, document: Document) -> List[str]:
        """Return absolute link targets from the index page, in document order."""
        links = []
        for anchor in document.select(self.link_selector):
            href = anchor.get('href')
            if not href:
                continue
            links.append(urljoin(document.url, href.strip()))

        self.logger.debug(f"Discovered {len(links)} links on {document.url}")
        return links

    def extract_record(self, document: Document, url: str) -> StateRecord:
        """Build a StateRecord from a state page."""
        heading = document.select_one(self.heading_selector)
        if heading is None:
            raise ParseError(url, f"no element matches {self.heading_selector!r}")

        name = Document.text_of(heading)
        capital = self._extract_field(document)

        if capital == self.missing_value:
            self.logger.debug(f"No {self.field_keyword!r} row on {url}")

        return StateRecord(name=name, capital=capital, source_url=url)

    def _extract_field(self, document: Document) -> str:
        """Find the labeled infobox row and return its value cell text."""
        for label in document.select(self.label_selector):
            if self.field_keyword not in Document.text_of(label):
                continue

            value_cell = label.find_next_sibling()
            if value_cell is None:
                return self.missing_value

            first_child = next(
                (child for child in value_cell.children
                 if isinstance(child, Tag) or str(child).strip()),
                None
            )
            if first_child is None:
                return Document.text_of(value_cell)
            return Document.text_of(first_child)

        return self.missing_value
