"""
CarouWatch Base Scraper
Search request, scraper errors and the abstract scraper shared by all transports.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence
from urllib.parse import quote, urlencode

from config import CAROUSELL_BASE_URL
from document import parse_html
from extractor import extract_listings
from models import Listing

logger = logging.getLogger(__name__)


class ScraperError(Exception):
    """Base class for scraper failures."""


class ValidationError(ScraperError):
    """The search request is not usable."""


class FetchError(ScraperError):
    """The search page could not be fetched or parsed."""


class SearchRequest:
    """Search terms and filters for one Carousell search page."""

    def __init__(
        self,
        search_terms: Sequence[str],
        price_floor: int = 0,
        price_ceil: int = 0,
        recent: bool = False,
    ):
        """
        Args:
            search_terms: One or more search terms
            price_floor: Minimum price, 0 for no floor
            price_ceil: Maximum price, 0 for no ceiling
            recent: Only return recent listings, newest first
        """
        self.search_terms = list(search_terms)
        self.price_floor = price_floor
        self.price_ceil = price_ceil
        self.recent = recent

    @property
    def search_term(self) -> str:
        """Search path segment: every term double-quoted, concatenated."""
        return "".join(json.dumps(term, ensure_ascii=False) for term in self.search_terms)

    def validate(self):
        """Raise ValidationError unless at least one non-blank term is set."""
        if not any(term.strip() for term in self.search_terms):
            raise ValidationError("no search term provided")

    def params(self) -> Dict[str, str]:
        """Query parameters for the filters that are set."""
        params = {}
        if self.price_floor:
            params["price_start"] = str(self.price_floor)
        if self.price_ceil:
            params["price_end"] = str(self.price_ceil)
        if self.recent:
            params["addRecent"] = "true"
            params["sort_by"] = "3"
        return params

    def build_url(self, base_url: str = CAROUSELL_BASE_URL) -> str:
        """Build the search page URL."""
        url = f"{base_url}/search/{quote(self.search_term, safe='')}"
        params = self.params()
        if params:
            url = f"{url}?{urlencode(sorted(params.items()))}"
        return url

    def describe(self) -> str:
        """One-line description for log and chat messages."""
        parts = [f"Search: {self.search_term}"]
        if self.price_floor:
            parts.append(f"min S${self.price_floor}")
        if self.price_ceil:
            parts.append(f"max S${self.price_ceil}")
        if self.recent:
            parts.append("recent only")
        return " | ".join(parts)

    def __repr__(self):
        return (
            f"SearchRequest(search_term={self.search_term!r}, price_floor={self.price_floor}, "
            f"price_ceil={self.price_ceil}, recent={self.recent})"
        )


class BaseScraper(ABC):
    """Abstract base class for Carousell scrapers."""

    def __init__(self, base_url: str = CAROUSELL_BASE_URL):
        """
        Initialize the scraper.

        Args:
            base_url: Site origin used for search URLs and listing links
        """
        self.base_url = base_url

    @abstractmethod
    def _fetch_html(self, url: str) -> str:
        """
        Fetch a page.

        Raises:
            FetchError: On any transport failure
        """

    def get_listings(self, request: SearchRequest) -> List[Listing]:
        """
        Fetch and parse one search results page.

        Args:
            request: Search terms and filters

        Returns:
            Listings in page order

        Raises:
            ValidationError: If the request has no search term (before any fetch)
            FetchError: If the page could not be fetched or parsed
        """
        request.validate()
        url = request.build_url(self.base_url)

        html = self._fetch_html(url)
        try:
            root = parse_html(html)
        except ValueError as e:
            raise FetchError(str(e)) from e

        listings = extract_listings(root, self.base_url)
        logger.info(f"Search {request.search_term}: {len(listings)} listings")
        return listings

    def close(self):
        """Clean up any resources (sessions, browser, etc.)."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

