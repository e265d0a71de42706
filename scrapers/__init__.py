"""CarouWatch Scrapers Package"""

from .base import BaseScraper, FetchError, ScraperError, SearchRequest, ValidationError
from .carousell import CarousellScraper

__all__ = [
    "BaseScraper",
    "CarousellScraper",
    "FetchError",
    "ScraperError",
    "SearchRequest",
    "ValidationError",
]
