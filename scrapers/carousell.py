"""
CarouWatch Carousell Scraper
Plain HTTP scraper for Carousell search pages.
"""

import logging

import requests

from .base import BaseScraper, FetchError
from config import CAROUSELL_BASE_URL, REQUEST_TIMEOUT_SECONDS, USER_AGENT

logger = logging.getLogger(__name__)


class CarousellScraper(BaseScraper):
    """Scraper for Carousell using direct HTTP requests."""

    def __init__(
        self,
        base_url: str = CAROUSELL_BASE_URL,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        user_agent: str = USER_AGENT,
        session: requests.Session = None,
    ):
        """
        Initialize Carousell scraper.

        Args:
            base_url: Site origin
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Optional pre-configured requests session
        """
        super().__init__(base_url)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _fetch_html(self, url: str) -> str:
        logger.info(f"Send req [{url}]")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        logger.info(f"Recv resp status_code[{response.status_code}] headers[{dict(response.headers)}]")

        if not response.ok:
            raise FetchError(f"Carousell returned HTTP {response.status_code} for {url}")
        return response.text

    def close(self):
        """Close the HTTP session."""
        self.session.close()
        logger.debug("Carousell session closed")
