"""
CarouWatch Browser Scraper
Playwright-based scraper for when Carousell rejects direct requests.
"""

import logging

from playwright.sync_api import sync_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout
from playwright_stealth import Stealth

from .base import BaseScraper, FetchError
from config import CAROUSELL_BASE_URL, HEADLESS, REQUEST_TIMEOUT_SECONDS, USER_AGENT

logger = logging.getLogger(__name__)


class BrowserScraper(BaseScraper):
    """Scraper for Carousell using a headless Chromium browser."""

    def __init__(
        self,
        base_url: str = CAROUSELL_BASE_URL,
        headless: bool = HEADLESS,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        user_agent: str = USER_AGENT,
    ):
        """
        Initialize browser scraper. The browser starts on the first fetch.

        Args:
            base_url: Site origin
            headless: Run Chromium without a window
            timeout: Navigation timeout in seconds
            user_agent: User agent for the browser context
        """
        super().__init__(base_url)
        self.headless = headless
        self.timeout = timeout
        self.user_agent = user_agent
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self._initialized = False

    def _initialize_browser(self):
        """Initialize Playwright browser."""
        if self._initialized:
            return

        logger.info(f"Initializing browser (headless={self.headless})...")

        self.playwright = sync_playwright().start()
        self.browser = self.playwright.chromium.launch(
            headless=self.headless,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",
                "--no-sandbox",
            ],
        )
        self.context = self.browser.new_context(
            viewport={"width": 1920, "height": 1080},
            user_agent=self.user_agent,
        )
        self.page = self.context.new_page()

        # Apply stealth to avoid bot detection
        Stealth().apply_stealth_sync(self.page)

        self._initialized = True
        logger.info("Browser initialized")

    def _fetch_html(self, url: str) -> str:
        logger.info(f"Send req [{url}]")
        try:
            self._initialize_browser()
            response = self.page.goto(url, wait_until="domcontentloaded", timeout=self.timeout * 1000)
            status = response.status if response else None
            logger.info(f"Recv resp status_code[{status}]")
            if response is not None and not response.ok:
                raise FetchError(f"Carousell returned HTTP {status} for {url}")
            return self.page.content()
        except PlaywrightTimeout as e:
            raise FetchError(f"Timeout loading {url}: {e}") from e
        except PlaywrightError as e:
            raise FetchError(f"Browser error loading {url}: {e}") from e

    def close(self):
        """Close browser and clean up."""
        try:
            if self.context:
                self.context.close()
                self.context = None
            if self.browser:
                self.browser.close()
                self.browser = None
            if self.playwright:
                self.playwright.stop()
                self.playwright = None
            self._initialized = False
            logger.info("Browser closed")
        except PlaywrightError as e:
            logger.error(f"Error closing browser: {e}")
