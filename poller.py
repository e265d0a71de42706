"""
CarouWatch Poller
Baseline fetch followed by fixed-interval checks for new listings.
"""

import time
import logging
from typing import Callable, List, Optional

from cache import ListingCache
from models import Listing
from scrapers import BaseScraper, SearchRequest

logger = logging.getLogger(__name__)


class Poller:
    """
    Runs one search on a fixed interval and notifies on new listings.

    Fetch errors are not caught here; they end the run.
    """

    def __init__(
        self,
        scraper: BaseScraper,
        request: SearchRequest,
        notify: Callable[[Listing], object],
        interval_minutes: int = 10,
        cache: Optional[ListingCache] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            scraper: Transport used for every fetch
            request: Search to poll
            notify: Called once per new listing
            interval_minutes: Minutes between checks, must be positive
            cache: Seen-listing cache, a fresh one by default
            clock: Monotonic clock in seconds
            sleep: Sleep function in seconds
        """
        if interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

        self.scraper = scraper
        self.request = request
        self.notify = notify
        self.interval_minutes = interval_minutes
        self.interval_seconds = interval_minutes * 60
        self.cache = cache if cache is not None else ListingCache()
        self.clock = clock
        self.sleep = sleep
        self.running = False
        self.check_count = 0

    def baseline(self) -> int:
        """Fetch once and cache every listing without notifying."""
        listings = self.scraper.get_listings(self.request)
        self.cache.store(listings)
        logger.info(f"Baseline: cached {len(listings)} listings")
        return len(listings)

    def check(self) -> List[Listing]:
        """Fetch once and notify on listings not seen before."""
        self.check_count += 1
        listings = self.scraper.get_listings(self.request)
        notified = self.cache.process_and_store(listings, self.notify, check_listings=True)
        logger.info(
            f"Check #{self.check_count}: {len(listings)} listings, {len(notified)} new | cache size {len(self.cache)}"
        )
        return notified

    def stop(self):
        """Ask the loop to stop after the current check or wait."""
        self.running = False

    def _wait_until(self, deadline: float):
        # Short sleeps so stop() takes effect quickly
        while self.running:
            remaining = deadline - self.clock()
            if remaining <= 0:
                return
            self.sleep(min(1.0, remaining))

    def run(self, max_checks: Optional[int] = None):
        """
        Baseline, then check every interval until stopped.

        Checks are scheduled on fixed ticks from the baseline, so a slow
        fetch does not push later checks back.

        Args:
            max_checks: Stop after this many checks (runs forever if None)
        """
        self.running = True
        try:
            self.baseline()
            next_tick = self.clock() + self.interval_seconds

            while self.running and (max_checks is None or self.check_count < max_checks):
                logger.info(f"Waiting for {self.interval_minutes} mins before next query")
                self._wait_until(next_tick)
                if not self.running:
                    break
                self.check()
                next_tick += self.interval_seconds
                # Skip ticks missed during a long check instead of firing back to back
                now = self.clock()
                while next_tick <= now:
                    next_tick += self.interval_seconds
        finally:
            self.running = False
            logger.info(f"Poller stopped after {self.check_count} checks")
