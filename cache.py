"""
CarouWatch Listing Cache
In-memory record of listing IDs that have already been processed.
"""

import logging
from typing import Callable, Dict, Iterable, List

from models import Listing

logger = logging.getLogger(__name__)


class ListingCache:
    """
    Tracks which listing IDs have been seen during this process.

    Entries are never evicted and nothing is persisted. Each polling
    session should own its own cache.
    """

    def __init__(self):
        self.alerts: Dict[str, bool] = {}

    def __contains__(self, listing_id: str) -> bool:
        return listing_id in self.alerts

    def __len__(self) -> int:
        return len(self.alerts)

    def store(self, listings: Iterable[Listing]):
        """Mark every listing as seen without processing it."""
        for listing in listings:
            self.alerts[listing.id] = True

    def process_and_store(
        self,
        listings: List[Listing],
        callback: Callable[[Listing], object],
        check_listings: bool = True,
    ) -> List[Listing]:
        """
        Run callback on each unseen listing, then remember it.

        When check_listings is set and every listing in the batch is unseen,
        nothing is processed: new posts should trickle in, so a fully new
        page usually means the upstream returned something unrelated to the
        search. All IDs are cached either way.

        Args:
            listings: Batch from the latest fetch
            callback: Called once per unseen listing, in batch order
            check_listings: Enable the all-new batch check

        Returns:
            The listings passed to callback
        """
        unseen = []
        for listing in listings:
            if listing.id not in self.alerts:
                unseen.append(listing)
                self.alerts[listing.id] = True

        if check_listings and len(unseen) == len(listings):
            if unseen:
                logger.warning(
                    f"All {len(unseen)} listings are unseen, skipping batch as a likely upstream error"
                )
            return []

        for listing in unseen:
            callback(listing)
        return unseen
