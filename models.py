"""
CarouWatch Models
Listing record shared by the extractor, cache and notifier.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Listing:
    """Represents a single Carousell post."""
    id: str
    title: str = ""
    description: str = ""
    condition: str = ""
    user: str = ""
    time: str = ""
    price: float = 0.0
    url: str = ""
    # Set by the extractor when the card had every positional text fragment
    is_complete: bool = field(default=False, compare=False)

    def summary(self) -> str:
        """Short human-readable form used for notifications and console output."""
        return f"{self.title} - S${self.price:.0f} - {self.condition}\n{self.url}\n"


def shorten_listings(listings: List[Listing]) -> List[str]:
    """Return the summary of each listing, in order."""
    return [listing.summary() for listing in listings]
