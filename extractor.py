"""
CarouWatch Extractor
Turns a Carousell search results document tree into Listing records.
"""

import logging
import re
from typing import List, NamedTuple

from config import CAROUSELL_BASE_URL, IDENTITY_ATTRIBUTE, PLACEHOLDER_TEXT
from document import ElementNode, Node, TextNode
from models import Listing

logger = logging.getLogger(__name__)

# Card text in render order: user, time, title, price, description, condition
MIN_FRAGMENTS = 6
# The first link on a card is the seller profile, the second the listing
LISTING_LINK_INDEX = 1
# Plain decimal only: no underscores, whitespace, exponents, nan or inf
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)")


class Fragments(NamedTuple):
    """Text and links collected from a listing card, in document order."""
    texts: List[str]
    links: List[str]


def parse_price(raw: str) -> float:
    """
    Convert a price string such as "S$1,234" to a float.

    Returns 0.0 for anything that does not parse, so a free listing and a
    broken price look the same.
    """
    cleaned = raw.replace("S$", "", 1).replace(",", "")
    if not DECIMAL_PATTERN.fullmatch(cleaned):
        return 0.0
    return float(cleaned)


def collect_fragments(node: Node, placeholder: str = PLACEHOLDER_TEXT) -> Fragments:
    """
    Walk a subtree in pre-order collecting text and anchor hrefs.

    Text is stripped of surrounding whitespace; fragments equal to the
    placeholder overlay text are dropped.
    """
    texts = []
    links = []
    stack = [node]

    while stack:
        current = stack.pop()
        if isinstance(current, TextNode):
            text = current.text.strip()
            if text != placeholder:
                texts.append(text)
            continue

        if current.tag == "a":
            links.extend(value for name, value in current.attrs if name == "href")
        # Reversed so the leftmost child is popped first
        stack.extend(reversed(current.children))

    return Fragments(texts, links)


def node_to_listing(
    node: ElementNode,
    listing_id: str,
    base_url: str = CAROUSELL_BASE_URL,
    placeholder: str = PLACEHOLDER_TEXT,
) -> Listing:
    """Build a Listing from a card container, using its first child only."""
    if not node.children:
        logger.debug(f"Listing container {listing_id} has no children")
        return Listing(id=listing_id)

    texts, links = collect_fragments(node.children[0], placeholder)

    fields = {}
    if len(texts) >= MIN_FRAGMENTS:
        user, time, title, price, description, condition = texts[:MIN_FRAGMENTS]
        fields = dict(
            user=user,
            time=time,
            title=title,
            price=parse_price(price),
            description=description,
            condition=condition,
            is_complete=True,
        )
    else:
        logger.debug(f"Listing {listing_id}: only {len(texts)} text fragments, fields left blank")

    if len(links) > LISTING_LINK_INDEX:
        fields["url"] = f"{base_url}{links[LISTING_LINK_INDEX]}"

    return Listing(id=listing_id, **fields)


def extract_listings(
    root: Node,
    base_url: str = CAROUSELL_BASE_URL,
    placeholder: str = PLACEHOLDER_TEXT,
) -> List[Listing]:
    """
    Find every listing card in a document tree.

    A card is any div carrying the identity attribute; its value becomes
    the listing id. Cards can nest, so the walk always continues into
    children. Malformed cards produce partially blank listings instead of
    errors.

    Args:
        root: Root of the document tree
        base_url: Origin prepended to the relative listing path
        placeholder: Overlay text to ignore inside cards

    Returns:
        Listings in document order
    """
    listings = []
    stack = [root]

    while stack:
        node = stack.pop()
        if not isinstance(node, ElementNode):
            continue

        if node.tag == "div":
            listing_id = node.get(IDENTITY_ATTRIBUTE)
            if listing_id is not None:
                listings.append(node_to_listing(node, listing_id, base_url, placeholder))

        stack.extend(reversed(node.children))

    partial = sum(1 for listing in listings if not listing.is_complete)
    if partial:
        logger.info(f"Extracted {len(listings)} listings ({partial} with blank fields)")
    else:
        logger.debug(f"Extracted {len(listings)} listings")
    return listings
