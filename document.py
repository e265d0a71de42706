"""
CarouWatch Document Tree
Minimal element/text node tree built from a BeautifulSoup parse.

The extractor only needs tag names, ordered attributes, ordered children
and text content, so the parsed page is copied into these two node types.
Trees come from the HTML parser and are acyclic; no cycle detection is done.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

# Strings that are markup, not page text
_SKIPPED_STRINGS = (Comment, Doctype, Declaration, CData, ProcessingInstruction)


@dataclass
class TextNode:
    """A run of character data."""
    text: str


@dataclass
class ElementNode:
    """An element with a tag name, ordered attributes and ordered children."""
    tag: str
    attrs: List[Tuple[str, str]] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)

    def get(self, key: str) -> Optional[str]:
        """Return the value of the first attribute named key."""
        for name, value in self.attrs:
            if name == key:
                return value
        return None


Node = Union[ElementNode, TextNode]


def _convert_attrs(tag: Tag) -> List[Tuple[str, str]]:
    attrs = []
    for name, value in tag.attrs.items():
        # Multi-valued attributes (class, rel, ...) come back as lists
        if isinstance(value, list):
            value = " ".join(value)
        attrs.append((name, value))
    return attrs


def from_soup(soup: Tag) -> ElementNode:
    """
    Copy a BeautifulSoup tree into ElementNode/TextNode objects.

    Args:
        soup: A BeautifulSoup document or any Tag within one

    Returns:
        The root ElementNode
    """
    root = ElementNode(tag=soup.name, attrs=_convert_attrs(soup))
    stack = [(soup, root)]

    while stack:
        source, target = stack.pop()
        for child in source.children:
            if isinstance(child, Tag):
                node = ElementNode(tag=child.name, attrs=_convert_attrs(child))
                target.children.append(node)
                stack.append((child, node))
            elif isinstance(child, _SKIPPED_STRINGS):
                continue
            elif isinstance(child, NavigableString):
                target.children.append(TextNode(text=str(child)))

    return root


def parse_html(html: str) -> ElementNode:
    """
    Parse an HTML page into a document tree.

    Raises:
        ValueError: If the markup is not a string or the parser rejects it
    """
    if not isinstance(html, str):
        raise ValueError(f"Expected HTML text, got {type(html).__name__}")
    try:
        # Keep the first value when an attribute repeats on one tag
        soup = BeautifulSoup(html, "html.parser", on_duplicate_attribute="ignore")
    except ParserRejectedMarkup as e:
        raise ValueError(f"Unparseable document: {e}") from e
    return from_soup(soup)
