import pytest

from document import ElementNode, TextNode


def _card(listing_id, texts=(), links=(), placeholder=None):
    """A listing card div whose first child holds the text and links."""
    body = ElementNode(tag="div")
    for href in links:
        body.children.append(ElementNode(tag="a", attrs=[("href", href)]))
    for text in texts:
        body.children.append(ElementNode(tag="p", children=[TextNode(text=text)]))
    if placeholder:
        body.children.append(ElementNode(tag="span", children=[TextNode(text=placeholder)]))
    return ElementNode(tag="div", attrs=[("data-testid", listing_id)], children=[body])


@pytest.fixture
def make_card():
    return _card


@pytest.fixture
def full_texts():
    return ["alice", "2 days ago", "iPhone 13", "S$1,234", "Barely used", "Like new"]
