"""HTML fragment parser producing the node tree walked by the segmenter."""

import warnings
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

# Node kinds seen by the segmenter; everything else (doctype, CDATA, ...) is skipped
TAG = "tag"
TEXT = "text"
COMMENT = "comment"


@dataclass
class ParseResult:
    """Result of parsing a rendered page fragment."""

    success: bool
    nodes: List[PageElement] = None
    error: str = None


def node_kind(node: PageElement) -> Optional[str]:
    """
    Classify a parsed node as tag, text or comment.

    Args:
        node: Node from a ParseResult tree

    Returns:
        One of TAG, TEXT, COMMENT, or None for nodes with no search meaning
    """
    if isinstance(node, Tag):
        return TAG
    if isinstance(node, Comment):
        return COMMENT
    if isinstance(node, PreformattedString):
        return None
    if isinstance(node, NavigableString):
        return TEXT
    return None


class HtmlParser:
    """Parses rendered HTML fragments with BeautifulSoup."""

    def __init__(self, features: str = "html.parser"):
        self.features = features

    def load_soup(self, markup: str) -> BeautifulSoup:
        """Build a BeautifulSoup tree, silencing the "looks like a filename" warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            return BeautifulSoup(markup, self.features)

    def parse(self, markup: Optional[str]) -> ParseResult:
        """
        Parse an HTML fragment into its top-level nodes.

        Args:
            markup: Rendered HTML string

        Returns:
            ParseResult with the top-level nodes, or error information.
            Empty markup parses successfully into no nodes.
        """
        if not markup:
            return ParseResult(success=True, nodes=[])

        try:
            soup = self.load_soup(markup)
        except Exception as e:
            return ParseResult(success=False, error=f"Error parsing markup: {e}")

        return ParseResult(success=True, nodes=list(soup.contents))
