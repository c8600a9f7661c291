"""Content segmenter: splits a rendered page into search documents under their headings."""

import logging
import re
from itertools import groupby
from typing import List, Optional, Tuple

from bs4 import Tag
from bs4.element import PageElement

from .documents import Page, SearchDocument
from .header_tracker import HeaderTracker
from .html_parser import COMMENT, TAG, TEXT, HtmlParser, node_kind
from .identity import generate_object_id

logger = logging.getLogger(__name__)

HEADING_TAGS = frozenset(["h1", "h2", "h3", "h4", "h5", "h6"])
CONTENT_BLOCK_TAGS = frozenset(
    "header,nav,section,div,dd,dl,dt,figcaption,figure,picture,hr,li,main,ol,p,ul,caption,"
    "table,thead,tbody,tfoot,th,tr,td,datalist,fieldset,form,legend,optgroup,option,select,"
    "details,dialog,menu,menuitem,summary,blockquote,pre".split(",")
)
CONTENT_INLINE_TAGS = frozenset(
    "routelink,routerlink,a,b,abbr,bdi,bdo,cite,code,dfn,em,i,kbd,mark,q,rp,rt,ruby,s,samp,"
    "small,span,strong,sub,sup,time,u,var,wbr,del,ins,button,label,legend,meter,optgroup,"
    "option,output,progress,select".split(",")
)
PRESERVE_SPACE_TAG = "pre"
EXCERPT_MARKER = "more"
HEADER_ANCHOR_CLASS = "header-anchor"

_HEADING_WHITESPACE = re.compile(r"\s+")
_CONTENT_WHITESPACE = re.compile(r"[\n\s]+")


def is_excerpt_marker(node: PageElement) -> bool:
    """True for the `<!-- more -->` comment that ends a page excerpt."""
    return node_kind(node) == COMMENT and node.strip() == EXCERPT_MARKER


def render_header(node: Tag) -> str:
    """
    Extract heading text from the heading's direct text children.

    Autogenerated `<a class="header-anchor">` wrappers are unwrapped so the
    anchor markup does not leak into the heading text.

    Args:
        node: h1-h6 element

    Returns:
        Whitespace-normalized heading text
    """
    children = list(node.children)
    if (
        len(children) == 1
        and isinstance(children[0], Tag)
        and children[0].name == "a"
        and children[0].get("class") == [HEADER_ANCHOR_CLASS]
    ):
        anchor_children = list(children[0].children)
        if anchor_children and isinstance(anchor_children[0], Tag):
            children = list(anchor_children[0].children)
        else:
            children = anchor_children

    texts = [str(child) for child in children if node_kind(child) == TEXT and str(child)]
    return _HEADING_WHITESPACE.sub(" ", " ".join(texts)).strip()


def normalize_content(runs: List[Tuple[str, bool]]) -> str:
    """
    Join accumulated text runs into document content.

    Whitespace runs are collapsed to single spaces except inside preformatted
    runs, which are kept verbatim. The result is trimmed.

    Args:
        runs: (text, preserved) pairs in document order

    Returns:
        Normalized content string
    """
    parts = []
    for preserved, group in groupby(runs, key=lambda run: run[1]):
        text = "".join(run[0] for run in group)
        parts.append(text if preserved else _CONTENT_WHITESPACE.sub(" ", text))
    return "".join(parts).strip()


class _PageWalk:
    """Per-page traversal state: open headings, text accumulator and emitted documents."""

    def __init__(self, page: Page, url: str, index_content: bool):
        self.page = page
        self.url = url
        self.index_content = index_content
        self.has_excerpt = page.has_excerpt
        self.should_index = self.has_excerpt or index_content
        self.tracker = HeaderTracker(page.title)
        self.runs: List[Tuple[str, bool]] = []
        self.position = 0
        self.documents: List[SearchDocument] = []

    def flush(self) -> None:
        """Emission boundary: turn the accumulated text into a document."""
        if not self.should_index:
            self.runs = []
            return

        snapshot = self.tracker.snapshot()
        position = self.position
        self.position += 1

        self.documents.append(
            SearchDocument(
                content=normalize_content(self.runs),
                url=self.url,
                anchor=snapshot.anchor,
                object_id=generate_object_id(self.url, snapshot.anchor, position),
                lang=self.page.lang or "en",
                level=snapshot.level,
                position=position,
                page_rank=self.page.page_rank,
                **snapshot.hierarchy,
                **snapshot.hierarchy_radio,
            )
        )
        self.runs = []

    def render(self, node: PageElement, preserve_space: bool = False) -> None:
        kind = node_kind(node)

        if kind == TAG:
            tag_name = node.name.lower()

            if tag_name in HEADING_TAGS:
                header_text = render_header(node)
                self.flush()
                self.tracker.observe_heading(int(tag_name[1:]), header_text, node.get("id"))

            elif tag_name in CONTENT_BLOCK_TAGS:
                self.flush()
                for child in node.children:
                    self.render(child, preserve_space or tag_name == PRESERVE_SPACE_TAG)

            elif tag_name in CONTENT_INLINE_TAGS:
                for child in node.children:
                    self.render(child, preserve_space)

        elif kind == TEXT:
            if preserve_space or node.strip():
                self.runs.append((str(node), preserve_space))

        elif kind == COMMENT:
            if self.has_excerpt and not self.index_content and self.should_index and is_excerpt_marker(node):
                # Text before the marker still belongs to the excerpt
                self.flush()
                self.should_index = False


class ContentSegmenter:
    """Splits rendered pages into search documents anchored to their nearest headings."""

    def __init__(self, parser: Optional[HtmlParser] = None):
        self.parser = parser or HtmlParser()

    def segment_page(self, page: Page, base_url: str = "", index_content: bool = False) -> List[SearchDocument]:
        """
        Segment one page into search documents.

        Args:
            page: Rendered page
            base_url: Prefix for the page path in document urls
            index_content: Index the full content even when the page has an excerpt

        Returns:
            Documents in emission order. Empty when the markup is empty or fails
            to parse; otherwise at least one document.
        """
        parse_result = self.parser.parse(page.content_rendered)
        if not parse_result.success:
            logger.debug(f"Skipping {page.path}: {parse_result.error}")
            return []
        if not parse_result.nodes:
            logger.debug(f"Skipping {page.path}: no markup")
            return []

        url = f"{base_url}{page.path}"
        walk = _PageWalk(page, url, index_content)
        for node in parse_result.nodes:
            walk.render(node)
        walk.flush()

        documents = walk.documents
        non_empty = [document for document in documents if document.content.strip()]
        if non_empty:
            return non_empty

        if not documents:
            return [self._placeholder_document(page, url)]

        return documents

    def _placeholder_document(self, page: Page, url: str) -> SearchDocument:
        """Single empty record so the page can still be found by title and url."""
        title = page.title or None
        return SearchDocument(
            content="",
            url=url,
            anchor=None,
            object_id=generate_object_id(url, None, 0),
            lang=page.lang or "en",
            level=0,
            position=0,
            page_rank=page.page_rank,
            hierarchy_lvl0=title,
            hierarchy_radio_lvl0=title,
        )


_default_segmenter = ContentSegmenter()


def segment_page(page: Page, base_url: str = "", index_content: bool = False) -> List[SearchDocument]:
    """Segment a page with a shared default ContentSegmenter."""
    return _default_segmenter.segment_page(page, base_url, index_content)
