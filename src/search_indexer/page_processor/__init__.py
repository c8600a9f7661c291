"""Page processor for converting rendered pages into search documents."""

from .documents import Page, SearchDocument
from .header_tracker import HeaderTracker, HeadingFrame, HierarchySnapshot
from .html_parser import HtmlParser, ParseResult
from .identity import generate_object_id
from .page_loader import PageLoader, PageLoadResult
from .processor import PageProcessor
from .scanner import DirectoryScanner, ScannerConfig
from .segmenter import ContentSegmenter, segment_page

__all__ = [
    "ContentSegmenter",
    "DirectoryScanner",
    "HeaderTracker",
    "HeadingFrame",
    "HierarchySnapshot",
    "HtmlParser",
    "Page",
    "PageLoadResult",
    "PageLoader",
    "PageProcessor",
    "ParseResult",
    "ScannerConfig",
    "SearchDocument",
    "generate_object_id",
    "segment_page",
]
