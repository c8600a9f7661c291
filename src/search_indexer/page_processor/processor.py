"""Main orchestration for the page processor component."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import tiktoken

from .documents import Page, SearchDocument
from .page_loader import PageLoader
from .scanner import DirectoryScanner, ScannerConfig
from .segmenter import ContentSegmenter

logger = logging.getLogger(__name__)

PageFilter = Callable[[Page], bool]


def include_all(page: Page) -> bool:
    return True


class PageProcessor:
    """Main orchestrator: scan -> load -> filter -> segment."""

    def __init__(
        self,
        base_url: str = "",
        index_content: bool = True,
        page_filter: Optional[PageFilter] = None,
        scanner_config: ScannerConfig = None,
        content_selector: Optional[str] = "main",
    ):
        """
        Initialize the page processor.

        Args:
            base_url: Prefix for page paths in document urls
            index_content: Index full page content, not only excerpts
            page_filter: Predicate deciding which pages are indexed
            scanner_config: Directory scanner configuration
            content_selector: CSS selector of the content container in full HTML documents
        """
        self.base_url = base_url
        self.index_content = index_content
        self.page_filter = page_filter or include_all

        self.scanner = DirectoryScanner(scanner_config)
        self.loader = PageLoader(content_selector=content_selector)
        self.segmenter = ContentSegmenter()

    def load_directory(self, pages_dir: Union[str, Path]) -> List[Page]:
        """
        Load every rendered page under a directory.

        Args:
            pages_dir: Site output directory

        Returns:
            Pages in scan order; unreadable pages are logged and skipped
        """
        pages_dir = Path(pages_dir)
        if not pages_dir.exists():
            raise ValueError(f"Directory does not exist: {pages_dir}")

        logger.info(f"Loading pages from directory: {pages_dir}")

        pages = []
        for relative_path in self.scanner.scan_for_pages(str(pages_dir)):
            result = self.loader.load_file(pages_dir / relative_path, relative_path)
            if not result.success:
                logger.warning(f"Failed to load page {relative_path}: {result.error}")
                continue
            pages.append(result.page)

        logger.info(f"Found {len(pages)} pages to process")
        return pages

    def process_directory(self, pages_dir: Union[str, Path]) -> List[SearchDocument]:
        """
        Main entry point - load and segment every page under a directory.

        Args:
            pages_dir: Site output directory

        Returns:
            Aggregate document list in page order
        """
        return self.process_pages(self.load_directory(pages_dir))

    def should_index(self, page: Page) -> bool:
        """Filter predicate AND the page's own `search` frontmatter flag."""
        return self.page_filter(page) and page.searchable

    def process_pages(self, pages: Iterable[Page]) -> List[SearchDocument]:
        """
        Segment pages that pass the inclusion filter.

        Args:
            pages: Rendered pages

        Returns:
            Aggregate document list in page order
        """
        all_documents = []
        processed_pages = 0
        skipped_pages = 0

        for page in pages:
            if not self.should_index(page):
                logger.debug(f"Excluded page: {page.path}")
                skipped_pages += 1
                continue

            page_documents = self.process_page(page)
            all_documents.extend(page_documents)
            processed_pages += 1

            if processed_pages % 50 == 0:
                logger.info(f"Processed {processed_pages} pages...")

        logger.info(
            f"Processing complete: {processed_pages} pages indexed, "
            f"{skipped_pages} pages excluded, {len(all_documents)} documents generated"
        )
        return all_documents

    def process_page(self, page: Page) -> List[SearchDocument]:
        """Segment a single page."""
        documents = self.segmenter.segment_page(page, self.base_url, self.index_content)
        logger.debug(f"Generated {len(documents)} documents from {page.path}")
        return documents

    def get_processing_stats(self, documents: List[SearchDocument]) -> Dict[str, Any]:
        """
        Get statistics about generated documents.

        Args:
            documents: Aggregate document list

        Returns:
            Dictionary with processing statistics
        """
        if not documents:
            return {
                "total_documents": 0,
                "total_pages": 0,
                "empty_documents": 0,
                "levels": {},
                "total_tokens": 0,
            }

        urls = set()
        levels = {}
        empty = 0

        for document in documents:
            urls.add(document.url)
            levels[document.level] = levels.get(document.level, 0) + 1
            if not document.content:
                empty += 1

        return {
            "total_documents": len(documents),
            "total_pages": len(urls),
            "empty_documents": empty,
            "levels": dict(sorted(levels.items())),
            "total_tokens": count_tokens(document.content for document in documents),
        }


def count_tokens(texts: Iterable[str], encoding_name: str = "cl100k_base") -> int:
    """
    Count tokens across texts using tiktoken.

    Falls back to a character approximation when the encoding is unavailable.
    """
    texts = list(texts)
    try:
        encoding = tiktoken.get_encoding(encoding_name)
    except Exception as e:
        logger.warning(f"Failed to load tiktoken encoding: {e}. Using character approximation.")
        return sum(len(text) for text in texts) // 4

    return sum(len(encoding.encode(text)) for text in texts)
