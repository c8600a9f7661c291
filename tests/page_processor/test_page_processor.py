"""Tests for the page processor orchestration."""

import tempfile
from pathlib import Path

import pytest

from search_indexer.page_processor.documents import Page
from search_indexer.page_processor.processor import PageProcessor


@pytest.fixture
def site_dir():
    """Create a small rendered site."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        (root / "index.html").write_text("<h1>Home</h1><p>Welcome</p>", encoding="utf-8")
        (root / "guide").mkdir()
        (root / "guide" / "intro.html").write_text(
            '<h1 id="intro">Intro</h1><p>First</p><h2 id="more">More</h2><p>Second</p>',
            encoding="utf-8",
        )
        (root / "private.html").write_text("---\nsearch: false\n---\n<p>Secret</p>", encoding="utf-8")
        yield root


class TestPageProcessor:
    """Test the PageProcessor component."""

    def test_load_directory(self, site_dir):
        """Test loading every page in scan order."""
        pages = PageProcessor().load_directory(site_dir)
        assert [page.path for page in pages] == ["/guide/intro.html", "/", "/private.html"]

    def test_load_missing_directory(self):
        """Test that a missing directory raises ValueError."""
        with pytest.raises(ValueError):
            PageProcessor().load_directory("/nonexistent/site")

    def test_process_directory(self, site_dir):
        """Test the end-to-end directory pipeline."""
        documents = PageProcessor(base_url="/docs").process_directory(site_dir)

        assert [d.content for d in documents] == ["First", "Second", "Welcome"]
        assert documents[0].url == "/docs/guide/intro.html"
        assert documents[2].url == "/docs/"
        assert all("Secret" not in d.content for d in documents)

    def test_page_filter(self, site_dir):
        """Test that the inclusion predicate drops pages."""
        processor = PageProcessor(page_filter=lambda page: not page.path.startswith("/guide/"))
        documents = processor.process_directory(site_dir)

        assert [d.content for d in documents] == ["Welcome"]

    def test_should_index_respects_search_flag(self):
        """Test that search: false opts a page out even when the filter accepts it."""
        processor = PageProcessor()

        assert processor.should_index(Page(path="/a.html", content_rendered="<p>x</p>"))
        assert not processor.should_index(
            Page(path="/b.html", content_rendered="<p>x</p>", frontmatter={"search": False})
        )

    def test_content_indexing_off(self):
        """Test that pages without excerpt get a placeholder when content indexing is off."""
        processor = PageProcessor(index_content=False)
        documents = processor.process_pages(
            [Page(path="/a.html", content_rendered="<p>Body</p>", title="A")]
        )

        assert len(documents) == 1
        assert documents[0].content == ""
        assert documents[0].hierarchy_lvl0 == "A"

    def test_processing_stats_empty(self):
        """Test statistics for an empty run."""
        stats = PageProcessor().get_processing_stats([])

        assert stats["total_documents"] == 0
        assert stats["total_pages"] == 0
        assert stats["levels"] == {}

    def test_processing_stats(self, site_dir):
        """Test document and level counts."""
        processor = PageProcessor()
        documents = processor.process_directory(site_dir)
        stats = processor.get_processing_stats(documents)

        assert stats["total_documents"] == 3
        assert stats["total_pages"] == 2
        assert stats["empty_documents"] == 0
        assert stats["levels"] == {1: 2, 2: 1}
        assert stats["total_tokens"] > 0
