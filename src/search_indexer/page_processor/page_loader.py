"""Page loader for rendered HTML files with optional YAML frontmatter."""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import frontmatter

from .documents import Page
from .html_parser import HtmlParser

EXCERPT_MARKER_PATTERN = re.compile(r"<!--\s*more\s*-->")
INDEX_PAGE_NAMES = ("index.html", "index.htm")


@dataclass
class PageLoadResult:
    """Result of loading a rendered page."""

    success: bool
    page: Page = None
    error: str = None


def page_path_for(relative_path: str) -> str:
    """
    Map a file path relative to the site root onto the page's logical path.

    `guide/intro.html` -> `/guide/intro.html`, `guide/index.html` -> `/guide/`.
    """
    path = PurePosixPath(relative_path.replace("\\", "/"))
    if path.name.lower() in INDEX_PAGE_NAMES:
        parent = path.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{path.as_posix()}"


class PageLoader:
    """Loads rendered pages, splitting off frontmatter and page chrome."""

    def __init__(self, content_selector: Optional[str] = "main", parser: HtmlParser = None):
        """
        Initialize the page loader.

        Args:
            content_selector: CSS selector of the content container inside full
                HTML documents; the <body> is used when it does not match
            parser: HTML parser to reuse
        """
        self.content_selector = content_selector
        self.parser = parser or HtmlParser()

    def load_file(self, file_path: Union[str, Path], relative_path: str = None) -> PageLoadResult:
        """
        Load a rendered page from disk.

        Args:
            file_path: Path to the page file
            relative_path: Path relative to the site root (defaults to the file name)

        Returns:
            PageLoadResult with the page, or error information
        """
        file_path = Path(file_path)
        if relative_path is None:
            relative_path = file_path.name

        if not file_path.exists():
            return PageLoadResult(success=False, error=f"File not found: {file_path}")

        if not file_path.is_file():
            return PageLoadResult(success=False, error=f"Path is not a file: {file_path}")

        try:
            text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            return PageLoadResult(success=False, error=f"Unable to read file as UTF-8: {e}")
        except OSError as e:
            return PageLoadResult(success=False, error=f"Error reading file: {e}")

        return self.load_content(text, relative_path)

    def load_content(self, text: str, relative_path: str) -> PageLoadResult:
        """
        Build a Page from rendered text with optional frontmatter.

        Title comes from frontmatter, else <title>, else the first <h1>, else the
        file stem. The excerpt comes from frontmatter, else the markup before
        the first `<!-- more -->` marker.

        Args:
            text: File contents
            relative_path: Path relative to the site root

        Returns:
            PageLoadResult with the page, or error information
        """
        try:
            post = frontmatter.loads(text)
        except Exception as e:
            return PageLoadResult(success=False, error=f"Invalid YAML frontmatter: {e}")

        metadata = dict(post.metadata) if post.metadata else {}
        document = post.content if post.content else ""

        soup = self.parser.load_soup(document)
        html_element = soup.find("html")
        body = soup.find("body")

        if body is not None:
            container = soup.select_one(self.content_selector) if self.content_selector else None
            content = (container or body).decode_contents()
        else:
            content = document

        title = metadata.get("title")
        if not isinstance(title, str) or not title.strip():
            title = self._find_title(soup) or PurePosixPath(relative_path).stem

        lang = metadata.get("lang")
        if not lang and html_element is not None:
            lang = html_element.get("lang")

        excerpt = metadata.get("excerpt")
        if not isinstance(excerpt, str):
            marker = EXCERPT_MARKER_PATTERN.search(content)
            excerpt = content[: marker.start()].strip() if marker else ""

        page = Page(
            path=page_path_for(relative_path),
            content_rendered=content,
            title=title.strip(),
            lang=lang or None,
            frontmatter=metadata,
            excerpt=excerpt,
        )
        return PageLoadResult(success=True, page=page)

    def _find_title(self, soup) -> Optional[str]:
        """First non-empty <title> or <h1> text."""
        for tag_name in ("title", "h1"):
            element = soup.find(tag_name)
            if element:
                text = " ".join(element.get_text(" ", strip=True).split())
                if text:
                    return text
        return None
