"""Configuration management for the search indexer CLI."""

import fnmatch
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from ..index_sync.deploy_config import DeployConfig
from ..page_processor.documents import Page


class Config:
    """Configuration loaded from .env file and the environment."""

    def __init__(self, env_file: Optional[str] = None):
        """Load configuration from .env file."""
        if env_file:
            load_dotenv(env_file)
        else:
            # Load from the working directory's .env
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        # Page scanning
        self.pages_dir = os.getenv("PAGES_DIR", "./dist")
        self.page_extensions = os.getenv("PAGE_EXTENSIONS", ".html").split(",")
        self.skip_hidden_files = os.getenv("SKIP_HIDDEN_FILES", "true").lower() == "true"
        self.content_selector = os.getenv("CONTENT_SELECTOR", "main") or None

        # Index generation
        self.index_output_file = os.getenv("INDEX_OUTPUT_FILE") or None
        self.index_content = os.getenv("INDEX_CONTENT", "true").lower() == "true"
        self.base_url = os.getenv("BASE_URL", "")
        self.exclude_paths = _split_list(os.getenv("EXCLUDE_PATHS", ""))

        # Deployment (None when no host is configured)
        self.deploy = DeployConfig.from_env()

    def page_filter(self, exclude_paths: Optional[List[str]] = None):
        """
        Build the page inclusion predicate from glob patterns on page paths.

        Args:
            exclude_paths: Patterns to use instead of EXCLUDE_PATHS

        Returns:
            Predicate returning False for excluded pages
        """
        patterns = self.exclude_paths if exclude_paths is None else exclude_paths

        def include(page: Page) -> bool:
            return not any(fnmatch.fnmatch(page.path, pattern) for pattern in patterns)

        return include


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]
