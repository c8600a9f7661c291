"""Build driver: filters pages, segments them, exports the index and deploys it."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .index_sync.deploy_config import DeployConfig
from .index_sync.sync_engine import IndexSyncEngine, SyncOutcome
from .page_processor.documents import Page, SearchDocument
from .page_processor.processor import PageFilter, PageProcessor, include_all

logger = logging.getLogger(__name__)

BANNER = "MeiliIndexer |"
BANNER_BLANK = " " * (len(BANNER) - 1) + "|"


class _Banner:
    """Prefixes the first build message with the banner, later ones with a blank column."""

    def __init__(self):
        self._first = True

    def __call__(self) -> str:
        if self._first:
            self._first = False
            return BANNER
        return BANNER_BLANK


@dataclass
class IndexerOptions:
    """Options for one index generation run."""

    index_output_file: Optional[str] = None
    index_content: bool = True
    filter: PageFilter = include_all
    base_url: str = ""
    deploy: Optional[DeployConfig] = None


@dataclass
class BuildResult:
    """What a run produced."""

    documents: List[SearchDocument] = field(default_factory=list)
    skipped: bool = False
    output_written: bool = False
    sync_outcome: Optional[SyncOutcome] = None


def save_index(documents: List[SearchDocument], output_path: Union[str, Path]) -> None:
    """
    Save documents as a pretty-printed UTF-8 JSON array.

    Args:
        documents: Documents to export
        output_path: Target file; parent directories are created
    """
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump([document.to_dict() for document in documents], f, indent=2, ensure_ascii=False)


def load_index(index_path: Union[str, Path]) -> List[SearchDocument]:
    """
    Load documents from a file written by save_index.

    Raises:
        ValueError: If the file does not hold a JSON array of documents
    """
    with open(index_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Index file {index_path} does not contain a JSON array")

    try:
        return [SearchDocument.from_dict(item) for item in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Index file {index_path} contains an invalid document: {e}") from e


def generate_search_index(
    pages: Iterable[Page],
    options: IndexerOptions = None,
    sync_engine: IndexSyncEngine = None,
    env=None,
) -> BuildResult:
    """
    Generate search documents for a build and optionally export and deploy them.

    Args:
        pages: Every page of the build
        options: Output, filter and deploy options
        sync_engine: Engine used for deployment
        env: Environment consulted for the DEPLOY switch (defaults to os.environ)

    Returns:
        BuildResult; export and deploy failures are logged, never raised
    """
    options = options or IndexerOptions()
    banner = _Banner()
    deploy = options.deploy

    # Nothing to produce
    if not options.index_output_file and not deploy:
        logger.info(f"{banner()} skipped")
        return BuildResult(skipped=True)

    # Deploy configured but not triggered, and no file wanted
    if not options.index_output_file and not deploy.is_triggered(env):
        logger.info(f"{banner()} skipped")
        return BuildResult(skipped=True)

    processor = PageProcessor(
        base_url=options.base_url,
        index_content=options.index_content,
        page_filter=options.filter,
    )
    result = BuildResult(documents=processor.process_pages(pages))

    if options.index_output_file:
        try:
            save_index(result.documents, options.index_output_file)
            result.output_written = True
            logger.info(f"{banner()} Index saved to {options.index_output_file}")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"{banner()} Failed to save index to file")
            logger.error(f"{banner()} {e}")

    if deploy and deploy.is_triggered(env):
        logger.info(f"{banner()} Deploying to {deploy.backend}")
        engine = sync_engine or IndexSyncEngine()
        result.sync_outcome = engine.sync(result.documents, deploy)
        if result.sync_outcome.success:
            logger.info(f"{banner()} Finished")
        else:
            logger.error(f"{banner()} Failed to deploy to {deploy.backend}")

    return result
