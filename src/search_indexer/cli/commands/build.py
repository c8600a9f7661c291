"""Build command - generates the search index from rendered pages."""

import logging
from dataclasses import replace
from typing import List, Optional

from ...index_sync.deploy_config import TRIGGER_EVERYTIME
from ...indexer import IndexerOptions, generate_search_index
from ...page_processor.processor import PageProcessor
from ...page_processor.scanner import ScannerConfig
from ..config import Config

logger = logging.getLogger(__name__)


def build_command(
    config: Config,
    pages_dir: Optional[str] = None,
    output: Optional[str] = None,
    base_url: Optional[str] = None,
    no_content: bool = False,
    exclude: Optional[List[str]] = None,
    deploy_type: Optional[str] = None,
    everytime: bool = False,
) -> int:
    """Generate search documents, export them and deploy them per the trigger."""
    logger.info("🔄 Starting search index build...")

    pages_dir = pages_dir or config.pages_dir
    output = output or config.index_output_file
    deploy = config.deploy
    if deploy is not None:
        if deploy_type:
            deploy = replace(deploy, type=deploy_type)
        if everytime:
            deploy = replace(deploy, trigger=TRIGGER_EVERYTIME)

    logger.info(f"📁 Pages directory: {pages_dir}")
    logger.info(f"💾 Index file: {output or '(none)'}")
    if deploy is not None:
        logger.info(f"🚀 Deploy: {deploy.backend} {deploy.host} / {deploy.index_uid} ({deploy.type}, {deploy.trigger})")
    else:
        logger.info("🚀 Deploy: (not configured)")

    processor = PageProcessor(
        scanner_config=ScannerConfig(
            skip_hidden_files=config.skip_hidden_files,
            supported_extensions=config.page_extensions,
        ),
        content_selector=config.content_selector,
    )

    try:
        pages = processor.load_directory(pages_dir)
    except (ValueError, FileNotFoundError, NotADirectoryError) as e:
        logger.error(f"❌ Cannot read pages: {e}")
        return 1

    options = IndexerOptions(
        index_output_file=output,
        index_content=config.index_content and not no_content,
        filter=config.page_filter(exclude),
        base_url=config.base_url if base_url is None else base_url,
        deploy=deploy,
    )
    result = generate_search_index(pages, options)

    if result.skipped:
        logger.info("⏭️ Nothing to do: no index file and no triggered deployment")
        return 0

    stats = processor.get_processing_stats(result.documents)
    logger.info(
        f"📊 {stats['total_documents']} documents from {stats['total_pages']} pages "
        f"({stats['empty_documents']} empty, {stats['total_tokens']:,} tokens)"
    )
    logger.info(f"📊 Documents per heading level: {stats['levels']}")

    if result.sync_outcome is not None and not result.sync_outcome.success:
        logger.warning(f"⚠️ Deployment failed: {result.sync_outcome.error}")

    logger.info("🎉 Build completed")
    return 0
