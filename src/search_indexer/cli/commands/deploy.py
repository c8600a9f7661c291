"""Deploy command - pushes a previously exported index file to the search store."""

import logging
from dataclasses import replace
from typing import Optional

from ...index_sync.sync_engine import sync_index
from ...indexer import load_index
from ..config import Config

logger = logging.getLogger(__name__)


def deploy_command(config: Config, index_file: str, deploy_type: Optional[str] = None) -> int:
    """Load an exported index and sync it now, regardless of the deploy trigger."""
    if config.deploy is None:
        logger.error("❌ No deploy target configured (set MEILISEARCH_HOST and MEILISEARCH_INDEX_UID)")
        return 1

    deploy = replace(config.deploy, type=deploy_type) if deploy_type else config.deploy

    try:
        documents = load_index(index_file)
    except (OSError, ValueError) as e:
        logger.error(f"❌ Cannot load index file {index_file}: {e}")
        return 1

    logger.info(f"🚀 Deploying {len(documents)} documents from {index_file} ({deploy.type})")
    outcome = sync_index(documents, deploy)

    if not outcome.success:
        logger.error(f"❌ Deployment failed: {outcome.error}")
        return 1

    logger.info("✅ Deployment finished")
    return 0
