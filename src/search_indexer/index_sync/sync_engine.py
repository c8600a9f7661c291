"""Index sync engine: pushes a build's documents to the remote search store."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..errors import ConfigurationError, IndexerError
from ..page_processor.documents import SearchDocument
from .deploy_config import DEPLOY_FULL, DeployConfig
from .store import DocumentStore, create_document_store

logger = logging.getLogger(__name__)

StoreFactory = Callable[[DeployConfig, Optional[str]], DocumentStore]


@dataclass
class SyncOutcome:
    """Result of one sync run."""

    success: bool
    mode: str
    document_count: int
    error: Optional[str] = None


class IndexSyncEngine:
    """
    Replaces (full) or merges (incremental) a document set into a remote index.

    full: delete every document, then insert the new set. The two steps are
    not atomic; a failure in between leaves the collection empty.

    incremental: upsert by objectID. Documents missing from the new set stay
    in the remote index.
    """

    def __init__(self, store_factory: StoreFactory = create_document_store):
        self.store_factory = store_factory

    def sync(
        self,
        documents: List[SearchDocument],
        config: DeployConfig,
        store: Optional[DocumentStore] = None,
    ) -> SyncOutcome:
        """
        Sync documents to the configured store. Never raises.

        Args:
            documents: Full ordered document list for the build
            config: Deployment target
            store: Store to use instead of building one from the config

        Returns:
            SyncOutcome describing success or the failure reason
        """
        try:
            api_key = self._resolve_api_key(config)
            issues = config.validate()
            if issues:
                raise ConfigurationError("; ".join(issues), details=issues)

            store = store or self.store_factory(config, api_key)
            payload = [document.to_dict() for document in documents]

            logger.info(f"Deploying {len(payload)} documents to {config.backend} ({config.type})")

            if config.type == DEPLOY_FULL:
                store.delete_all_documents()
                store.add_documents(payload)
            else:
                store.update_documents(payload)

        except ConfigurationError as e:
            logger.error(f"Deploy configuration error: {e}")
            return SyncOutcome(success=False, mode=config.type, document_count=0, error=str(e))
        except IndexerError as e:
            logger.error(f"Failed to deploy to {config.backend}: {e}")
            return SyncOutcome(success=False, mode=config.type, document_count=0, error=str(e))
        except Exception as e:
            logger.exception(f"Failed to deploy to {config.backend}: {e}")
            return SyncOutcome(success=False, mode=config.type, document_count=0, error=str(e))

        logger.info(f"Deployed {len(documents)} documents to index {config.index_uid}")
        return SyncOutcome(success=True, mode=config.type, document_count=len(documents))

    def _resolve_api_key(self, config: DeployConfig) -> Optional[str]:
        api_key = config.resolve_api_key()
        if config.requires_api_key and not api_key:
            raise ConfigurationError("API key not provided and MEILISEARCH_API_KEY environment variable not set")
        return api_key


def sync_index(
    documents: List[SearchDocument],
    config: DeployConfig,
    store: Optional[DocumentStore] = None,
) -> SyncOutcome:
    """Sync documents with a default IndexSyncEngine."""
    return IndexSyncEngine().sync(documents, config, store=store)
