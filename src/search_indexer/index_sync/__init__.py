"""Index sync: deploys search documents to a remote store."""

from .deploy_config import DeployConfig
from .meilisearch_client import MeilisearchClient, MeilisearchIndex
from .store import DocumentStore, create_document_store
from .sync_engine import IndexSyncEngine, SyncOutcome, sync_index

__all__ = [
    "DeployConfig",
    "DocumentStore",
    "IndexSyncEngine",
    "MeilisearchClient",
    "MeilisearchIndex",
    "SyncOutcome",
    "create_document_store",
    "sync_index",
]
