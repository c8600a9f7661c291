"""Document store abstraction and factory."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .deploy_config import BACKEND_CHROMADB, BACKEND_MEILISEARCH, DeployConfig

WireDocument = Dict[str, Any]


class DocumentStore(ABC):
    """Remote collection of search documents keyed by objectID."""

    @abstractmethod
    def delete_all_documents(self) -> None:
        """Remove every document from the collection."""

    @abstractmethod
    def add_documents(self, documents: List[WireDocument]) -> None:
        """
        Bulk-insert documents.

        A stored document with the same objectID is replaced as a whole, and
        when one call repeats an objectID the last occurrence wins.
        """

    @abstractmethod
    def update_documents(self, documents: List[WireDocument]) -> None:
        """Bulk-upsert documents by objectID (last occurrence wins), leaving other documents untouched."""


def create_document_store(config: DeployConfig, api_key: Optional[str] = None) -> DocumentStore:
    """Factory function to create the store for the configured backend."""

    if config.backend == BACKEND_MEILISEARCH:
        from .meilisearch_client import MeilisearchClient

        client = MeilisearchClient(host=config.host, api_key=api_key, timeout=config.timeout)
        return client.index(
            config.index_uid,
            batch_size=config.batch_size,
            wait_for_tasks=config.wait_for_tasks,
        )

    elif config.backend == BACKEND_CHROMADB:
        from .chromadb_store import ChromaDocumentStore

        return ChromaDocumentStore(
            endpoint=config.host,
            collection_name=config.index_uid,
            api_key=api_key,
            batch_size=config.batch_size or 100,
            embedding_model_name=config.embedding_model,
            embedding_device=config.embedding_device,
            max_tokens=config.max_embedding_tokens,
        )

    else:
        raise ValueError(f"Unknown search backend: {config.backend}")
