"""ChromaDB-backed document store."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import chromadb
from chromadb.config import Settings

from .metadata_utils import ID_FIELD, document_to_record, record_to_document
from .store import DocumentStore, WireDocument

logger = logging.getLogger(__name__)


def create_chromadb_client(endpoint: str, api_key: Optional[str] = None):
    """
    Create a ChromaDB client for a server URL or a local persist directory.

    Args:
        endpoint: `http(s)://host:port` of a Chroma server, or a directory path
        api_key: Optional bearer token for a Chroma server

    Returns:
        ChromaDB client instance
    """
    parsed = urlparse(endpoint)
    settings = Settings(anonymized_telemetry=False)

    try:
        if parsed.scheme in ("http", "https"):
            headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
            client = chromadb.HttpClient(
                host=parsed.hostname,
                port=parsed.port or (443 if parsed.scheme == "https" else 8000),
                ssl=parsed.scheme == "https",
                headers=headers,
                settings=settings,
            )
            logger.info(f"Connected to ChromaDB server at {endpoint}")
        else:
            Path(endpoint).mkdir(parents=True, exist_ok=True)
            client = chromadb.PersistentClient(path=endpoint, settings=settings)
            logger.info(f"Created ChromaDB client with persistence at {endpoint}")
        return client

    except Exception as e:
        logger.error(f"Failed to create ChromaDB client: {e}")
        raise


def create_collection(client, collection_name: str, embedding_function, reset: bool = False):
    """
    Create or get ChromaDB collection.

    Args:
        client: ChromaDB client
        collection_name: Name of the collection
        embedding_function: Function to generate embeddings
        reset: Whether to delete and recreate existing collection

    Returns:
        ChromaDB collection instance
    """
    try:
        # Older clients list Collection objects, newer ones list names
        existing = {getattr(col, "name", col) for col in client.list_collections()}
        collection_exists = collection_name in existing

        if collection_exists and reset:
            logger.info(f"Deleting existing collection: {collection_name}")
            client.delete_collection(collection_name)
            collection_exists = False

        if collection_exists:
            logger.info(f"Using existing collection: {collection_name}")
            return client.get_collection(name=collection_name, embedding_function=embedding_function)

        logger.info(f"Creating new collection: {collection_name}")
        return client.create_collection(
            name=collection_name,
            embedding_function=embedding_function,
            metadata={"hnsw:space": "cosine"},
        )

    except Exception as e:
        logger.error(f"Failed to create/get collection {collection_name}: {e}")
        raise


def unique_by_object_id(documents: List[WireDocument]) -> List[WireDocument]:
    """
    Collapse documents sharing an objectID, keeping the last one.

    Anchorless documents of one page share an id. Chroma rejects duplicate ids
    within a single write, while Meilisearch keeps the last document sent.
    """
    unique = {}
    for document in documents:
        unique[document[ID_FIELD]] = document
    if len(unique) < len(documents):
        logger.info(f"Collapsed {len(documents) - len(unique)} documents with duplicate objectIDs")
    return list(unique.values())


def write_documents_to_collection(
    collection, documents: List[WireDocument], batch_size: int = 100, upsert: bool = False
) -> None:
    """
    Add or upsert search documents in batches.

    Args:
        collection: ChromaDB collection
        documents: Search documents in wire format
        batch_size: Number of documents per batch
        upsert: Update matching ids instead of adding
    """
    documents = unique_by_object_id(documents)
    if not documents:
        logger.info("No documents to add")
        return

    operation = "Upserting" if upsert else "Adding"
    logger.info(f"{operation} {len(documents)} documents in batches of {batch_size}")

    total_batches = (len(documents) + batch_size - 1) // batch_size
    for i in range(0, len(documents), batch_size):
        batch = [document_to_record(document) for document in documents[i : i + batch_size]]
        ids = [record[0] for record in batch]
        texts = [record[1] for record in batch]
        metadatas = [record[2] for record in batch]

        try:
            if upsert:
                collection.upsert(ids=ids, documents=texts, metadatas=metadatas)
            else:
                collection.add(ids=ids, documents=texts, metadatas=metadatas)
        except Exception as e:
            logger.error(f"Failed to write batch {i // batch_size + 1}: {e}")
            raise

        logger.info(f"Wrote batch {i // batch_size + 1}/{total_batches}")


class ChromaDocumentStore(DocumentStore):
    """Search documents kept in a ChromaDB collection, content embedded for similarity search."""

    def __init__(
        self,
        endpoint: str,
        collection_name: str,
        api_key: Optional[str] = None,
        batch_size: int = 100,
        embedding_function=None,
        embedding_model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
        embedding_device: str = "cpu",
        max_tokens: int = 256,
        client=None,
    ):
        """
        Initialize the ChromaDB store. Connections are opened lazily.

        Args:
            endpoint: Chroma server URL or persist directory
            collection_name: Name of the collection
            api_key: Optional bearer token for a Chroma server
            batch_size: Documents per add/upsert call
            embedding_function: Embedding function to use instead of a SentenceTransformer
            embedding_model_name: SentenceTransformer model for the default embedding function
            embedding_device: Device for the embedding model
            max_tokens: Token cap applied to content before embedding
            client: Pre-built ChromaDB client
        """
        self.endpoint = endpoint
        self.collection_name = collection_name
        self.api_key = api_key
        self.batch_size = batch_size or 100
        self.embedding_function = embedding_function
        self.embedding_model_name = embedding_model_name
        self.embedding_device = embedding_device
        self.max_tokens = max_tokens

        self.client = client
        self.collection = None

    def setup(self) -> None:
        """Set up client, embedding function and collection."""
        if self.collection is not None:
            return

        if self.client is None:
            self.client = create_chromadb_client(self.endpoint, self.api_key)

        if self.embedding_function is None:
            self.embedding_function = self._default_embedding_function()

        self.collection = create_collection(self.client, self.collection_name, self.embedding_function)

    def _default_embedding_function(self):
        from .embedding_utils import SentenceTransformerEmbeddingFunction, load_embedding_model

        model = load_embedding_model(self.embedding_model_name, device=self.embedding_device)
        return SentenceTransformerEmbeddingFunction(
            model, max_tokens=self.max_tokens, model_name=self.embedding_model_name
        )

    def delete_all_documents(self) -> None:
        self.setup()
        logger.warning(f"Clearing collection {self.collection_name}")
        self.collection = create_collection(
            self.client, self.collection_name, self.embedding_function, reset=True
        )

    def add_documents(self, documents: List[WireDocument]) -> None:
        # collection.add skips ids that already exist, upsert replaces them
        self.setup()
        write_documents_to_collection(self.collection, documents, self.batch_size, upsert=True)

    def update_documents(self, documents: List[WireDocument]) -> None:
        self.setup()
        write_documents_to_collection(self.collection, documents, self.batch_size, upsert=True)

    def count(self) -> int:
        self.setup()
        return self.collection.count()

    def get_documents(self, ids: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """
        Retrieve stored documents in wire format.

        Args:
            ids: objectIDs to fetch, or None for every document

        Returns:
            Search documents in wire format
        """
        self.setup()
        results = self.collection.get(ids=ids, include=["documents", "metadatas"])
        return [
            record_to_document(record_id, results["documents"][i], results["metadatas"][i])
            for i, record_id in enumerate(results["ids"])
        ]
