"""Tests for the index sync engine."""

from unittest.mock import Mock

import pytest

from search_indexer.errors import MeilisearchError
from search_indexer.index_sync.deploy_config import DeployConfig
from search_indexer.index_sync.store import DocumentStore
from search_indexer.index_sync.sync_engine import IndexSyncEngine, sync_index
from search_indexer.page_processor.documents import SearchDocument


class InMemoryStore(DocumentStore):
    """Document store keeping documents in a dict keyed by objectID."""

    def __init__(self, documents=None):
        self.documents = {doc["objectID"]: doc for doc in documents or []}
        self.calls = []

    def delete_all_documents(self):
        self.calls.append("delete_all")
        self.documents = {}

    def add_documents(self, documents):
        self.calls.append("add")
        for doc in documents:
            self.documents[doc["objectID"]] = doc

    def update_documents(self, documents):
        self.calls.append("update")
        for doc in documents:
            self.documents.setdefault(doc["objectID"], {}).update(doc)


class FailingStore(InMemoryStore):
    def delete_all_documents(self):
        raise MeilisearchError("Invalid API key", status_code=403)


def make_document(object_id, content="text"):
    return SearchDocument(
        content=content,
        url="/page.html",
        anchor=None,
        object_id=object_id,
        lang="en",
        level=0,
        position=0,
        hierarchy_lvl0="Page",
    )


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("MEILISEARCH_API_KEY", raising=False)


@pytest.fixture
def config():
    return DeployConfig(host="http://localhost:7700", index_uid="docs", key="secret")


class TestIndexSyncEngine:
    """Test full and incremental sync."""

    def test_full_sync_replaces_collection(self, config):
        """Test that full mode leaves exactly the new document set."""
        store = InMemoryStore([make_document(f"old-{i}").to_dict() for i in range(10)])
        documents = [make_document(f"new-{i}") for i in range(5)]

        outcome = IndexSyncEngine().sync(documents, config, store=store)

        assert outcome.success
        assert outcome.mode == "full"
        assert outcome.document_count == 5
        assert store.calls == ["delete_all", "add"]
        assert sorted(store.documents) == sorted(f"new-{i}" for i in range(5))

    def test_incremental_sync_keeps_stale_documents(self, config):
        """Test that incremental mode upserts and never deletes."""
        config.type = "incremental"
        store = InMemoryStore([make_document("X").to_dict(), make_document("A", "old").to_dict()])

        outcome = IndexSyncEngine().sync([make_document("A", "new"), make_document("B")], config, store=store)

        assert outcome.success
        assert store.calls == ["update"]
        assert set(store.documents) == {"X", "A", "B"}
        assert store.documents["A"]["content"] == "new"

    def test_payload_uses_wire_format(self, config):
        """Test that the store receives wire dictionaries keyed by objectID."""
        store = Mock(spec=DocumentStore)

        IndexSyncEngine().sync([make_document("id-1")], config, store=store)

        payload = store.add_documents.call_args[0][0]
        assert payload[0]["objectID"] == "id-1"
        assert "hierarchy_lvl6" in payload[0]
        assert payload[0]["hierarchy_lvl6"] is None

    def test_missing_api_key(self, config):
        """Test that a Meilisearch deploy without credential fails before any call."""
        config.key = None
        factory = Mock()

        outcome = IndexSyncEngine(store_factory=factory).sync([make_document("a")], config)

        assert not outcome.success
        assert "MEILISEARCH_API_KEY" in outcome.error
        factory.assert_not_called()

    def test_api_key_from_environment(self, config, monkeypatch):
        """Test that the environment credential is passed to the store factory."""
        config.key = None
        monkeypatch.setenv("MEILISEARCH_API_KEY", "env-key")
        factory = Mock(return_value=InMemoryStore())

        outcome = IndexSyncEngine(store_factory=factory).sync([make_document("a")], config)

        assert outcome.success
        factory.assert_called_once_with(config, "env-key")

    def test_chromadb_needs_no_api_key(self):
        """Test that the credential check only applies to Meilisearch."""
        config = DeployConfig(host="./chroma", index_uid="docs", backend="chromadb")
        store = InMemoryStore()

        outcome = IndexSyncEngine().sync([make_document("a")], config, store=store)

        assert outcome.success

    def test_invalid_configuration(self, config):
        """Test that validation problems are reported without raising."""
        config.type = "partial"
        store = InMemoryStore()

        outcome = IndexSyncEngine().sync([make_document("a")], config, store=store)

        assert not outcome.success
        assert "partial" in outcome.error
        assert store.calls == []

    def test_transport_error_is_caught(self, config):
        """Test that store failures become an unsuccessful outcome."""
        outcome = IndexSyncEngine().sync([make_document("a")], config, store=FailingStore())

        assert not outcome.success
        assert "Invalid API key" in outcome.error

    def test_unexpected_error_is_caught(self, config):
        """Test that any store exception is contained."""
        store = Mock(spec=DocumentStore)
        store.add_documents.side_effect = RuntimeError("disk full")

        outcome = IndexSyncEngine().sync([make_document("a")], config, store=store)

        assert not outcome.success
        assert "disk full" in outcome.error

    def test_empty_document_set(self, config):
        """Test that full sync of nothing still clears the collection."""
        store = InMemoryStore([make_document("old").to_dict()])

        outcome = sync_index([], config, store=store)

        assert outcome.success
        assert store.documents == {}

    def test_malformed_environment_setting(self, config):
        """Test that a bad integer from the environment fails the sync without store calls."""
        config.env_issues = ["DEPLOY_BATCH_SIZE must be an integer, got 'lots'"]
        store = InMemoryStore()

        outcome = IndexSyncEngine().sync([make_document("a")], config, store=store)

        assert not outcome.success
        assert "DEPLOY_BATCH_SIZE" in outcome.error
        assert store.calls == []
