"""Tests for the ChromaDB document store."""

import tempfile

import pytest

chromadb = pytest.importorskip("chromadb")

from chromadb.api.types import Documents, EmbeddingFunction, Embeddings  # noqa: E402

from search_indexer.index_sync.chromadb_store import (  # noqa: E402
    ChromaDocumentStore, unique_by_object_id)
from search_indexer.index_sync.deploy_config import DeployConfig  # noqa: E402
from search_indexer.index_sync.sync_engine import IndexSyncEngine  # noqa: E402
from search_indexer.page_processor.documents import Page, SearchDocument  # noqa: E402
from search_indexer.page_processor.segmenter import segment_page  # noqa: E402


class LengthEmbeddingFunction(EmbeddingFunction):
    """Deterministic embedding that needs no model download."""

    def __init__(self):
        pass

    def __call__(self, input: Documents) -> Embeddings:
        return [[float(len(text)), float(text.count(" ")), 1.0] for text in input]

    @staticmethod
    def name() -> str:
        return "length-test"

    def get_config(self):
        return {}

    @staticmethod
    def build_from_config(config):
        return LengthEmbeddingFunction()


def make_document(object_id, content):
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


@pytest.fixture
def store():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield ChromaDocumentStore(
            endpoint=temp_dir,
            collection_name="docs",
            embedding_function=LengthEmbeddingFunction(),
        )


class TestChromaDocumentStore:
    """Test ChromaDB-backed sync."""

    def test_full_sync_replaces_documents(self, store):
        """Test that full mode leaves only the new set."""
        config = DeployConfig(host=store.endpoint, index_uid="docs", backend="chromadb")
        engine = IndexSyncEngine()

        engine.sync([make_document(f"old-{i}", f"old text {i}") for i in range(4)], config, store=store)
        outcome = engine.sync([make_document("new-0", "new text")], config, store=store)

        assert outcome.success
        assert store.count() == 1
        assert store.get_documents()[0]["objectID"] == "new-0"

    def test_incremental_sync_upserts(self, store):
        """Test that incremental mode keeps documents missing from the new set."""
        store.add_documents([make_document("X", "stale").to_dict(), make_document("A", "old").to_dict()])
        config = DeployConfig(host=store.endpoint, index_uid="docs", backend="chromadb", type="incremental")

        outcome = IndexSyncEngine().sync([make_document("A", "new")], config, store=store)

        assert outcome.success
        assert store.count() == 2
        updated = store.get_documents(ids=["A"])[0]
        assert updated["content"] == "new"
        assert updated["hierarchy_lvl1"] is None
        assert updated["hierarchy_lvl0"] == "Page"

    def test_full_sync_with_shared_object_ids(self, store):
        """Test a page whose intro paragraphs share the url-only objectID."""
        page = Page(
            path="/guide/",
            content_rendered="<p>First intro.</p><p>Second intro.</p><h2 id='x'>X</h2><p>Body</p>",
            title="Guide",
        )
        documents = segment_page(page, index_content=True)
        assert documents[0].object_id == documents[1].object_id

        config = DeployConfig(host=store.endpoint, index_uid="docs", backend="chromadb")
        outcome = IndexSyncEngine().sync(documents, config, store=store)

        assert outcome.success
        assert store.count() == 2
        intro = store.get_documents(ids=[documents[0].object_id])[0]
        assert intro["content"] == "Second intro."

    def test_add_replaces_existing_document(self, store):
        """Test that adding an existing objectID replaces the stored document."""
        store.add_documents([make_document("A", "old").to_dict()])
        store.add_documents([make_document("A", "new").to_dict()])

        assert store.count() == 1
        assert store.get_documents(ids=["A"])[0]["content"] == "new"


class TestUniqueByObjectId:
    """Test collapsing repeated objectIDs before a write."""

    def test_last_occurrence_wins(self):
        documents = [
            {"objectID": "a", "content": "first"},
            {"objectID": "b", "content": "other"},
            {"objectID": "a", "content": "second"},
        ]

        unique = unique_by_object_id(documents)

        assert [d["objectID"] for d in unique] == ["a", "b"]
        assert unique[0]["content"] == "second"

    def test_no_duplicates_unchanged(self):
        documents = [{"objectID": "a"}, {"objectID": "b"}]
        assert unique_by_object_id(documents) == documents
