"""Tests for ChromaDB record conversion."""

import json

from search_indexer.index_sync.metadata_utils import (document_to_record,
                                                      prepare_metadata_for_chromadb,
                                                      record_to_document)
from search_indexer.page_processor.documents import SearchDocument


def sample_document():
    return SearchDocument(
        content="Run the installer",
        url="/guide/",
        anchor="install",
        object_id="abc123",
        lang="en",
        level=2,
        position=4,
        hierarchy_lvl0="Guide",
        hierarchy_lvl1="Guide",
        hierarchy_lvl2="Install",
        hierarchy_radio_lvl0="Guide",
        hierarchy_radio_lvl1="Guide",
        hierarchy_radio_lvl2="Install",
    ).to_dict()


class TestPrepareMetadata:
    """Test metadata conversion to ChromaDB scalars."""

    def test_scalars_kept(self):
        """Test that scalar values pass through."""
        metadata = {"string": "v", "int": 1, "float": 1.5, "bool": True}
        assert prepare_metadata_for_chromadb(metadata) == metadata

    def test_none_dropped(self):
        """Test that None values are removed."""
        assert prepare_metadata_for_chromadb({"anchor": None, "lang": "en"}) == {"lang": "en"}

    def test_complex_types_serialized(self):
        """Test that lists and dicts become JSON strings."""
        result = prepare_metadata_for_chromadb({"tags": ["a", "b"], "extra": {"k": 1}})

        assert json.loads(result["tags"]) == ["a", "b"]
        assert json.loads(result["extra"]) == {"k": 1}


class TestRecordConversion:
    """Test conversion between wire documents and ChromaDB records."""

    def test_document_to_record(self):
        """Test the id, text and metadata split."""
        record_id, text, metadata = document_to_record(sample_document())

        assert record_id == "abc123"
        assert text == "Run the installer"
        assert "objectID" not in metadata
        assert "content" not in metadata
        assert "hierarchy_lvl3" not in metadata
        assert metadata["hierarchy_lvl2"] == "Install"
        assert metadata["position"] == 4

    def test_record_to_document_restores_missing_levels(self):
        """Test that dropped None fields come back as None."""
        document = sample_document()
        restored = record_to_document(*document_to_record(document))

        assert restored == document
