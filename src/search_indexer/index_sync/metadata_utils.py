"""Utilities for converting search documents between wire format and ChromaDB records."""

import json
from typing import Any, Dict, Tuple, Union

from ..page_processor.documents import HIERARCHY_LEVELS, RADIO_HIERARCHY_LEVELS

ID_FIELD = "objectID"
CONTENT_FIELD = "content"

# Fields that are always present in wire documents, even when None
NULLABLE_FIELDS = (
    ["anchor"]
    + [f"hierarchy_lvl{i}" for i in range(HIERARCHY_LEVELS)]
    + [f"hierarchy_radio_lvl{i}" for i in range(RADIO_HIERARCHY_LEVELS)]
)


def prepare_metadata_for_chromadb(
    metadata: Dict[str, Any],
) -> Dict[str, Union[str, int, float, bool]]:
    """
    Convert metadata to ChromaDB-compatible format.

    ChromaDB only accepts scalar values (string, int, float, bool) in metadata.
    None values are dropped and complex types (dict, list) become JSON strings.

    Args:
        metadata: Original metadata dictionary

    Returns:
        ChromaDB-compatible metadata
    """
    chromadb_metadata = {}

    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            chromadb_metadata[key] = json.dumps(value)
        elif isinstance(value, (str, int, float, bool)):
            chromadb_metadata[key] = value
        else:
            chromadb_metadata[key] = str(value)

    return chromadb_metadata


def document_to_record(document: Dict[str, Any]) -> Tuple[str, str, Dict[str, Any]]:
    """
    Split a wire document into ChromaDB's (id, document, metadata) triple.

    Args:
        document: Search document in wire format

    Returns:
        Tuple of objectID, content and scalar metadata
    """
    metadata = {key: value for key, value in document.items() if key not in (ID_FIELD, CONTENT_FIELD)}
    return document[ID_FIELD], document.get(CONTENT_FIELD, ""), prepare_metadata_for_chromadb(metadata)


def record_to_document(record_id: str, content: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rebuild a wire document from a ChromaDB record.

    Dropped None fields are restored so every hierarchy field is present again.

    Args:
        record_id: ChromaDB id (the objectID)
        content: Stored document text
        metadata: Stored scalar metadata

    Returns:
        Search document in wire format
    """
    document = {CONTENT_FIELD: content or "", ID_FIELD: record_id}
    for field in NULLABLE_FIELDS:
        document[field] = None
    document.update(metadata or {})
    return document
