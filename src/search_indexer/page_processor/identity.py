"""Stable identifiers for search documents."""

import hashlib
from typing import Optional


def generate_object_id(url: str, anchor: Optional[str], position: int) -> str:
    """
    Derive the objectID used as the join key for incremental updates.

    The position only takes part when an anchor is present, so two anchorless
    documents of the same url share an id.

    Args:
        url: Full document url (base url + page path)
        anchor: Deepest heading anchor, or None
        position: 0-based emission sequence number within the page

    Returns:
        Hex-encoded SHA-1 digest
    """
    id_source = f"{url}#{anchor}-{position}" if anchor else url
    return hashlib.sha1(id_source.encode("utf-8")).hexdigest()
