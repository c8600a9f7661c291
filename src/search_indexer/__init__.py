"""Search indexer for turning rendered documentation pages into search documents."""

__version__ = "0.1.0"
