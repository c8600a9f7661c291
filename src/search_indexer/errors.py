"""Exception types raised by the indexer and its store clients."""

from typing import Any, Optional


class IndexerError(Exception):
    """Base exception for indexing and deployment operations."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class ConfigurationError(IndexerError):
    """Deployment cannot start: missing credential, host, collection or bad option."""


class TransportError(IndexerError):
    """Network, authentication or remote-side failure while talking to a store."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message, details=details)
        self.status_code = status_code


class MeilisearchError(TransportError):
    """Meilisearch rejected a request or a task finished unsuccessfully."""
