# src/cache/base_cache_store.py — v1
"""Abstract cache store interface.

A store keeps at most one live entry per document identifier: writing a new
entry replaces whatever the document had before.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pagequeries.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for resolution cache backends."""

    @abstractmethod
    def get(self, document_id: str) -> CacheEntry | None:
        """Return the live entry of a document, if any."""

    @abstractmethod
    def put(self, entry: CacheEntry) -> None:
        """Replace the document's slot with ``entry``."""

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Remove every entry of a document. Missing documents are ignored."""

    @abstractmethod
    def contains(self, document_id: str, content_hash: str) -> bool:
        """True when the document's live entry was stored under ``content_hash``."""

    @abstractmethod
    def list_documents(self) -> list[str]:
        """Identifiers of all documents with a live entry."""

    def has_entry(self, document_id: str) -> bool:
        """True when the document currently defines cached queries."""
        return document_id in self.list_documents()

    def close(self) -> None:
        """Release backend resources. No-op by default."""
