# src/cache/resolution_cache.py — v1
"""Single-slot resolution cache keyed by document identifier.

Reconciles a document's freshly resolved queries with the store:

- no queries: the document's slot is removed;
- content hash already stored: cache hit, nothing is written;
- otherwise: the slot is replaced by the new query set.

Only the query ids are returned, whether the cache was hit or missed.
"""

from __future__ import annotations

import logging

from pagequeries.cache.base_cache_store import BaseCacheStore
from pagequeries.cache.fingerprint import content_hash
from pagequeries.cache.models import CacheEntry, CacheUpdate
from pagequeries.core.models import Query

logger = logging.getLogger(__name__)


class ResolutionCache:
    """Keep one cached, resolved query set per document."""

    def __init__(self, store: BaseCacheStore) -> None:
        self._store = store

    @property
    def store(self) -> BaseCacheStore:
        return self._store

    def update(self, document_id: str, queries: list[Query]) -> CacheUpdate:
        """Store ``queries`` for ``document_id`` unless already cached."""
        if not queries:
            self._store.delete(document_id)
            logger.debug("Document %s defines no queries, cache cleared", document_id)
            return CacheUpdate(document_id=document_id, status="cleared")

        query_ids = [query.id for query in queries]
        digest = content_hash(queries)

        if self._store.contains(document_id, digest):
            logger.debug("Cache hit for %s (%s)", document_id, digest)
            return CacheUpdate(
                document_id=document_id,
                query_ids=query_ids,
                content_hash=digest,
                status="hit",
            )

        self._store.put(
            CacheEntry(document_id=document_id, content_hash=digest, queries=queries)
        )
        logger.info(
            "Cached %d queries for %s under %s", len(queries), document_id, digest,
        )
        return CacheUpdate(
            document_id=document_id,
            query_ids=query_ids,
            content_hash=digest,
            status="miss",
        )

    def query_ids(self, document_id: str, queries: list[Query]) -> list[str]:
        """Update the cache and return only the ids."""
        return self.update(document_id, queries).query_ids

    def has_queries(self, document_id: str) -> bool:
        """True when the document currently has a cached query set."""
        return self._store.has_entry(document_id)

    def load(self, document_id: str) -> list[Query] | None:
        """Return the cached queries of a document, if any."""
        entry = self._store.get(document_id)
        return entry.queries if entry is not None else None
