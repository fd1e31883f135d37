# src/pipeline/document_pipeline.py — v1
"""Document pipeline: per-document orchestrator.

Chains the three stages for one document, synchronously:
  Stage 1: Classify (fenced blocks → display code / named queries)
  Stage 2: Resolve (``${id}`` references → compiled bodies or errors)
  Stage 3: Cache (single slot per document, keyed by content hash)

The pipeline also remembers the query ids of every document it processed,
which is what the templating layer reads to generate data bindings.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from pagequeries.cache.cache_factory import create_cache_store
from pagequeries.cache.fingerprint import document_id_for_route, page_route
from pagequeries.cache.resolution_cache import ResolutionCache
from pagequeries.compiler.reference_resolver import ReferenceResolver
from pagequeries.config.languages import language_labels_from_settings
from pagequeries.config.settings import Settings
from pagequeries.core.models import Document, DocumentResult, Query
from pagequeries.extraction.query_classifier import QueryClassifier
from pagequeries.logging.context import clear_context, set_document_context, set_stage

if TYPE_CHECKING:
    from pagequeries.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

# Ids usable as bare variable names in generated page code
BINDABLE_ID_PATTERN = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")


def bindable_query_ids(query_ids: Iterable[str]) -> list[str]:
    """Keep only ids that are valid bare identifiers, in order."""
    return [qid for qid in query_ids if BINDABLE_ID_PATTERN.match(qid)]


class DocumentPipeline:
    """Classify, resolve and cache the queries of one document at a time.

    Usage:
        pipeline = DocumentPipeline(settings)
        result = pipeline.process_file(Path("/site/src/pages/index.md"))
        result.query_ids
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache_store: BaseCacheStore | None = None,
        classifier: QueryClassifier | None = None,
        resolver: ReferenceResolver | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._classifier = classifier or QueryClassifier(
            language_labels_from_settings(self._settings)
        )
        self._resolver = resolver or ReferenceResolver(
            max_iterations=self._settings.max_iterations,
            max_body_length=self._settings.max_body_length,
        )
        self._cache: ResolutionCache | None = None
        if self._settings.cache_enabled:
            store = cache_store or create_cache_store(self._settings)
            self._cache = ResolutionCache(store)
        self._query_ids_by_document: dict[str, list[str]] = {}

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> ResolutionCache | None:
        return self._cache

    def compile(self, text: str) -> list[Query]:
        """Classify and resolve ``text`` without touching the cache."""
        queries = self._classifier.extract_queries(text)
        return self._resolver.resolve(queries)

    def process(self, text: str, document_id: str, route: str | None = None) -> DocumentResult:
        """Run all stages for one document.

        Args:
            text: Raw document text.
            document_id: Stable identifier of the document.
            route: Logical route, used for log context only.

        Returns:
            DocumentResult with resolved queries and cache outcome.
        """
        t0 = time.perf_counter()
        set_document_context(document_id, route)
        try:
            set_stage("classify")
            queries = self._classifier.extract_queries(text)

            set_stage("resolve")
            self._resolver.resolve(queries)

            set_stage("cache")
            if self._cache is None:
                query_ids = [q.id for q in queries]
                digest = None
                status = "disabled"
            else:
                update = self._cache.update(document_id, queries)
                query_ids = update.query_ids
                digest = update.content_hash
                status = update.status
        finally:
            clear_context()

        self._query_ids_by_document[document_id] = query_ids
        duration = time.perf_counter() - t0

        logger.info(
            "Processed %s: %d queries, %d errors, cache %s (%.3fs)",
            route or document_id,
            len(queries),
            sum(1 for q in queries if q.has_error),
            status,
            duration,
        )
        return DocumentResult(
            document_id=document_id,
            query_ids=query_ids,
            queries=queries,
            content_hash=digest,
            cache_status=status,
            duration_seconds=round(duration, 4),
        )

    def process_document(self, document: Document) -> DocumentResult:
        return self.process(document.text, document.document_id, document.route)

    def process_file(self, path: Path, text: str | None = None) -> DocumentResult:
        """Process a page file; its identifier is derived from its route.

        Args:
            path: Page file below the configured pages marker.
            text: Already-loaded content. Read from ``path`` when None.
        """
        document = self.load_document(path, text)
        return self.process_document(document)

    def load_document(self, path: Path, text: str | None = None) -> Document:
        """Build a Document for a page file."""
        absolute = Path(path).resolve()
        route = page_route(
            absolute,
            pages_marker=self._settings.pages_marker,
            extension=self._settings.document_extension,
        )
        if text is None:
            text = absolute.read_text(encoding="utf-8")
        return Document(document_id=document_id_for_route(route), text=text, route=route)

    def query_ids(self, document_id: str) -> list[str] | None:
        """Ids returned by the last run of a document, if it was processed."""
        return self._query_ids_by_document.get(document_id)

    def has_queries(self, document_id: str) -> bool:
        """True when the document has a live cache slot."""
        if self._cache is None:
            return bool(self._query_ids_by_document.get(document_id))
        return self._cache.has_queries(document_id)
