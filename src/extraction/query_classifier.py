# src/extraction/query_classifier.py — v1
"""Partition a document's fenced blocks into display code and named queries.

A block is display code when its label, lower-cased, is a recognized
language or alias. Every other block, unlabeled ones included, is a named
query whose id is the label.
"""

from __future__ import annotations

import logging

from pagequeries.config.languages import build_language_labels
from pagequeries.core.models import CodeBlock, Query
from pagequeries.extraction.fence_scanner import FenceScanner

logger = logging.getLogger(__name__)


class QueryClassifier:
    """Classify fenced blocks using a recognized-language label set."""

    def __init__(self, language_labels: frozenset[str] | None = None) -> None:
        self._labels = (
            language_labels if language_labels is not None else build_language_labels()
        )

    @property
    def language_labels(self) -> frozenset[str]:
        return self._labels

    def is_display_code(self, block: CodeBlock) -> bool:
        """True when the block is code to display rather than a query."""
        return block.label.lower() in self._labels

    def partition(self, text: str) -> tuple[list[CodeBlock], list[Query]]:
        """Split ``text`` into (display blocks, queries), both in document order."""
        display: list[CodeBlock] = []
        queries: list[Query] = []
        for block in FenceScanner(text):
            if self.is_display_code(block):
                display.append(block)
                continue
            queries.append(Query.from_body(block.label, block.body.strip()))

        logger.debug(
            "Classified %d fenced blocks: %d display, %d queries",
            len(display) + len(queries), len(display), len(queries),
        )
        return display, queries

    def extract_queries(self, text: str) -> list[Query]:
        """Return the unresolved named queries of ``text``."""
        _, queries = self.partition(text)
        return queries
