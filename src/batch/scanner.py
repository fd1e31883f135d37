# src/batch/scanner.py — v1
"""Batch scanner: page discovery and per-page processing.

Walks a pages directory for Markdown pages and runs each one through the
document pipeline, in sorted path order, one page at a time.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from pagequeries.batch.models import BatchResult, PageEntry
from pagequeries.config.settings import Settings, load_settings
from pagequeries.logging.logger import setup_logging_from_settings
from pagequeries.pipeline.document_pipeline import DocumentPipeline

logger = logging.getLogger(__name__)


class PageScanner:
    """Discover pages below a root directory and process them.

    Workflow:
        1. List all files with the document extension (recursive if enabled)
        2. For each page: classify, resolve and cache through the pipeline
        3. Return BatchResult with cache statistics
    """

    def __init__(self, pipeline: DocumentPipeline | None = None) -> None:
        self._pipeline = pipeline or DocumentPipeline()

    @property
    def pipeline(self) -> DocumentPipeline:
        return self._pipeline

    def scan(self, pages_root: Path, recursive: bool = True) -> list[Path]:
        """Return every page file below ``pages_root``, sorted.

        Raises:
            ValueError: If ``pages_root`` is not a directory.
        """
        if not pages_root.is_dir():
            msg = f"Pages root is not a directory: {pages_root}"
            raise ValueError(msg)

        extension = self._pipeline.settings.document_extension
        pattern_fn = pages_root.rglob if recursive else pages_root.glob
        pages = sorted(p for p in pattern_fn(f"*{extension}") if p.is_file())

        logger.info(
            "Scanned %s: found %d pages (recursive=%s)",
            pages_root, len(pages), recursive,
        )
        return pages

    def scan_and_process(self, pages_root: Path, recursive: bool = True) -> BatchResult:
        """Process every page below ``pages_root``.

        Filesystem errors propagate: they signal a broken environment, not
        a broken page.
        """
        t0 = time.perf_counter()
        pages = self.scan(pages_root, recursive)
        result = BatchResult(pages_root=str(pages_root), total_pages_found=len(pages))

        for page in pages:
            document = self._pipeline.load_document(page)
            outcome = self._pipeline.process_document(document)
            error_count = len([q for q in outcome.queries if q.has_error])

            if outcome.cache_status == "hit":
                result.cache_hits += 1
            elif outcome.cache_status == "miss":
                result.cache_misses += 1
            elif outcome.cache_status == "cleared":
                result.cleared += 1
            result.failed_queries += error_count

            result.entries.append(
                PageEntry(
                    file_path=str(page),
                    route=document.route or "",
                    document_id=document.document_id,
                    query_ids=outcome.query_ids,
                    cache_status=outcome.cache_status,
                    error_count=error_count,
                )
            )

        result.duration_seconds = round(time.perf_counter() - t0, 2)
        logger.info(
            "Batch done: %d pages, %d hits, %d misses, %d cleared, %d failed queries",
            result.total_pages_found, result.cache_hits, result.cache_misses,
            result.cleared, result.failed_queries,
        )
        return result


def build_pages(
    pages_root: Path | str,
    settings: Settings | None = None,
    recursive: bool = True,
) -> BatchResult:
    """Build-step entry point: configure logging, then process every page.

    Args:
        pages_root: Directory holding the pages (usually ``<site>/src/pages``).
        settings: Settings to use. Loaded from ``.env`` and the environment
            when None.
        recursive: Also process pages in subdirectories.

    Returns:
        BatchResult of the run.
    """
    settings = settings or load_settings()
    setup_logging_from_settings(settings)
    scanner = PageScanner(DocumentPipeline(settings))
    return scanner.scan_and_process(Path(pages_root), recursive=recursive)
