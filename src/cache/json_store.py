# src/cache/json_store.py — v1
"""JSON file-based cache store (default CACHE_BACKEND=json).

Layout: ``<cache_root>/<document_id>/<content_hash>.json``, one file per
document at any time. The file holds the compact JSON list of resolved
query records.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from pydantic import ValidationError

from pagequeries.cache.base_cache_store import BaseCacheStore
from pagequeries.cache.fingerprint import serialize_queries
from pagequeries.cache.models import CacheEntry
from pagequeries.core.models import Query

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".json"


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using one directory per document."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        # Idempotent: concurrent builds may race on creating the root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def document_dir(self, document_id: str) -> Path:
        """Directory holding a document's cache slot."""
        return self._root / document_id

    def entry_path(self, document_id: str, content_hash: str) -> Path:
        """File path of a document's entry for ``content_hash``."""
        return self.document_dir(document_id) / f"{content_hash}{ENTRY_SUFFIX}"

    def get(self, document_id: str) -> CacheEntry | None:
        """Load the live entry of a document."""
        paths = self._entry_files(document_id)
        if not paths:
            return None
        if len(paths) > 1:
            logger.warning(
                "Document %s has %d cache files, using the newest",
                document_id, len(paths),
            )
            paths.sort(key=lambda p: p.stat().st_mtime)
        path = paths[-1]

        try:
            records = json.loads(path.read_text(encoding="utf-8"))
            queries = [Query.model_validate(record) for record in records]
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning("Failed to read cache entry %s: %s", path, e)
            return None
        return CacheEntry(
            document_id=document_id, content_hash=path.stem, queries=queries,
        )

    def put(self, entry: CacheEntry) -> None:
        """Clear the document's directory and write the new entry."""
        doc_dir = self.document_dir(entry.document_id)
        if doc_dir.is_dir():
            _empty_dir(doc_dir)
        else:
            doc_dir.mkdir(parents=True, exist_ok=True)

        path = self.entry_path(entry.document_id, entry.content_hash)
        path.write_text(serialize_queries(entry.queries) + "\n", encoding="utf-8")
        logger.debug("Wrote cache entry %s", path)

    def delete(self, document_id: str) -> None:
        """Remove the document's directory with all entries."""
        doc_dir = self.document_dir(document_id)
        if doc_dir.exists():
            shutil.rmtree(doc_dir)
            logger.debug("Removed cache directory %s", doc_dir)

    def contains(self, document_id: str, content_hash: str) -> bool:
        return self.entry_path(document_id, content_hash).is_file()

    def has_entry(self, document_id: str) -> bool:
        return self.document_dir(document_id).exists()

    def list_documents(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(p.name for p in self._root.iterdir() if p.is_dir())

    def _entry_files(self, document_id: str) -> list[Path]:
        doc_dir = self.document_dir(document_id)
        if not doc_dir.is_dir():
            return []
        return sorted(doc_dir.glob(f"*{ENTRY_SUFFIX}"))


def _empty_dir(directory: Path) -> None:
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
