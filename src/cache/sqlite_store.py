# src/cache/sqlite_store.py — v1
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency.
One row per document identifier, so each document has at most one live
entry; writing a new hash replaces the row in place.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from pagequeries.cache.base_cache_store import BaseCacheStore
from pagequeries.cache.fingerprint import serialize_queries
from pagequeries.cache.models import CacheEntry
from pagequeries.core.models import Query

logger = logging.getLogger(__name__)

DB_FILENAME = "pagequeries_cache.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS query_slots (
    document_id TEXT PRIMARY KEY,
    content_hash TEXT NOT NULL,
    data TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store holding one slot per document."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def get(self, document_id: str) -> CacheEntry | None:
        """Retrieve the live entry of a document."""
        row = self._conn.execute(
            "SELECT content_hash, data FROM query_slots WHERE document_id = ?",
            (document_id,),
        ).fetchone()
        if row is None:
            return None
        try:
            queries = [Query.model_validate(r) for r in json.loads(row[1])]
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning("Failed to deserialize cache entry %s: %s", document_id, e)
            return None
        return CacheEntry(document_id=document_id, content_hash=row[0], queries=queries)

    def put(self, entry: CacheEntry) -> None:
        """Store an entry, replacing the document's previous slot."""
        self._conn.execute(
            """INSERT OR REPLACE INTO query_slots
               (document_id, content_hash, data, updated_at)
               VALUES (?, ?, ?, CURRENT_TIMESTAMP)""",
            (entry.document_id, entry.content_hash, serialize_queries(entry.queries)),
        )
        self._conn.commit()

    def delete(self, document_id: str) -> None:
        self._conn.execute("DELETE FROM query_slots WHERE document_id = ?", (document_id,))
        self._conn.commit()

    def contains(self, document_id: str, content_hash: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM query_slots WHERE document_id = ? AND content_hash = ?",
            (document_id, content_hash),
        ).fetchone()
        return row is not None

    def has_entry(self, document_id: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM query_slots WHERE document_id = ?", (document_id,),
        ).fetchone()
        return row is not None

    def list_documents(self) -> list[str]:
        rows = self._conn.execute(
            "SELECT document_id FROM query_slots ORDER BY document_id"
        ).fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        self._conn.close()
