# src/cache/models.py — v1
"""Cache domain models: CacheEntry, CacheUpdate."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pagequeries.core.models import Query


class CacheEntry(BaseModel):
    """The single live cache slot of a document."""

    document_id: str
    content_hash: str
    queries: list[Query] = Field(default_factory=list)

    @property
    def query_ids(self) -> list[str]:
        return [query.id for query in self.queries]


class CacheUpdate(BaseModel):
    """Result of reconciling a document's resolved queries with the cache."""

    document_id: str
    query_ids: list[str] = Field(default_factory=list)
    content_hash: str | None = None
    status: Literal["hit", "miss", "cleared"]
