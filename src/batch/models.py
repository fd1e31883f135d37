# src/batch/models.py — v1
"""Batch processing models: PageEntry, BatchResult."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PageEntry(BaseModel):
    """Outcome for one page processed during a batch run."""

    file_path: str
    route: str
    document_id: str
    query_ids: list[str] = Field(default_factory=list)
    cache_status: str
    error_count: int = 0


class BatchResult(BaseModel):
    """Summary result of a batch run over a pages directory."""

    pages_root: str
    total_pages_found: int
    cache_hits: int = 0
    cache_misses: int = 0
    cleared: int = 0
    failed_queries: int = 0
    entries: list[PageEntry] = Field(default_factory=list)
    duration_seconds: float = 0.0
