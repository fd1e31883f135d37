# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Queries serialize with camelCase keys because the persisted cache artifact is
read by the templating layer.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_QUERY_ID = "untitled"


# === EXTRACTION ===


class CodeBlock(BaseModel):
    """One fenced block found in a document, before classification."""

    model_config = ConfigDict(frozen=True)

    lang: str | None = None
    meta: str | None = None
    body: str
    line: int

    @property
    def label(self) -> str:
        """Block label, defaulting to ``untitled`` when the fence has none."""
        return self.lang if self.lang is not None else DEFAULT_QUERY_ID


class Document(BaseModel):
    """A source text unit with its stable, content-independent identifier."""

    document_id: str
    text: str
    route: str | None = None


# === QUERIES ===


class Query(BaseModel):
    """A named, resolvable block extracted from a document.

    ``compiled_body`` starts equal to ``input_body`` and is rewritten in place
    by the resolver. ``compile_error`` is only set on failure, in which case
    ``compiled_body`` holds the same message.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    input_body: str
    compiled_body: str
    compiled: bool = False
    compile_error: str | None = None

    @classmethod
    def from_body(cls, query_id: str, body: str) -> Query:
        return cls(id=query_id, input_body=body, compiled_body=body)

    @property
    def has_error(self) -> bool:
        return self.compile_error is not None

    def fail(self, message: str) -> None:
        """Replace the body with a compile error message."""
        self.compile_error = message
        self.compiled_body = message

    def to_record(self) -> dict[str, object]:
        """Serialized form stored in the cache (camelCase, no unset error)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# === PIPELINE OUTPUT ===


class DocumentResult(BaseModel):
    """Outcome of running one document through the pipeline."""

    document_id: str
    query_ids: list[str] = Field(default_factory=list)
    queries: list[Query] = Field(default_factory=list)
    content_hash: str | None = None
    cache_status: Literal["hit", "miss", "cleared", "disabled"] = "miss"
    duration_seconds: float = 0.0

    @property
    def errors(self) -> dict[str, str]:
        """Map of query id to compile error for every failed query."""
        return {q.id: q.compile_error for q in self.queries if q.compile_error}
