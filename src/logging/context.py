# src/logging/context.py — v1
"""Contextual logging support: attach document_id, route and stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per-document processing.
_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_route: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "route", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    document_id: str | None = None
    route: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        document_id=_document_id.get(),
        route=_route.get(),
        stage=_stage.get(),
    )


def set_document_context(document_id: str, route: str | None = None) -> None:
    """Set document-level context (called once per document)."""
    _document_id.set(document_id)
    _route.set(route)


def set_stage(stage: str | None) -> None:
    """Set the pipeline stage (classify, resolve, cache)."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _document_id.set(None)
    _route.set(None)
    _stage.set(None)
