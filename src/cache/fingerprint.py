# src/cache/fingerprint.py — v1
"""Document identifiers and content hashes for the resolution cache.

The document identifier is derived from the page's route only, so it is
stable across runs and independent of content. The content hash covers the
fully resolved query set, so any change in a query's text, id or compile
status yields a new cache key.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from pathlib import PurePath

from pagequeries.core.models import Query

DEFAULT_PAGES_MARKER = "/src/pages"


def page_route(
    path: str | PurePath,
    pages_marker: str = DEFAULT_PAGES_MARKER,
    extension: str = ".md",
) -> str:
    """Return the logical route of a page file.

    The route is the part of the POSIX-style path following ``pages_marker``,
    with the first occurrence of ``extension`` removed, e.g.
    ``/site/src/pages/sales/index.md`` → ``/sales/index``.

    Raises:
        ValueError: If the path does not lie below ``pages_marker``.
    """
    posix = PurePath(path).as_posix() if isinstance(path, PurePath) else str(path)
    posix = posix.replace("\\", "/")
    _, sep, tail = posix.partition(pages_marker)
    if not sep:
        raise ValueError(f"Page path is not below {pages_marker!r}: {posix}")
    return tail.replace(extension, "", 1)


def document_id_for_route(route: str) -> str:
    """MD5 hex digest of a page route."""
    return hashlib.md5(route.encode("utf-8")).hexdigest()  # noqa: S324


def document_id_for_path(
    path: str | PurePath,
    pages_marker: str = DEFAULT_PAGES_MARKER,
    extension: str = ".md",
) -> str:
    """Stable document identifier for a page file path."""
    return document_id_for_route(page_route(path, pages_marker, extension))


def serialize_queries(queries: Iterable[Query]) -> str:
    """Compact JSON serialization of a resolved query set.

    Keys follow model declaration order and unset compile errors are omitted,
    so equal query sets always serialize to identical text.
    """
    records = [query.to_record() for query in queries]
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)


def content_hash(queries: Iterable[Query]) -> str:
    """MD5 hex digest of the serialized query set."""
    payload = serialize_queries(queries)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()  # noqa: S324
