# src/cache/cache_factory.py — v1
"""Factory for cache store instantiation."""

from __future__ import annotations

from pagequeries.cache.base_cache_store import BaseCacheStore
from pagequeries.config.settings import Settings

DEFAULT_CACHE_ROOT = ".pagequeries/extracted"


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to JSON backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "json" if settings is None else settings.cache_backend
    cache_root = DEFAULT_CACHE_ROOT if settings is None else str(settings.cache_root)

    if backend == "json":
        from pagequeries.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=cache_root)

    if backend == "sqlite":
        from pagequeries.cache.sqlite_store import DB_FILENAME, SqliteCacheStore
        return SqliteCacheStore(db_path=f"{cache_root}/{DB_FILENAME}")

    raise ValueError(f"Unsupported cache backend: {backend!r}")
