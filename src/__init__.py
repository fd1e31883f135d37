# src/__init__.py — v1
"""pagequeries: named-query extraction, reference resolution and caching."""

from pagequeries.version import __version__

__all__ = ["__version__"]
