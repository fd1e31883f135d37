# src/config/languages.py — v1
"""Recognized display languages and their aliases.

A fenced block whose label (case-insensitive) is in the recognized set is
display code rendered with syntax highlighting; any other label names a
query. The table mirrors the highlighter's language catalogue: each
language maps to the aliases the highlighter accepts for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagequeries.config.settings import Settings

SUPPORTED_LANGUAGES: dict[str, tuple[str, ...]] = {
    "markup": ("html", "xml", "svg", "mathml", "ssml", "atom", "rss"),
    "css": (),
    "clike": (),
    "javascript": ("js",),
    "typescript": ("ts",),
    "jsx": (),
    "tsx": (),
    "svelte": (),
    "json": ("webmanifest",),
    "yaml": ("yml",),
    "toml": (),
    "ini": (),
    "markdown": ("md",),
    "bash": ("sh", "shell"),
    "powershell": (),
    "batch": (),
    "python": ("py",),
    "r": (),
    "julia": (),
    "matlab": (),
    "sql": (),
    "plsql": (),
    "go": (),
    "rust": (),
    "java": (),
    "kotlin": ("kt", "kts"),
    "scala": (),
    "c": (),
    "cpp": (),
    "csharp": ("cs", "dotnet"),
    "ruby": ("rb",),
    "php": (),
    "perl": (),
    "lua": (),
    "swift": (),
    "haskell": ("hs",),
    "latex": ("tex", "context"),
    "docker": ("dockerfile",),
    "nginx": (),
    "makefile": (),
    "diff": (),
    "git": (),
    "graphql": (),
    "http": (),
    "regex": (),
    "csv": (),
    "protobuf": (),
}


def build_language_labels(
    extra: list[str] | None = None,
    exclude: list[str] | None = None,
) -> frozenset[str]:
    """Return the lower-cased set of labels treated as display code.

    Args:
        extra: Additional labels to treat as display code.
        exclude: Labels removed from the set so that they name queries.

    Returns:
        Frozen set of language names and aliases.
    """
    labels: set[str] = set()
    for language, aliases in SUPPORTED_LANGUAGES.items():
        labels.add(language)
        labels.update(aliases)

    if extra:
        labels.update(label.lower() for label in extra)
    if exclude:
        labels.difference_update(label.lower() for label in exclude)

    return frozenset(labels)


def language_labels_from_settings(settings: Settings | None = None) -> frozenset[str]:
    """Build the recognized-language set with configuration overrides applied."""
    if settings is None:
        return build_language_labels()
    return build_language_labels(
        extra=settings.extra_languages_list,
        exclude=settings.query_languages_list,
    )
