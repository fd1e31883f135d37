# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache location, resolver bounds, language
classification overrides and logging. Every field can be set through a
``PAGEQUERIES_``-prefixed environment variable or the ``.env`` file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAGEQUERIES_",
        extra="ignore",
    )

    # === Documents ===
    pages_marker: str = "/src/pages"
    document_extension: str = ".md"

    # === Classification ===
    # Comma-separated labels added to / removed from the display-language set
    extra_languages: str = ""
    query_languages: str = ""

    # === Resolver ===
    max_iterations: int = 100
    max_body_length: int = 10_000_000

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["json", "sqlite"] = "json"
    cache_root: Path = Path(".pagequeries/extracted")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("max_iterations", "max_body_length")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("pages_marker")
    @classmethod
    def validate_pages_marker(cls, v: str) -> str:  # noqa: N805
        """Normalize to a leading-slash POSIX marker without trailing slash."""
        marker = v.strip().replace("\\", "/").rstrip("/")
        if not marker:
            raise ValueError("pages_marker must not be empty")
        if not marker.startswith("/"):
            marker = "/" + marker
        return marker

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        overlap = set(self.extra_languages_list) & set(self.query_languages_list)
        if overlap:
            errors.append(
                "EXTRA_LANGUAGES and QUERY_LANGUAGES overlap: "
                + ", ".join(sorted(overlap))
            )

        if not self.document_extension.startswith("."):
            errors.append("DOCUMENT_EXTENSION must start with '.'")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def extra_languages_list(self) -> list[str]:
        """Parse comma-separated extra display languages (lower-cased)."""
        return _split_labels(self.extra_languages)

    @property
    def query_languages_list(self) -> list[str]:
        """Parse comma-separated labels that must always be treated as queries."""
        return _split_labels(self.query_languages)


def _split_labels(raw: str) -> list[str]:
    return [label.strip().lower() for label in raw.split(",") if label.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-build config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
