"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SorterConfig:
    """Application configuration settings."""
    temp_directory: Path
    language: str
    log_level: str
    case_sensitive_language: bool = True
    descriptor_extensions: tuple[str, ...] = (".nfo",)
    archive_extensions: tuple[str, ...] = (".zip", ".7z")
