"""Configuration service for managing sorter settings."""

import json
import tempfile
from dataclasses import replace
from pathlib import Path

import structlog

from ..models import SorterConfig

log = structlog.stdlib.get_logger()

DEFAULT_LANGUAGE = "English"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing application configuration.

    Settings are resolved in three layers: built-in defaults, then the JSON
    configuration file, then command-line overrides applied by the caller
    through ``apply_overrides``.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "retro-sorter" / "config.json"
        log.debug("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> SorterConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.debug("Configuration file not found, using defaults", config_path=str(self.config_path))
            return self.get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, str | bool | list[str] | None] = json.load(f)

            if not isinstance(data, dict):
                raise TypeError(f"Expected JSON object, got {type(data).__name__}")

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self.get_default_config()

            log.info("Configuration loaded successfully", config_path=str(self.config_path))
            return config

        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self.get_default_config()

    def save_config(self, config: SorterConfig) -> None:
        """Save configuration to file."""
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            data = self._config_to_dict(config)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully", config_path=str(self.config_path))

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def apply_overrides(
        self,
        config: SorterConfig,
        temp_directory: Path | None = None,
        language: str | None = None,
        case_sensitive_language: bool | None = None,
        log_level: str | None = None,
    ) -> SorterConfig:
        """Return a copy of ``config`` with every non-None override applied."""
        changes: dict[str, Path | str | bool] = {}
        if temp_directory is not None:
            changes["temp_directory"] = temp_directory.expanduser().absolute()
        if language is not None:
            changes["language"] = language
        if case_sensitive_language is not None:
            changes["case_sensitive_language"] = case_sensitive_language
        if log_level is not None:
            changes["log_level"] = log_level.upper()
        return replace(config, **changes) if changes else config

    def validate_config(self, config: SorterConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not isinstance(config.temp_directory, Path):
            errors.append("temp_directory must be a Path object")
        elif not config.temp_directory.is_absolute():
            errors.append("temp_directory must be an absolute path")

        if not isinstance(config.language, str) or not config.language.strip():
            errors.append("language cannot be empty")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        for name, extensions in (
            ("descriptor_extensions", config.descriptor_extensions),
            ("archive_extensions", config.archive_extensions),
        ):
            if not extensions:
                errors.append(f"{name} cannot be empty")
            elif not all(isinstance(ext, str) and len(ext) > 1 and ext.startswith(".") for ext in extensions):
                errors.append(f"{name} must contain extensions starting with '.'")

        return ValidationResult(len(errors) == 0, errors)

    def get_default_config(self) -> SorterConfig:
        """Get default configuration."""
        return SorterConfig(
            temp_directory=Path(tempfile.gettempdir()) / "retro-sorter",
            language=DEFAULT_LANGUAGE,
            log_level="INFO",
            case_sensitive_language=True,
            descriptor_extensions=(".nfo",),
            archive_extensions=(".zip", ".7z"),
        )

    def _config_to_dict(self, config: SorterConfig) -> dict[str, str | bool | list[str]]:
        """Convert SorterConfig to dictionary for JSON serialization."""
        return {
            "temp_directory": str(config.temp_directory),
            "language": config.language,
            "log_level": config.log_level,
            "case_sensitive_language": config.case_sensitive_language,
            "descriptor_extensions": list(config.descriptor_extensions),
            "archive_extensions": list(config.archive_extensions),
        }

    def _dict_to_config(self, data: dict[str, str | bool | list[str] | None]) -> SorterConfig:
        """Convert dictionary to SorterConfig, filling gaps from the defaults."""
        defaults = self.get_default_config()

        temp_raw = data.get("temp_directory")
        temp_directory = Path(str(temp_raw)).expanduser() if temp_raw else defaults.temp_directory

        language_raw = data.get("language", defaults.language)
        language = str(language_raw) if isinstance(language_raw, str) else defaults.language

        log_level_raw = data.get("log_level", defaults.log_level)
        log_level = str(log_level_raw).upper() if isinstance(log_level_raw, str) else defaults.log_level

        case_raw = data.get("case_sensitive_language", True)
        case_sensitive = case_raw if isinstance(case_raw, bool) else True

        return SorterConfig(
            temp_directory=temp_directory,
            language=language,
            log_level=log_level,
            case_sensitive_language=case_sensitive,
            descriptor_extensions=self._extensions(data.get("descriptor_extensions"), defaults.descriptor_extensions),
            archive_extensions=self._extensions(data.get("archive_extensions"), defaults.archive_extensions),
        )

    @staticmethod
    def _extensions(raw: str | bool | list[str] | None, fallback: tuple[str, ...]) -> tuple[str, ...]:
        if not isinstance(raw, list):
            return fallback
        return tuple(str(ext).lower() for ext in raw)
