"""Errors raised while sorting archives and the service that reports them.

Any exception escaping the processing of one archive is converted into an
``AppError`` so the run can record it and move on to the next archive.
Problems found before the run starts (bad arguments, an output root that
cannot be created) use the same classes but end the program.
"""

import json
import zipfile
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import py7zr
import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """What kind of thing went wrong."""
    EXTRACTION = "extraction"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """An error as shown to the user, with what they can do about it."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str] = field(default_factory=list)
    technical_details: str | None = None
    recoverable: bool = True


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


def _join_details(*parts: str | None) -> str | None:
    """Join the non-empty detail lines, or None if there are none."""
    lines = [part for part in parts if part]
    return "\n".join(lines) if lines else None


class AppError(Exception):
    """Base class for errors the sorter knows how to report.

    Subclasses fix ``category`` and ``severity``; the generic class is used
    for exceptions nobody anticipated.
    """

    category: ErrorCategory = ErrorCategory.UNEXPECTED
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable
        self.details = details or {}

    def to_user_friendly(self) -> UserFriendlyError:
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=list(self.suggested_actions),
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class ExtractionError(AppError):
    """An archive could not be unpacked."""

    category = ErrorCategory.EXTRACTION

    def __init__(
        self,
        message: str,
        archive: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            suggested_actions=[
                "Check that the archive is not truncated or corrupt",
                "Try opening the archive with another tool",
                "Replace the archive with a fresh copy",
            ],
            technical_details=_join_details(
                f"Archive: {archive}" if archive else None,
                f"Error: {_describe(original_error)}" if original_error else None,
            ),
        )
        self.archive = archive
        self.original_error = original_error


def _file_system_actions(error: Exception | None) -> list[str]:
    """Suggested actions for an OS-level failure."""
    if isinstance(error, PermissionError):
        return [
            "Check file/directory permissions",
            "Run as a user that can write to the output and temp directories",
            "Choose a different location",
        ]
    if isinstance(error, FileNotFoundError):
        return [
            "Check that the path still exists",
            "Make sure no other program is moving files in the output tree",
        ]

    text = str(error).lower() if error else ""
    if "no space" in text or "disk full" in text:
        return ["Free up disk space", "Put the temp or output directory on a larger volume"]
    if "read-only" in text:
        return ["The file system is read-only", "Choose a different location"]
    return ["Check the path and its permissions", "Ensure sufficient disk space"]


class FileSystemError(AppError):
    """A directory could not be created or a file could not be moved."""

    category = ErrorCategory.FILE_SYSTEM

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
        operation: str | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(
            message,
            suggested_actions=_file_system_actions(original_error),
            technical_details=_join_details(
                f"Path: {path}" if path else None,
                _describe(original_error) if original_error else None,
            ),
            recoverable=recoverable,
        )
        # An unrecoverable file system error ends the run
        if not recoverable:
            self.severity = ErrorSeverity.CRITICAL
        self.original_error = original_error
        self.path = path
        self.operation = operation


class ValidationError(AppError):
    """Data that does not have the expected shape."""

    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(
            message,
            suggested_actions=["Review the input requirements"],
            technical_details=_join_details(
                f"Field: {field}" if field else None,
                f"Value: {str(value)[:100]}" if value is not None else None,
            ),
        )
        self.field = field
        self.value = value


class ConfigurationError(AppError):
    """Invalid arguments or settings; always fatal."""

    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        actions = [
            "Check the command-line arguments and configuration file",
            "Reset to default values if needed",
        ]
        if expected:
            actions.append(f"Expected: {expected}")

        super().__init__(
            message,
            suggested_actions=actions,
            technical_details=_join_details(
                f"Setting: {setting}" if setting else None,
                f"Current: {current_value}" if current_value is not None else None,
            ),
            recoverable=False,
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Turns exceptions into logged, user-facing errors.

    Counts the handled errors per category for the end-of-run summary.
    """

    def __init__(self) -> None:
        self._counts: Counter[ErrorCategory] = Counter()

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Classify, log and remember an error.

        Args:
            error: The exception that occurred
            operation: What was being done, e.g. ``process_archive``
            component: The class or module that caught the error
            context: Extra values such as ``archive`` and ``path``

        Returns:
            The user-facing form of the error
        """
        app_error = self._convert_to_app_error(error, operation, component, context or {})

        log_method = log.warning if app_error.severity is ErrorSeverity.WARNING else log.error
        log_method(
            "Error handled",
            error_message=app_error.message,
            category=app_error.category.value,
            severity=app_error.severity.value,
            operation=operation,
            component=component,
            technical_details=app_error.technical_details,
            recoverable=app_error.recoverable,
            context=context,
        )

        self._counts[app_error.category] += 1
        return app_error.to_user_friendly()

    @staticmethod
    def _convert_to_app_error(
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any],
    ) -> AppError:
        if isinstance(error, AppError):
            return error

        if isinstance(error, (zipfile.BadZipFile, py7zr.Bad7zFile)):
            return ExtractionError(
                "The archive is corrupt or not a supported format.",
                archive=context.get("archive"),
                original_error=error,
            )

        if isinstance(error, OSError):
            if isinstance(error, PermissionError):
                message = "Permission denied. You don't have access to this file or directory."
            elif isinstance(error, FileNotFoundError):
                message = "The file or directory was not found."
            else:
                message = f"A file system error occurred: {error}"
            return FileSystemError(
                message,
                original_error=error,
                path=context.get("path"),
                operation=operation,
            )

        # JSONDecodeError is a ValueError, so it goes first
        if isinstance(error, json.JSONDecodeError):
            return ValidationError("Invalid JSON format. The data could not be parsed.", field="json_content")
        if isinstance(error, ValueError):
            return ValidationError(str(error), field=context.get("field"), value=context.get("value"))
        if isinstance(error, TypeError):
            return ValidationError(f"Invalid data type: {error}", field=context.get("field"))

        return AppError(
            "An unexpected error occurred.",
            technical_details=_describe(error),
            details={"operation": operation, "component": component, **context},
        )


    def get_error_count_by_category(self) -> dict[ErrorCategory, int]:
        return dict(self._counts)

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Format an error for printing.

        Args:
            error: The user-facing error
            include_suggestions: Whether to list up to three suggested actions

        Returns:
            The message, optionally followed by the suggestions
        """
        parts = [error.message]
        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            parts.extend(f"  • {action}" for action in error.suggested_actions[:3])
        return "\n".join(parts)
