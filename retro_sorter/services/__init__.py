"""Service layer: the sorting pipeline and its collaborators."""

from .config import ConfigurationService, ValidationResult
from .descriptor import DescriptorParser
from .destination import DestinationResolver
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    ExtractionError,
    FileSystemError,
    UserFriendlyError,
    ValidationError,
)
from .extractor import ArchiveExtractionService
from .filesystem import FileSystemService
from .language import LanguageFilter
from .organizer import OrganizeOrchestrator
from .reporter import ConsoleReporter
from .sanitizer import NameSanitizer

__all__ = [
    "AppError",
    "ArchiveExtractionService",
    "ConfigurationError",
    "ConfigurationService",
    "ConsoleReporter",
    "DescriptorParser",
    "DestinationResolver",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "ExtractionError",
    "FileSystemError",
    "FileSystemService",
    "LanguageFilter",
    "NameSanitizer",
    "OrganizeOrchestrator",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
]
