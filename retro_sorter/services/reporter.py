"""Console reporting of per-archive progress and the final run summary."""

import sys
from pathlib import Path
from typing import TextIO

from ..models import ArchiveOutcome, ArchiveResult, RunStatistics, SkipReason
from .errors import ErrorCategory

_SKIP_LABELS: dict[SkipReason, str] = {
    SkipReason.WRONG_LANGUAGE: "Wrong language",
    SkipReason.NO_DESCRIPTOR: "No descriptor file",
    SkipReason.UNPARSEABLE: "Missing name or genre",
    SkipReason.INVALID_AFTER_CLEANING: "Invalid after cleaning",
}

_ERROR_LABELS: dict[ErrorCategory, str] = {
    ErrorCategory.EXTRACTION: "Extraction",
    ErrorCategory.FILE_SYSTEM: "File system",
    ErrorCategory.VALIDATION: "Validation",
    ErrorCategory.CONFIGURATION: "Configuration",
    ErrorCategory.UNEXPECTED: "Unexpected",
}


class ConsoleReporter:
    """Prints what the organizer did; holds no state of its own."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def _write(self, line: str = "") -> None:
        print(line, file=self._stream)

    def archive_started(self, index: int, total: int, archive: Path) -> None:
        self._write(f"[{index}/{total}] {archive.name}")

    def archive_finished(self, result: ArchiveResult) -> None:
        record = result.record
        if record is not None:
            self._write(f"    Name:      {record.name if record.name is not None else '-'}")
            self._write(f"    Genre:     {record.genre if record.genre is not None else '-'}")
            if record.sub_genre is not None:
                self._write(f"    Sub-genre: {record.sub_genre}")
            self._write(f"    Language:  {record.language if record.language is not None else '-'}")

        if result.outcome is ArchiveOutcome.PROCESSED:
            self._write(f"    -> {result.destination} ({result.files_moved} file(s) moved)")
        elif result.outcome is ArchiveOutcome.SKIPPED and result.skip_reason is not None:
            self._write(f"    Skipped: {_SKIP_LABELS[result.skip_reason]}")
        else:
            self._write(f"    Error: {result.error}")

    def no_archives(self, input_dir: Path) -> None:
        self._write(f"No archives found in {input_dir}")

    def summary(self, stats: RunStatistics, error_counts: dict[ErrorCategory, int] | None = None) -> None:
        """Print the end-of-run totals with the skip and error breakdowns.

        Args:
            stats: Counts for the finished run
            error_counts: Handled errors per category; categories with no
                errors are left out
        """
        self._write()
        self._write("=" * 40)
        self._write("Summary")
        self._write("=" * 40)
        self._write(f"Total archives:  {stats.total}")
        self._write(f"Processed:       {stats.processed}")
        self._write(f"Skipped:         {stats.skipped}")
        for reason, label in _SKIP_LABELS.items():
            self._write(f"  {label + ':':<24}{stats.skipped_for(reason)}")
        self._write(f"Errors:          {stats.errors}")
        counts = error_counts or {}
        for category, label in _ERROR_LABELS.items():
            if counts.get(category):
                self._write(f"  {label + ':':<24}{counts[category]}")
        self._write(f"Files moved:     {stats.files_moved}")
