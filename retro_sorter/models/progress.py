"""Per-archive outcomes and run statistics."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .game import GameRecord


class ArchiveOutcome(Enum):
    """Mutually exclusive classification of one archive."""
    PROCESSED = "processed"
    SKIPPED = "skipped"
    ERROR = "error"


class SkipReason(Enum):
    """Why an archive was skipped."""
    WRONG_LANGUAGE = "wrong-language"
    NO_DESCRIPTOR = "no-descriptor"
    UNPARSEABLE = "unparseable"
    INVALID_AFTER_CLEANING = "invalid-after-cleaning"


@dataclass(frozen=True)
class ArchiveResult:
    """Result of pushing one archive through the pipeline."""
    archive: Path
    outcome: ArchiveOutcome
    skip_reason: SkipReason | None = None
    record: GameRecord | None = None
    destination: Path | None = None
    files_moved: int = 0
    error: str | None = None
    
    @classmethod
    def processed(cls, archive: Path, record: GameRecord, destination: Path, files_moved: int) -> "ArchiveResult":
        return cls(
            archive=archive,
            outcome=ArchiveOutcome.PROCESSED,
            record=record,
            destination=destination,
            files_moved=files_moved,
        )
    
    @classmethod
    def skipped(cls, archive: Path, reason: SkipReason, record: GameRecord | None = None) -> "ArchiveResult":
        return cls(archive=archive, outcome=ArchiveOutcome.SKIPPED, skip_reason=reason, record=record)
    
    @classmethod
    def failed(cls, archive: Path, error: str, record: GameRecord | None = None) -> "ArchiveResult":
        return cls(archive=archive, outcome=ArchiveOutcome.ERROR, record=record, error=error)


@dataclass
class RunStatistics:
    """Counters for a whole run.
    
    Every archive is recorded exactly once, so total always equals
    processed + skipped + errors and the skip reasons sum to skipped.
    """
    total: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    files_moved: int = 0
    skip_reasons: dict[SkipReason, int] = field(
        default_factory=lambda: {reason: 0 for reason in SkipReason}
    )
    
    def record(self, result: ArchiveResult) -> None:
        """Count one archive result in its category."""
        if result.outcome is ArchiveOutcome.SKIPPED and result.skip_reason is None:
            raise ValueError("Skipped result must carry a skip reason")

        self.total += 1
        if result.outcome is ArchiveOutcome.PROCESSED:
            self.processed += 1
            self.files_moved += result.files_moved
        elif result.outcome is ArchiveOutcome.SKIPPED:
            self.skipped += 1
            self.skip_reasons[result.skip_reason] += 1
        else:
            self.errors += 1
    
    def skipped_for(self, reason: SkipReason) -> int:
        return self.skip_reasons[reason]
