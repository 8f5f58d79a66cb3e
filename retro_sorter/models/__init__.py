"""Data models for the retro game sorter."""

from .config import SorterConfig
from .game import DestinationPath, GameRecord
from .progress import ArchiveOutcome, ArchiveResult, RunStatistics, SkipReason

__all__ = [
    "ArchiveOutcome",
    "ArchiveResult",
    "DestinationPath",
    "GameRecord",
    "RunStatistics",
    "SkipReason",
    "SorterConfig",
]
