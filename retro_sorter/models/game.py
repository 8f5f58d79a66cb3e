"""Game-related data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GameRecord:
    """Metadata read from a game's descriptor file.
    
    None marks a field that was not declared at all, while an empty string
    marks a key that was present with a blank value.
    """
    name: str | None = None
    genre: str | None = None
    sub_genre: str | None = None
    language: str | None = None
    
    @property
    def is_classifiable(self) -> bool:
        """Whether both required fields were declared."""
        return self.name is not None and self.genre is not None


@dataclass(frozen=True)
class DestinationPath:
    """Target folder for a game, as sanitized segments under the output root."""
    root: Path
    segments: tuple[str, ...]
    
    @property
    def directory(self) -> Path:
        return self.root.joinpath(*self.segments)
