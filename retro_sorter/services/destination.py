"""Destination folder construction and file name collision handling."""

from collections.abc import Iterable
from pathlib import Path

import structlog

from ..models import DestinationPath

log = structlog.stdlib.get_logger()


class DestinationResolver:
    """Builds ``root/genre[/sub_genre]/name`` folders and free file names.

    Segments are expected to be sanitized already. Colliding file names get
    ``_1``, ``_2``, ... inserted before the extension. A name is taken if it
    exists on disk or if this resolver already handed it out, so several
    files with the same name from one batch never resolve to the same target.
    """

    def __init__(self) -> None:
        self._claimed: dict[Path, set[str]] = {}

    def resolve_path(
        self,
        root: Path,
        genre: str,
        sub_genre: str | None,
        game_name: str,
    ) -> DestinationPath:
        """Build the destination folder for a game.

        Args:
            root: Output root directory
            genre: Sanitized primary genre
            sub_genre: Sanitized sub-genre, omitted when None or empty
            game_name: Sanitized game name

        Returns:
            The destination, not yet created on disk
        """
        segments = (genre, sub_genre, game_name) if sub_genre else (genre, game_name)
        destination = DestinationPath(root=root, segments=segments)
        log.debug("Destination resolved", directory=str(destination.directory))
        return destination

    def resolve_file_name(self, name: str, directory: Path) -> str:
        """Return a file name that is free in ``directory`` and claim it.

        The filesystem is checked at call time, so files moved in by earlier
        archives are taken into account.
        """
        claimed = self._claimed.setdefault(directory, set())

        candidate = name
        stem, suffix = self._split_name(name)
        counter = 0
        while candidate in claimed or (directory / candidate).exists():
            counter += 1
            candidate = f"{stem}_{counter}{suffix}"

        if counter:
            log.info("File name collision resolved", directory=str(directory), original=name, resolved=candidate)

        claimed.add(candidate)
        return candidate

    def release(self, name: str, directory: Path) -> None:
        """Give back a name from ``resolve_file_name`` whose file never arrived."""
        self._claimed.get(directory, set()).discard(name)

    def resolve_file_destinations(
        self,
        files: Iterable[tuple[str, Path]],
        directory: Path,
    ) -> list[tuple[Path, str]]:
        """Resolve final names for a batch of files headed to one directory.

        Args:
            files: ``(name, source)`` pairs in placement order
            directory: Destination directory

        Returns:
            ``(source, final_name)`` pairs in the same order
        """
        return [(source, self.resolve_file_name(name, directory)) for name, source in files]

    @staticmethod
    def _split_name(name: str) -> tuple[str, str]:
        path = Path(name)
        return path.stem, path.suffix
