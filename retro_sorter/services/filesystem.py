"""Directory creation, file listing, moves and cleanup for the sorter."""

import shutil
from pathlib import Path

import structlog

log = structlog.stdlib.get_logger()


class FileSystemService:
    """Thin, logged wrapper around the file operations the organizer needs.

    Failures are logged and re-raised as the original ``OSError``; deciding
    whether they end an archive or the whole run is left to the caller.
    """

    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and its parents unless it is already a directory.

        Raises:
            NotADirectoryError: If a file is in the way
            OSError: If the directory cannot be created
        """
        if path.is_dir():
            return
        if path.exists():
            log.error("Cannot create directory, a file is in the way", path=str(path))
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise
        log.debug("Directory created", path=str(path))

    def list_files(self, directory: Path, pattern: str = "*", recursive: bool = False) -> list[Path]:
        """Return the regular files in ``directory``, sorted by path.

        Args:
            directory: Directory to look in
            pattern: Glob pattern for file names
            recursive: Descend into subdirectories as well

        Raises:
            FileNotFoundError: If the directory does not exist
            NotADirectoryError: If the path is a file
        """
        if not directory.exists():
            log.error("Directory to list does not exist", directory=str(directory))
            raise FileNotFoundError(f"Directory not found: {directory}")
        if not directory.is_dir():
            log.error("Path to list is not a directory", directory=str(directory))
            raise NotADirectoryError(f"Path is not a directory: {directory}")

        matches = directory.rglob(pattern) if recursive else directory.glob(pattern)
        files = sorted(path for path in matches if path.is_file())
        log.debug("Files listed", directory=str(directory), recursive=recursive, count=len(files))
        return files

    def move_file(self, source: Path, destination: Path) -> None:
        """Move one file, never overwriting an existing one.

        ``shutil.move`` copies and deletes when the temp directory and the
        output live on different devices.

        Raises:
            FileNotFoundError: If ``source`` is not a file
            FileExistsError: If ``destination`` already exists
            OSError: If the move itself fails
        """
        if not source.is_file():
            log.error("File to move is missing", source=str(source))
            raise FileNotFoundError(f"Source file not found: {source}")
        if destination.exists():
            log.error("Refusing to overwrite existing file", destination=str(destination))
            raise FileExistsError(f"Destination already exists: {destination}")

        self.ensure_directory(destination.parent)
        try:
            shutil.move(str(source), str(destination))
        except OSError as e:
            log.error("Failed to move file", source=str(source), destination=str(destination), error=str(e))
            raise
        log.debug("File moved", source=str(source), destination=str(destination))

    def remove_directory(self, path: Path) -> None:
        """Delete a directory tree; a missing tree is not an error."""
        if not path.exists():
            return
        shutil.rmtree(path)
        log.debug("Directory removed", path=str(path))
