"""Archive discovery and extraction into per-archive scratch directories."""

import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import py7zr
import structlog

from .errors import ExtractionError
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()


class ArchiveExtractionService:
    """Finds game archives and unpacks them into temporary directories.

    Supported formats are zip (``zipfile``) and 7z (``py7zr``). Each archive
    gets its own directory under ``temp_root``; the directory is removed when
    the ``temporary_directory`` context exits, whatever happened inside it.
    """

    def __init__(
        self,
        filesystem: FileSystemService,
        temp_root: Path,
        archive_extensions: tuple[str, ...] = (".zip", ".7z"),
    ) -> None:
        self._filesystem = filesystem
        self.temp_root = temp_root
        self.archive_extensions = tuple(ext.lower() for ext in archive_extensions)

    def discover(self, input_dir: Path) -> list[Path]:
        """Recursively find archives under ``input_dir``, in sorted order."""
        archives = [
            path
            for path in self._filesystem.list_files(input_dir, recursive=True)
            if path.suffix.lower() in self.archive_extensions
        ]
        log.info("Archives discovered", input_dir=str(input_dir), count=len(archives))
        return archives

    @contextmanager
    def temporary_directory(self, archive: Path) -> Iterator[Path]:
        """Create a fresh scratch directory for ``archive`` and always remove it.

        Removal failures are logged and swallowed so that they can never turn
        a finished archive into an error or stop the run.
        """
        self._filesystem.ensure_directory(self.temp_root)
        work_dir = Path(tempfile.mkdtemp(prefix=f"{archive.stem[:40]}-", dir=self.temp_root))
        log.debug("Temporary directory created", archive=str(archive), path=str(work_dir))
        try:
            yield work_dir
        finally:
            try:
                self._filesystem.remove_directory(work_dir)
            except OSError as e:
                log.warning(
                    "Failed to remove temporary directory",
                    archive=str(archive),
                    path=str(work_dir),
                    error=str(e),
                )

    def extract(self, archive: Path, destination: Path) -> Path:
        """Unpack ``archive`` into ``destination``.

        Args:
            archive: Path to a .zip or .7z file
            destination: Existing directory to extract into

        Returns:
            The destination directory

        Raises:
            ExtractionError: If the archive is unsupported, corrupt or unreadable
        """
        suffix = archive.suffix.lower()
        log.info("Extracting archive", archive=str(archive), extract_dir=str(destination))

        try:
            if suffix == ".zip":
                with zipfile.ZipFile(archive, 'r') as zf:
                    file_list = zf.namelist()
                    zf.extractall(destination)
            elif suffix == ".7z":
                with py7zr.SevenZipFile(archive, mode='r') as sz:
                    file_list = sz.getnames()
                    sz.extractall(path=destination)
            else:
                raise ExtractionError(
                    f"Unsupported archive type: {suffix or '(none)'}",
                    archive=str(archive),
                )

        except zipfile.BadZipFile as e:
            log.error("Failed to extract zip - invalid archive", archive=str(archive), error=str(e))
            raise ExtractionError("The zip archive is corrupt", archive=str(archive), original_error=e) from e
        except py7zr.Bad7zFile as e:
            log.error("Failed to extract 7z - invalid archive", archive=str(archive), error=str(e))
            raise ExtractionError("The 7z archive is corrupt", archive=str(archive), original_error=e) from e
        except OSError as e:
            log.error("Failed to extract archive", archive=str(archive), error=str(e))
            raise ExtractionError("The archive could not be read", archive=str(archive), original_error=e) from e

        log.info("Extraction completed", archive=str(archive), files_extracted=len(file_list))
        return destination
