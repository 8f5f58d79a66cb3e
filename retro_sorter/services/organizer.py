"""Organizer that files each game archive into the genre hierarchy.

For every archive the pipeline is:

1. extract into a fresh temporary directory
2. find the descriptor file
3. parse it and apply the language filter
4. require name and genre
5. sanitize genre, sub-genre and name
6. resolve and create ``OUTPUT/genre[/sub_genre]/name``
7. move every top-level extracted file there, renaming on collision
8. report the archive as processed
9. remove the temporary directory, no matter how the steps above ended

Each archive ends in exactly one outcome. Failures inside one archive are
turned into an error result and never stop the run.
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

from ..models import ArchiveResult, GameRecord, RunStatistics, SkipReason, SorterConfig
from .descriptor import DescriptorParser
from .destination import DestinationResolver
from .errors import ErrorHandlingService
from .extractor import ArchiveExtractionService
from .filesystem import FileSystemService
from .language import LanguageFilter
from .reporter import ConsoleReporter
from .sanitizer import NameSanitizer

log = structlog.stdlib.get_logger()


class OrganizeOrchestrator:
    """Runs archives through extraction, classification and filing."""

    def __init__(
        self,
        config: SorterConfig,
        output_root: Path,
        extractor: ArchiveExtractionService,
        filesystem: FileSystemService,
        parser: DescriptorParser | None = None,
        language_filter: LanguageFilter | None = None,
        sanitizer: NameSanitizer | None = None,
        resolver: DestinationResolver | None = None,
        error_service: ErrorHandlingService | None = None,
        reporter: ConsoleReporter | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Active configuration (language, descriptor extensions)
            output_root: Root of the genre hierarchy
            extractor: Archive extraction collaborator
            filesystem: File system collaborator used for moves
            parser: Descriptor parser
            language_filter: Language filter, built from config when omitted
            sanitizer: Name sanitizer
            resolver: Destination resolver, shared across the whole run
            error_service: Converts per-archive failures into reportable errors
            reporter: Receives progress and results, nothing is printed if None
        """
        self._config = config
        self._output_root = output_root
        self._extractor = extractor
        self._filesystem = filesystem
        self._parser = parser or DescriptorParser()
        self._language_filter = language_filter or LanguageFilter(
            case_sensitive=config.case_sensitive_language
        )
        self._sanitizer = sanitizer or NameSanitizer()
        self._resolver = resolver or DestinationResolver()
        self._error_service = error_service or ErrorHandlingService()
        self._reporter = reporter

    @property
    def error_service(self) -> ErrorHandlingService:
        return self._error_service

    def run(self, archives: Sequence[Path], stats: RunStatistics | None = None) -> RunStatistics:
        """Process archives one after another and count the outcomes.

        Args:
            archives: Archives to process, in order
            stats: Statistics to add to; a new instance is created if None

        Returns:
            The statistics for the run
        """
        stats = stats if stats is not None else RunStatistics()
        total = len(archives)

        log.info("Organize run started", archives=total, language=self._config.language)

        for index, archive in enumerate(archives, start=1):
            if self._reporter is not None:
                self._reporter.archive_started(index, total, archive)

            result = self.process_archive(archive)
            stats.record(result)

            if self._reporter is not None:
                self._reporter.archive_finished(result)

        log.info(
            "Organize run finished",
            total=stats.total,
            processed=stats.processed,
            skipped=stats.skipped,
            errors=stats.errors,
            files_moved=stats.files_moved,
        )
        return stats

    def process_archive(self, archive: Path) -> ArchiveResult:
        """Take one archive through the whole pipeline.

        Never raises for problems with the archive itself; those come back
        as an error result.
        """
        log.info("Processing archive", archive=str(archive))
        record: GameRecord | None = None

        try:
            with self._extractor.temporary_directory(archive) as work_dir:
                self._extractor.extract(archive, work_dir)

                descriptor = self._parser.find_descriptor(work_dir, self._config.descriptor_extensions)
                if descriptor is None:
                    return self._skip(archive, SkipReason.NO_DESCRIPTOR)

                record = self._parser.parse_file(descriptor)
                if record is None:
                    return self._skip(archive, SkipReason.NO_DESCRIPTOR)

                # A game in another language is skipped as such even when its
                # descriptor is also incomplete.
                if not self._language_filter.matches(record.language, self._config.language):
                    return self._skip(archive, SkipReason.WRONG_LANGUAGE, record)
                if not record.is_classifiable:
                    return self._skip(archive, SkipReason.UNPARSEABLE, record)

                genre = self._sanitizer.sanitize(record.genre or "")
                name = self._sanitizer.sanitize(record.name or "")
                sub_genre = self._sanitizer.sanitize(record.sub_genre) if record.sub_genre is not None else None
                if not genre or not name:
                    return self._skip(archive, SkipReason.INVALID_AFTER_CLEANING, record)

                destination = self._resolver.resolve_path(self._output_root, genre, sub_genre, name)
                self._filesystem.ensure_directory(destination.directory)

                files_moved = self._move_files(work_dir, destination.directory)

                log.info(
                    "Archive processed",
                    archive=str(archive),
                    destination=str(destination.directory),
                    files_moved=files_moved,
                )
                return ArchiveResult.processed(archive, record, destination.directory, files_moved)

        except Exception as e:
            friendly = self._error_service.handle_error(
                e,
                operation="process_archive",
                component="OrganizeOrchestrator",
                context={"archive": str(archive), "path": str(archive)},
            )
            return ArchiveResult.failed(archive, friendly.message, record)

    def _move_files(self, work_dir: Path, directory: Path) -> int:
        """Move the top-level files of ``work_dir`` into ``directory``.

        Names are resolved one file at a time, right before each move. A
        name whose move fails is released again.
        """
        moved = 0
        for source in self._filesystem.list_files(work_dir):
            final_name = self._resolver.resolve_file_name(source.name, directory)
            try:
                self._filesystem.move_file(source, directory / final_name)
            except OSError:
                self._resolver.release(final_name, directory)
                raise
            moved += 1
        return moved

    @staticmethod
    def _skip(archive: Path, reason: SkipReason, record: GameRecord | None = None) -> ArchiveResult:
        log.info("Archive skipped", archive=str(archive), reason=reason.value)
        return ArchiveResult.skipped(archive, reason, record)
