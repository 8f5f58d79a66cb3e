"""Main entry point for the retro game sorter.

This module provides the command-line entry point with:
- Command-line argument parsing
- Pre-flight checks of the input, output and temp directories
- Application initialization and dependency injection
"""

import argparse
import sys
from pathlib import Path

import structlog

from . import __version__
from .models import RunStatistics, SorterConfig
from .services.config import VALID_LOG_LEVELS, ConfigurationService
from .services.errors import AppError, ConfigurationError, ErrorHandlingService, FileSystemError
from .services.extractor import ArchiveExtractionService
from .services.filesystem import FileSystemService
from .services.logging import setup_logging
from .services.organizer import OrganizeOrchestrator
from .services.reporter import ConsoleReporter

log = structlog.stdlib.get_logger()


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        temp_dir: Path | None,
        language: str | None,
        ignore_case: bool,
        config: Path | None,
        log_level: str | None,
        log_dir: Path | None,
    ) -> None:
        self.input_dir: Path = input_dir
        self.output_dir: Path = output_dir
        self.temp_dir: Path | None = temp_dir
        self.language: str | None = language
        self.ignore_case: bool = ignore_case
        self.config: Path | None = config
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``

    Returns:
        Parsed arguments container
    """
    parser = argparse.ArgumentParser(
        prog="retro-sorter",
        description="Sort retro game archives into Genre/Sub-genre/Name folders using their NFO descriptors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  retro-sorter ./downloads ./games                     Sort English games
  retro-sorter ./downloads ./games --language German   Sort German games
  retro-sorter ./in ./out --temp /mnt/scratch --log-level DEBUG
        """
    )

    _ = parser.add_argument(
        "input",
        type=Path,
        help="Directory scanned recursively for .zip and .7z archives"
    )

    _ = parser.add_argument(
        "output",
        type=Path,
        help="Root of the genre hierarchy (created if missing)"
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    _ = parser.add_argument(
        "--temp",
        type=Path,
        default=None,
        help="Scratch directory for extraction (default: <system temp>/retro-sorter)"
    )

    _ = parser.add_argument(
        "--language",
        default=None,
        help="Only sort games whose declared language contains this text (default: English)"
    )

    _ = parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Compare languages case-insensitively"
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/retro-sorter/config.json)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        default=None,
        help="Set the logging level (default: from config, INFO)"
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: console only)"
    )

    ns = parser.parse_args(argv)

    return ParsedArgs(
        input_dir=ns.input,
        output_dir=ns.output,
        temp_dir=ns.temp,
        language=ns.language,
        ignore_case=bool(ns.ignore_case),
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
    )


class ApplicationContext:
    """Container for the services of one sort run."""

    def __init__(self, config: SorterConfig, output_dir: Path, reporter: ConsoleReporter) -> None:
        self.config = config
        self.output_dir = output_dir
        self.reporter = reporter
        self.filesystem = FileSystemService()
        self.extractor = ArchiveExtractionService(
            filesystem=self.filesystem,
            temp_root=config.temp_directory,
            archive_extensions=config.archive_extensions,
        )
        self.organizer = OrganizeOrchestrator(
            config=config,
            output_root=output_dir,
            extractor=self.extractor,
            filesystem=self.filesystem,
            reporter=reporter,
        )

    def preflight(self, input_dir: Path) -> None:
        """Check the input root and create the output and temp roots.

        Raises:
            ConfigurationError: If the input directory is missing
            FileSystemError: If the output or temp root cannot be created
        """
        if not input_dir.is_dir():
            raise ConfigurationError(
                f"Input directory does not exist: {input_dir}",
                setting="input",
                current_value=str(input_dir),
                expected="an existing directory",
            )

        for label, path in (("output", self.output_dir), ("temp", self.config.temp_directory)):
            try:
                self.filesystem.ensure_directory(path)
            except OSError as e:
                raise FileSystemError(
                    f"Cannot create {label} directory: {path}",
                    original_error=e,
                    path=str(path),
                    operation="preflight",
                    recoverable=False,
                ) from e

    def run(self, input_dir: Path) -> RunStatistics:
        """Discover archives under ``input_dir`` and sort them all."""
        self.preflight(input_dir)

        archives = self.extractor.discover(input_dir)
        if not archives:
            self.reporter.no_archives(input_dir)

        stats = self.organizer.run(archives)
        self.reporter.summary(stats, self.organizer.error_service.get_error_count_by_category())
        return stats


def load_config(args: ParsedArgs) -> SorterConfig:
    """Resolve the configuration: defaults, then config file, then CLI flags."""
    service = ConfigurationService(config_path=args.config)
    config = service.apply_overrides(
        service.load_config(),
        temp_directory=args.temp_dir,
        language=args.language,
        case_sensitive_language=False if args.ignore_case else None,
        log_level=args.log_level,
    )

    validation = service.validate_config(config)
    if not validation.is_valid:
        raise ConfigurationError(
            f"Invalid settings: {', '.join(validation.errors)}",
            expected="valid command-line arguments",
        )
    return config


def _fatal_message(error: AppError) -> str:
    return ErrorHandlingService().create_user_message(error.to_user_friendly())


def run(args: ParsedArgs) -> int:
    """Run a sort and map the outcome to a process exit code.

    Per-archive errors are part of a normal run and still exit with 0.
    """
    initial_level = args.log_level or "INFO"
    try:
        _ = setup_logging(log_level=initial_level, log_dir=args.log_dir)
    except OSError as e:
        error = FileSystemError(
            f"Cannot create log directory: {args.log_dir}",
            original_error=e,
            path=str(args.log_dir),
            operation="setup_logging",
            recoverable=False,
        )
        print(f"Fatal error: {_fatal_message(error)}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
        if config.log_level != initial_level:
            # The config file picked a different level
            _ = setup_logging(log_level=config.log_level, log_dir=args.log_dir)

        log.info(
            "Starting retro sorter",
            version=__version__,
            input_dir=str(args.input_dir),
            output_dir=str(args.output_dir),
            temp_dir=str(config.temp_directory),
            language=config.language,
        )

        context = ApplicationContext(
            config=config,
            output_dir=args.output_dir.expanduser().absolute(),
            reporter=ConsoleReporter(),
        )
        stats = context.run(args.input_dir.expanduser().absolute())

    except KeyboardInterrupt:
        log.info("Run interrupted by user")
        return 130

    except AppError as e:
        log.error("Fatal error", error=e.message, technical_details=e.technical_details)
        message = _fatal_message(e)
        print(f"Fatal error: {message}", file=sys.stderr)
        return 1

    except Exception as e:
        log.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1

    log.info("Application exiting", errors=stats.errors)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
