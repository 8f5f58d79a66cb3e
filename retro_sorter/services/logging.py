"""Logging setup: structlog on top of the standard library's handlers.

Console output goes to stderr so the report printed on stdout stays clean
when piped. With a log directory, JSON lines are also written to rotating
``sorter.log`` and ``error.log`` files.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

CONSOLE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"

# file name -> (minimum level, None meaning the configured one; max bytes; backups)
LOG_FILES: dict[str, tuple[int | None, int, int]] = {
    "sorter.log": (None, 10 * 1024 * 1024, 5),
    "error.log": (logging.ERROR, 5 * 1024 * 1024, 3),
}


class LoggingService:
    """Configures the root logger and structlog for one process."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.is_development = os.getenv("ENVIRONMENT", "development") == "development"

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def configure(self) -> None:
        """Install the handlers and the structlog processor chain.

        Safe to call again; the previous handlers are replaced. The log
        directory is created first, so if that fails the current setup is
        left untouched.

        Raises:
            OSError: If the log directory cannot be created
        """
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)

        root_logger.addHandler(self._console_handler())
        if self.log_dir:
            for file_name, (level, max_bytes, backups) in LOG_FILES.items():
                root_logger.addHandler(self._file_handler(self.log_dir / file_name, level, max_bytes, backups))

        # Loggers are not cached so a second configure() reaches them
        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(self.numeric_level)
        if self.is_development:
            handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
        else:
            handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _file_handler(self, path: Path, level: int | None, max_bytes: int, backups: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=max_bytes,
            backupCount=backups,
            encoding="utf-8",
        )
        handler.setLevel(self.numeric_level if level is None else level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _get_processors(self) -> list[Any]:
        """Build the processor chain; the last processor renders the line."""
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        # Log files always get JSON, so the console does too when they are on
        if self.is_development and not self.log_dir:
            processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
        else:
            processors.append(structlog.processors.JSONRenderer())
        return processors


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
) -> LoggingService:
    """Configure logging for the process.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: ``development`` or ``production``; overrides ``ENVIRONMENT``

    Returns:
        The configured LoggingService
    """
    if environment:
        os.environ["ENVIRONMENT"] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir)
    service.configure()
    return service
