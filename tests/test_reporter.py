"""Tests for the console reporter."""

from io import StringIO
from pathlib import Path

from retro_sorter.models import ArchiveResult, GameRecord, RunStatistics, SkipReason
from retro_sorter.services import ConsoleReporter, ErrorCategory


def make_reporter() -> tuple[ConsoleReporter, StringIO]:
    stream = StringIO()
    return ConsoleReporter(stream), stream


class TestConsoleReporter:
    def test_archive_started(self) -> None:
        reporter, stream = make_reporter()
        reporter.archive_started(2, 5, Path("/in/games/pitstop.zip"))
        assert stream.getvalue() == "[2/5] pitstop.zip\n"

    def test_processed_archive(self) -> None:
        reporter, stream = make_reporter()
        record = GameRecord(name="Pitstop", genre="Racing", sub_genre="Arcade", language="English")
        result = ArchiveResult.processed(
            Path("pitstop.zip"), record, Path("/out/Racing/Arcade/Pitstop"), 3
        )

        reporter.archive_finished(result)

        assert stream.getvalue().splitlines() == [
            "    Name:      Pitstop",
            "    Genre:     Racing",
            "    Sub-genre: Arcade",
            "    Language:  English",
            "    -> /out/Racing/Arcade/Pitstop (3 file(s) moved)",
        ]

    def test_skipped_archive_shows_missing_fields(self) -> None:
        reporter, stream = make_reporter()
        result = ArchiveResult.skipped(
            Path("ski.zip"), SkipReason.WRONG_LANGUAGE, GameRecord(language="German")
        )

        reporter.archive_finished(result)

        lines = stream.getvalue().splitlines()
        assert "    Name:      -" in lines
        assert "    Language:  German" in lines
        assert not any("Sub-genre" in line for line in lines)
        assert lines[-1] == "    Skipped: Wrong language"

    def test_failed_archive_without_record(self) -> None:
        reporter, stream = make_reporter()
        reporter.archive_finished(ArchiveResult.failed(Path("bad.zip"), "The archive is corrupt"))
        assert stream.getvalue() == "    Error: The archive is corrupt\n"

    def test_no_archives(self) -> None:
        reporter, stream = make_reporter()
        reporter.no_archives(Path("/in"))
        assert stream.getvalue() == "No archives found in /in\n"

    def test_summary_breakdown(self) -> None:
        reporter, stream = make_reporter()
        stats = RunStatistics()
        stats.record(ArchiveResult.processed(Path("a.zip"), GameRecord(name="A", genre="G"), Path("/out/G/A"), 2))
        stats.record(ArchiveResult.skipped(Path("b.zip"), SkipReason.NO_DESCRIPTOR))
        stats.record(ArchiveResult.skipped(Path("c.zip"), SkipReason.WRONG_LANGUAGE))
        stats.record(ArchiveResult.failed(Path("d.zip"), "boom"))

        reporter.summary(stats)

        out = stream.getvalue()
        assert "Total archives:  4" in out
        assert "Processed:       1" in out
        assert "Skipped:         2" in out
        assert "  No descriptor file:     1" in out
        assert "  Wrong language:         1" in out
        assert "  Invalid after cleaning: 0" in out
        assert "Errors:          1" in out
        assert "Files moved:     2" in out

    def test_summary_error_categories(self) -> None:
        reporter, stream = make_reporter()
        stats = RunStatistics()
        for name in ("a.zip", "b.zip", "c.zip"):
            stats.record(ArchiveResult.failed(Path(name), "boom"))

        reporter.summary(
            stats,
            {ErrorCategory.EXTRACTION: 2, ErrorCategory.FILE_SYSTEM: 1, ErrorCategory.UNEXPECTED: 0},
        )

        lines = stream.getvalue().splitlines()
        errors_at = lines.index("Errors:          3")
        assert lines[errors_at + 1:errors_at + 3] == [
            "  Extraction:             2",
            "  File system:            1",
        ]
        assert not any("Unexpected" in line for line in lines)
