"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from retro_sorter import __version__
from retro_sorter.main import ApplicationContext, main, parse_arguments, run
from retro_sorter.models import SorterConfig
from retro_sorter.services import ConfigurationError, FileSystemError
from retro_sorter.services.reporter import ConsoleReporter

from .conftest import ArchiveFactory
from .factories import PITSTOP_NFO

pytestmark = pytest.mark.usefixtures("restore_root_logger")


def cli_args(input_dir: Path, output_dir: Path, tmp_path: Path, *extra: str) -> list[str]:
    """Arguments that keep config and scratch space inside ``tmp_path``."""
    return [
        str(input_dir),
        str(output_dir),
        "--temp", str(tmp_path / "scratch"),
        "--config", str(tmp_path / "config.json"),
        *extra,
    ]


class TestParseArguments:
    def test_defaults(self) -> None:
        args = parse_arguments(["in", "out"])

        assert args.input_dir == Path("in")
        assert args.output_dir == Path("out")
        assert args.temp_dir is None
        assert args.language is None
        assert args.ignore_case is False
        assert args.config is None
        assert args.log_level is None
        assert args.log_dir is None

    def test_all_options(self) -> None:
        args = parse_arguments([
            "in", "out",
            "--temp", "/scratch",
            "--language", "German",
            "--ignore-case",
            "--log-level", "DEBUG",
            "--log-dir", "/logs",
        ])

        assert args.temp_dir == Path("/scratch")
        assert args.language == "German"
        assert args.ignore_case is True
        assert args.log_level == "DEBUG"
        assert args.log_dir == Path("/logs")

    def test_output_is_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["in"])
        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestRun:
    def test_missing_input_exits_with_error(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        args = parse_arguments(cli_args(tmp_path / "nowhere", tmp_path / "out", tmp_path))

        assert run(args) == 1
        assert "Input directory does not exist" in capsys.readouterr().err
        assert not (tmp_path / "out").exists()

    def test_empty_input_exits_cleanly(self, input_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        output_dir = tmp_path / "out"
        args = parse_arguments(cli_args(input_dir, output_dir, tmp_path))

        assert run(args) == 0

        out = capsys.readouterr().out
        assert "No archives found" in out
        assert "Total archives:  0" in out
        assert output_dir.is_dir()
        assert (tmp_path / "scratch").is_dir()

    def test_sorts_archives_end_to_end(
        self,
        input_dir: Path,
        make_archive: ArchiveFactory,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        make_archive("pitstop.zip", {"pitstop.nfo": PITSTOP_NFO, "PITSTOP.D64": b"\x00" * 16})
        (input_dir / "nested").mkdir()
        (input_dir / "nested" / "broken.7z").write_bytes(b"not a 7z archive")
        output_dir = tmp_path / "out"

        assert run(parse_arguments(cli_args(input_dir, output_dir, tmp_path))) == 0

        game_dir = output_dir / "Racing" / "Arcade" / "Pitstop"
        assert (game_dir / "PITSTOP.D64").is_file()
        assert (game_dir / "pitstop.nfo").is_file()
        assert list((tmp_path / "scratch").iterdir()) == []

        out = capsys.readouterr().out
        assert "Processed:       1" in out
        assert "Errors:          1" in out
        assert "  Extraction:             1" in out

    def test_language_flag_selects_other_games(
        self,
        input_dir: Path,
        make_archive: ArchiveFactory,
        tmp_path: Path,
    ) -> None:
        make_archive("pitstop.zip", {"pitstop.nfo": PITSTOP_NFO, "game.prg": b"\x01"})
        make_archive("ski.zip", {"ski.nfo": "Name: Ski\nGenre: Sports\nLanguage: german\n", "ski.prg": b"\x02"})
        output_dir = tmp_path / "out"

        exit_code = run(parse_arguments(cli_args(input_dir, output_dir, tmp_path, "--language", "German", "--ignore-case")))

        assert exit_code == 0
        assert (output_dir / "Sports" / "Ski" / "ski.prg").is_file()
        assert not (output_dir / "Racing").exists()

    def test_invalid_language_is_fatal(self, input_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        args = parse_arguments(cli_args(input_dir, tmp_path / "out", tmp_path, "--language", "   "))

        assert run(args) == 1
        assert "Invalid settings" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_130(self, input_dir: Path, tmp_path: Path) -> None:
        args = parse_arguments(cli_args(input_dir, tmp_path / "out", tmp_path))

        with patch.object(ApplicationContext, "run", side_effect=KeyboardInterrupt):
            assert run(args) == 130

    def test_unexpected_exception_exits_with_error(self, input_dir: Path, tmp_path: Path) -> None:
        args = parse_arguments(cli_args(input_dir, tmp_path / "out", tmp_path))

        with patch.object(ApplicationContext, "run", side_effect=RuntimeError("boom")):
            assert run(args) == 1

    def test_log_dir_receives_log_files(self, input_dir: Path, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        args = parse_arguments(cli_args(input_dir, tmp_path / "out", tmp_path, "--log-dir", str(log_dir)))

        assert run(args) == 0
        assert (log_dir / "sorter.log").read_text()

    def test_unusable_log_dir_is_fatal(
        self, input_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        blocker = tmp_path / "logs"
        blocker.write_text("a file, not a directory")
        args = parse_arguments(cli_args(input_dir, tmp_path / "out", tmp_path, "--log-dir", str(blocker)))

        assert run(args) == 1

        err = capsys.readouterr().err
        assert "Fatal error: Cannot create log directory" in err
        assert "Traceback" not in err
        assert not (tmp_path / "out").exists()

    def test_main_exits_with_run_status(self, input_dir: Path, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(cli_args(input_dir, tmp_path / "out", tmp_path))
        assert exc_info.value.code == 0


class TestPreflight:
    def test_output_blocked_by_file(self, input_dir: Path, tmp_path: Path) -> None:
        blocker = tmp_path / "out"
        blocker.write_text("not a directory")
        config = SorterConfig(temp_directory=tmp_path / "scratch", language="English", log_level="INFO")
        context = ApplicationContext(config, blocker, ConsoleReporter())

        with pytest.raises(FileSystemError) as exc_info:
            context.preflight(input_dir)
        assert exc_info.value.recoverable is False

    def test_input_must_be_directory(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")
        config = SorterConfig(temp_directory=tmp_path / "scratch", language="English", log_level="INFO")
        context = ApplicationContext(config, tmp_path / "out", ConsoleReporter())

        with pytest.raises(ConfigurationError):
            context.preflight(not_a_dir)
