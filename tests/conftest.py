"""Shared fixtures for building game archives in a scratch input tree."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from .factories import write_7z, write_zip

ArchiveFactory = Callable[[str, dict[str, bytes | str]], Path]


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture
def make_archive(input_dir: Path, tmp_path: Path) -> ArchiveFactory:
    """Create an archive in the input directory; the suffix picks the format."""

    def factory(file_name: str, files: dict[str, bytes | str]) -> Path:
        path = input_dir / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() == ".7z":
            return write_7z(path, files, tmp_path / "staging" / path.stem)
        return write_zip(path, files)

    return factory


@pytest.fixture
def restore_root_logger():
    """Leave the root logger as it was so later tests are unaffected."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
