"""Parsing of NFO descriptor files shipped inside game archives.

A descriptor is loosely structured text. Only lines that start with one of
the recognized ``Key:`` prefixes are read, for example::

    Name: Pitstop
    Genre: Racing - Arcade
    Language: English

Everything else (ASCII art, credits, unknown keys) is ignored.
"""

from pathlib import Path

import structlog

from ..models import GameRecord

log = structlog.stdlib.get_logger()

# Line prefix -> GameRecord field. "Genre" is split further below.
DESCRIPTOR_KEYS: dict[str, str] = {
    "Name:": "name",
    "Genre:": "genre",
    "Language:": "language",
}

SUBGENRE_SEPARATOR = " - "


class DescriptorParser:
    """Extracts a GameRecord from descriptor text."""

    def parse(self, text: str) -> GameRecord:
        """Parse descriptor text into a record.

        Keys must start the line and are case-sensitive. The first line for
        a given key wins; later duplicates are ignored. Keys that never
        appear leave their field as None.

        Args:
            text: Full descriptor contents

        Returns:
            The parsed record, possibly with every field absent
        """
        values: dict[str, str] = {}

        for line in text.splitlines():
            for prefix, field_name in DESCRIPTOR_KEYS.items():
                if field_name in values or not line.startswith(prefix):
                    continue
                values[field_name] = line[len(prefix):].strip()
                break

        genre, sub_genre = self.split_genre(values.get("genre"))

        record = GameRecord(
            name=values.get("name"),
            genre=genre,
            sub_genre=sub_genre,
            language=values.get("language"),
        )
        log.debug(
            "Descriptor parsed",
            name=record.name,
            genre=record.genre,
            sub_genre=record.sub_genre,
            language=record.language,
        )
        return record

    @staticmethod
    def split_genre(genre_text: str | None) -> tuple[str | None, str | None]:
        """Split ``"Racing - Arcade"`` into genre and sub-genre.

        Only a hyphen with exactly one space on each side separates; the
        first such separator wins and the remainder is kept whole.
        """
        if genre_text is None:
            return None, None

        genre, separator, sub_genre = genre_text.partition(SUBGENRE_SEPARATOR)
        if not separator:
            return genre_text, None
        return genre, sub_genre

    def parse_file(self, path: Path) -> GameRecord | None:
        """Read and parse a descriptor file.

        Returns:
            The parsed record, or None if the file cannot be read at all
        """
        try:
            raw = path.read_bytes()
        except OSError as e:
            log.warning("Descriptor could not be read", path=str(path), error=str(e))
            return None

        return self.parse(self._decode(raw))

    @staticmethod
    def _decode(raw: bytes) -> str:
        # A leading BOM is dropped. NFO files are traditionally CP437 (box-drawing
        # art), which maps every byte, so it doubles as the lossless fallback.
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            return raw.decode("cp437")

    def find_descriptor(self, directory: Path, extensions: tuple[str, ...] = (".nfo",)) -> Path | None:
        """Pick the descriptor file in ``directory``.

        Only the top level is searched. When several files match, the one
        whose name sorts first wins so repeated runs choose the same file.
        """
        wanted = tuple(ext.lower() for ext in extensions)
        candidates = sorted(
            (path for path in directory.iterdir() if path.is_file() and path.suffix.lower() in wanted),
            key=lambda path: path.name,
        )
        if not candidates:
            log.debug("No descriptor found", directory=str(directory), extensions=list(wanted))
            return None

        if len(candidates) > 1:
            log.info(
                "Multiple descriptors found, using first by name",
                directory=str(directory),
                chosen=candidates[0].name,
                candidates=[path.name for path in candidates],
            )
        return candidates[0]
