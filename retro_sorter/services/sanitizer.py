"""Turn free-text descriptor fields into safe folder names."""

import re

import structlog

log = structlog.stdlib.get_logger()

# Windows: \ / : * ? " < > |, POSIX: / and NUL. Square brackets are removed
# too, descriptors use them for release tags that do not belong in folders.
INVALID_CHARS = '\\/:*?"<>|[]'
_INVALID_PATTERN = re.compile(r'[\\/:*?"<>|\[\]\x00-\x1f\x7f]')
_WHITESPACE_PATTERN = re.compile(r"\s+")


class NameSanitizer:
    """Cleans descriptor text for use as a single path segment.

    The result is an empty string when nothing usable remains; callers
    treat that as invalid rather than inventing a placeholder name.
    """

    def sanitize(self, raw: str) -> str:
        """Sanitize ``raw`` for use as a folder name.

        Args:
            raw: Field value as read from the descriptor

        Returns:
            The cleaned segment, possibly empty
        """
        sanitized = _INVALID_PATTERN.sub("", raw)
        sanitized = _WHITESPACE_PATTERN.sub(" ", sanitized)

        # Windows rejects trailing dots and spaces
        sanitized = sanitized.strip(" .")

        if sanitized != raw:
            log.debug("Name sanitized", original=raw, sanitized=sanitized)
        return sanitized
