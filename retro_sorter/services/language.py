"""Language filtering of parsed game records."""

import structlog

log = structlog.stdlib.get_logger()


class LanguageFilter:
    """Decides whether a record's declared language satisfies a request.

    Matching is substring containment, not equality, so ``"English/German"``
    satisfies a request for ``"English"``. This is a known approximation:
    ``"Multilanguage"`` never matches ``"English"``, and ``"Swedish"``
    matches a request for ``"ish"``.
    """

    def __init__(self, case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive

    def matches(self, language: str | None, requested: str) -> bool:
        """Check a declared language against the requested one.

        Args:
            language: Language as declared by the descriptor, None if absent
            requested: Language the run is filtering for

        Returns:
            True if ``requested`` occurs in ``language``
        """
        if language is None:
            return False

        if self.case_sensitive:
            matched = requested in language
        else:
            matched = requested.casefold() in language.casefold()

        if not matched:
            log.debug("Language does not match", language=language, requested=requested)
        return matched
