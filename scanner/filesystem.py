"""File-system access used by the extractor and the resolver."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# exceptions that mean "nothing is there", as opposed to "could not look"
_ABSENT_ERRORS = (FileNotFoundError, NotADirectoryError)


class FileSystem:
    """
    Reads files and checks for their existence.

    ``exists`` returns False only when the path is cleanly absent. Any other
    failure (permission denied, I/O error, symlink loop) propagates as the
    original ``OSError`` so callers never mistake it for absence.
    """

    def exists(self, path: Path) -> bool:
        try:
            os.stat(path)
        except _ABSENT_ERRORS:
            return False
        return True

    def read_text(self, path: Path) -> str:
        """Read a whole file as UTF-8 text."""
        with open(path, "r", encoding="utf-8") as handle:
            content = handle.read()
        logger.debug("Read %d characters from %s", len(content), path)
        return content
