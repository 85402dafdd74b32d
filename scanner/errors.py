"""Errors raised while collecting dependencies."""

from pathlib import Path
from typing import Optional

from graph.model import ImportSpecifier


class DependencyError(Exception):
    """Base class for failures that stop a root from being analysed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ParseError(DependencyError):
    """A source file is not valid Jsonnet, or uses an unsupported import."""

    def __init__(self, message: str, path: Optional[Path] = None, line: int = 0):
        location = str(path) if path is not None else "<source>"
        if line:
            location = f"{location}:{line}"
        super().__init__(f"Failed to parse {location}: {message}", path)
        self.reason = message
        self.line = line


class FileReadError(DependencyError):
    """A file picked for extraction could not be read."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"Failed to read {path}: {cause}", path)
        self.cause = cause


class ResolutionIOError(DependencyError):
    """An existence check failed for a reason other than the file being absent."""

    def __init__(self, specifier: ImportSpecifier, candidate: Path, cause: Exception):
        super().__init__(
            f"Failed to check {candidate} while resolving "
            f"{specifier.kind.value} '{specifier.raw}': {cause}",
            candidate,
        )
        self.specifier = specifier
        self.cause = cause


class UnsupportedImportKindError(DependencyError):
    """A binary import reached the traversal."""

    def __init__(self, specifier: ImportSpecifier, path: Optional[Path] = None):
        super().__init__(
            f"Unsupported import kind in {path or specifier.origin_dir}: "
            f"{specifier.kind.value} '{specifier.raw}'",
            path,
        )
        self.specifier = specifier
