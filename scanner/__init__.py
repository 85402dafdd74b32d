"""Scanner module for import extraction, resolution and traversal."""

from .errors import (
    DependencyError,
    FileReadError,
    ParseError,
    ResolutionIOError,
    UnsupportedImportKindError,
)
from .extractor import extract_imports, extract_file_imports
from .filesystem import FileSystem
from .resolver import resolve_import, fallback_path, search_order
from .traversal import DependencyWalker, collect_dependencies

__all__ = [
    "DependencyError",
    "FileReadError",
    "ParseError",
    "ResolutionIOError",
    "UnsupportedImportKindError",
    "extract_imports",
    "extract_file_imports",
    "FileSystem",
    "resolve_import",
    "fallback_path",
    "search_order",
    "DependencyWalker",
    "collect_dependencies",
]
