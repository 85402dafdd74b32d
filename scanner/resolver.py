"""Path resolution for import specifiers."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from graph.model import ImportSpecifier, normalize_path
from .errors import ResolutionIOError
from .filesystem import FileSystem

logger = logging.getLogger(__name__)


def search_order(origin_dir: Path, library_roots: Sequence[Path] = ()) -> List[Path]:
    """
    Directories consulted for a relative import, in order.

    The importing file's own directory always comes first, so a local file
    shadows a library file of the same name. With no library roots only the
    origin directory is searched.
    """
    return [origin_dir, *library_roots]


def resolve_import(
    specifier: ImportSpecifier,
    library_roots: Sequence[Path] = (),
    fs: Optional[FileSystem] = None,
) -> Optional[Path]:
    """
    Resolve an import specifier to an existing file.

    Tries, in order:
    1. The specifier itself, if it is an absolute path.
    2. The specifier joined to the importing file's directory.
    3. The specifier joined to each library root, in configured order.

    Args:
        specifier: The import to resolve.
        library_roots: Ordered library directories.
        fs: File-system access; a plain FileSystem if not given.

    Returns:
        Canonical path of the first candidate that exists, or None if no
        candidate exists.

    Raises:
        ResolutionIOError: If checking a candidate fails for any reason other
                           than absence. Later candidates are not tried.
    """
    fs = fs or FileSystem()
    raw = Path(specifier.raw)

    if raw.is_absolute():
        candidates = [raw]
    else:
        candidates = [base / raw for base in search_order(specifier.origin_dir, library_roots)]

    for candidate in candidates:
        candidate = normalize_path(candidate)
        try:
            found = fs.exists(candidate)
        except (OSError, ValueError) as e:
            raise ResolutionIOError(specifier, candidate, e) from e
        if found:
            logger.debug("Resolved %s '%s' to %s", specifier.kind.value, specifier.raw, candidate)
            return candidate

    logger.debug("Could not resolve %s '%s' from %s", specifier.kind.value, specifier.raw, specifier.origin_dir)
    return None


def fallback_path(specifier: ImportSpecifier) -> Path:
    """
    Assumed location of a code import that could not be resolved.

    This is the specifier joined to the importing file's directory, even
    though nothing exists there.
    """
    return normalize_path(specifier.origin_dir / specifier.raw)
