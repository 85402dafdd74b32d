"""Line exporter: one ``FILE: DEP DEP ...`` line per top-level file."""

from pathlib import Path
from typing import Iterable, List, Optional

from graph.model import RootResult


def to_lines(results: Iterable[RootResult], base: Optional[Path] = None) -> str:
    """
    Render dependency sets as one line per successful root.

    Args:
        results: Root results in argument order.
        base: If given, dependencies below this directory are shown relative
              to it; otherwise absolute paths are shown.

    Returns:
        The lines joined by newlines. Failed roots produce no line.
    """
    lines: List[str] = []
    for result in results:
        if not result.ok:
            continue
        deps = " ".join(format_path(path, base) for path in result.paths)
        lines.append(f"{result.argument}: {deps}")
    return "\n".join(lines)


def format_path(path: Path, base: Optional[Path] = None) -> str:
    """Get the string representation of a path, relative to base when possible."""
    if base is not None:
        try:
            return str(path.relative_to(base)).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")
