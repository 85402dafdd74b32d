"""JSON exporter for dependency sets (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from graph.model import RootResult
from .line_exporter import format_path


def to_json(
    results: Iterable[RootResult],
    base: Optional[Path] = None,
    indent: int = 2,
) -> str:
    """
    Convert root results to JSON.

    Each root lists all its dependencies in discovery order, and splits
    them into deep dependencies (Jsonnet files whose own imports matter),
    leaf dependencies (text imports) and missing code imports.

    Args:
        results: Root results in argument order.
        base: Optional base path for relative path display.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the results.
    """
    roots: List[Dict[str, Any]] = []
    for result in results:
        entry: Dict[str, Any] = {"file": result.argument}
        if result.ok:
            entry["deps"] = [format_path(p, base) for p in result.paths]
            entry["deep_deps"] = [format_path(p, base) for p in result.deep_deps]
            entry["leaf_deps"] = [format_path(p, base) for p in result.leaf_deps]
            entry["missing"] = [format_path(p, base) for p in result.missing]
            entry["error"] = None
        else:
            entry["error"] = str(result.error)
        roots.append(entry)

    return json.dumps({"roots": roots}, indent=indent)
