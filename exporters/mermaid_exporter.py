"""Mermaid flowchart exporter for import graphs."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set

from graph.model import ImportGraph, ImportKind
from .line_exporter import format_path


def to_mermaid(
    graph: ImportGraph,
    orientation: str = "LR",
    base: Optional[Path] = None,
    group_by_directory: bool = False,
    include_missing: bool = True,
) -> str:
    """
    Convert an import graph to Mermaid flowchart syntax.

    Code imports are solid arrows, text imports dotted arrows to
    parallelogram nodes, and missing code imports dashed red nodes.

    Args:
        graph: The import graph to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        base: Optional base path for relative labels and grouping.
        group_by_directory: If True, group nodes by their directory.
        include_missing: If True, show missing (unresolved) code imports.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    used: Set[str] = set()
    node_ids: Dict[Path, str] = {}
    for node in graph.nodes:
        node_ids[node] = _unique_id(_sanitize_id(format_path(node, base)), used)

    missing_ids: Dict[Path, str] = {}
    if include_missing:
        for _, target in graph.iter_missing():
            if target not in missing_ids:
                missing_ids[target] = _unique_id(_sanitize_id(f"missing_{format_path(target, base)}"), used)

    if group_by_directory:
        groups: Dict[str, List[Path]] = {}
        for node in graph.nodes:
            groups.setdefault(format_path(node.parent, base), []).append(node)
        for group_name in sorted(groups):
            lines.append(f'    subgraph {_sanitize_id("dir_" + group_name)}["{group_name}"]')
            for node in groups[group_name]:
                lines.append("    " + _node_line(graph, node, node_ids[node], base))
            lines.append("    end")
    else:
        for node in graph.nodes:
            lines.append(_node_line(graph, node, node_ids[node], base))

    if missing_ids:
        lines.append("")
        lines.append("    %% Missing imports")
        for target, missing_id in missing_ids.items():
            lines.append(f'    {missing_id}["{format_path(target, base)} [MISSING]"]')
            lines.append(f"    style {missing_id} stroke:#ff0000,stroke-dasharray: 5 5")

    lines.append("")
    for source, target, kind in graph.iter_edges():
        arrow = "-->" if kind is ImportKind.CODE else "-.->"
        lines.append(f"    {node_ids[source]} {arrow} {node_ids[target]}")

    if include_missing:
        for source, target in graph.iter_missing():
            lines.append(f"    {node_ids[source]} -.-> {missing_ids[target]}")

    return "\n".join(lines)


def _node_line(graph: ImportGraph, node: Path, node_id: str, base: Optional[Path]) -> str:
    label = format_path(node, base)
    if graph.kind_of(node) is ImportKind.TEXT:
        return f'    {node_id}[/"{label}"/]'
    return f'    {node_id}["{label}"]'


def _unique_id(candidate: str, used: Set[str]) -> str:
    """Suffix an ID until no other node uses it, then claim it."""
    unique = candidate
    counter = 2
    while unique in used:
        unique = f"{candidate}_{counter}"
        counter += 1
    used.add(unique)
    return unique


def _sanitize_id(value: str) -> str:
    """
    Sanitize a string to be a valid Mermaid ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"
