"""Data model for Jsonnet imports and per-root dependency sets."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union


class ImportKind(Enum):
    """The three import expressions of the Jsonnet language."""

    CODE = "import"
    TEXT = "importstr"
    BINARY = "importbin"

    @classmethod
    def from_keyword(cls, keyword: str) -> "ImportKind":
        return cls(keyword)


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Turn a path into its canonical absolute form.

    The path is made absolute against the current directory and lexically
    normalized; symlinks are left alone.

    Args:
        path: Path to normalize.

    Returns:
        Absolute, normalized Path.
    """
    return Path(os.path.normpath(os.path.abspath(str(path))))


@dataclass(frozen=True)
class ImportSpecifier:
    """An import expression found in a source file."""

    kind: ImportKind
    raw: str
    origin_dir: Path
    line: int = 0


@dataclass(frozen=True)
class Dependency:
    """
    A file a root depends on.

    ``exists`` is False for the assumed location of a code import that could
    not be found anywhere in the search order.
    """

    path: Path
    kind: ImportKind
    exists: bool = True


@dataclass
class RootResult:
    """Outcome of collecting the dependencies of one top-level file."""

    argument: str
    path: Path
    dependencies: List[Dependency] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def paths(self) -> List[Path]:
        """All dependency paths in discovery order."""
        return [dep.path for dep in self.dependencies]

    @property
    def deep_deps(self) -> List[Path]:
        """Code files whose own imports also affect the root, root included."""
        return [
            dep.path for dep in self.dependencies
            if dep.kind is ImportKind.CODE and dep.exists
        ]

    @property
    def leaf_deps(self) -> List[Path]:
        """Text files where only a change to the file itself matters."""
        return [dep.path for dep in self.dependencies if dep.kind is ImportKind.TEXT]

    @property
    def missing(self) -> List[Path]:
        """Assumed locations of code imports that do not exist."""
        return [dep.path for dep in self.dependencies if not dep.exists]


class ImportGraph:
    """
    A directed graph of the imports seen during a run.

    Nodes are canonical file paths, and edges represent 'importer -> imported'
    relationships. Every edge remembers its import kind; edges to files that
    could not be found are tracked separately.
    """

    def __init__(self):
        self._nodes: Dict[Path, None] = {}
        self._edges: Dict[Path, Dict[Path, ImportKind]] = {}
        self._missing: Dict[Path, Set[Path]] = {}  # source -> assumed paths of unresolved imports

    @property
    def nodes(self) -> List[Path]:
        """Return all nodes in insertion order."""
        return list(self._nodes)

    @property
    def edges(self) -> Dict[Path, Dict[Path, ImportKind]]:
        """Return adjacency list representation of edges."""
        return {k: dict(v) for k, v in self._edges.items()}

    @property
    def missing(self) -> Dict[Path, Set[Path]]:
        """Return missing imports (source -> set of assumed paths)."""
        return {k: v.copy() for k, v in self._missing.items()}

    def add_node(self, node: Path) -> None:
        """Add a node to the graph."""
        self._nodes.setdefault(node, None)

    def add_edge(self, source: Path, target: Path, kind: ImportKind = ImportKind.CODE) -> None:
        """
        Add a directed edge from source to target.

        Automatically adds both nodes to the graph. A code edge wins over a
        text edge between the same two files.
        """
        self.add_node(source)
        self.add_node(target)

        targets = self._edges.setdefault(source, {})
        if targets.get(target) is not ImportKind.CODE:
            targets[target] = kind

    def add_missing(self, source: Path, target: Path) -> None:
        """
        Record a code import that could not be resolved.

        Args:
            source: The file containing the import.
            target: The assumed location of the imported file.
        """
        self.add_node(source)
        self._missing.setdefault(source, set()).add(target)

    def get_sources(self, target: Path) -> Set[Path]:
        """Get all files that import the target file."""
        return {source for source, targets in self._edges.items() if target in targets}

    def kind_of(self, node: Path) -> ImportKind:
        """
        Kind of a node: TEXT if every edge into it is a text import.

        Nodes nothing imports (top-level roots) count as CODE.
        """
        kinds = {self._edges[source][node] for source in self.get_sources(node)}
        if kinds == {ImportKind.TEXT}:
            return ImportKind.TEXT
        return ImportKind.CODE

    def iter_edges(self) -> Iterator[Tuple[Path, Path, ImportKind]]:
        """Iterate over all edges as (source, target, kind) tuples."""
        for source, targets in self._edges.items():
            for target, kind in targets.items():
                yield source, target, kind

    def iter_missing(self) -> Iterator[Tuple[Path, Path]]:
        """Iterate over all missing imports as (source, assumed path) tuples."""
        for source, targets in self._missing.items():
            for target in sorted(targets):
                yield source, target

    def __repr__(self) -> str:
        edge_count = sum(len(t) for t in self._edges.values())
        missing_count = sum(len(m) for m in self._missing.values())
        return f"ImportGraph(nodes={len(self._nodes)}, edges={edge_count}, missing={missing_count})"
