"""Transitive import traversal over one or more top-level files."""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Union

from graph.model import (
    Dependency,
    ImportGraph,
    ImportKind,
    ImportSpecifier,
    RootResult,
    normalize_path,
)
from .errors import DependencyError, UnsupportedImportKindError
from .extractor import extract_file_imports
from .filesystem import FileSystem
from .resolver import fallback_path, resolve_import

logger = logging.getLogger(__name__)


class FileState(Enum):
    """State of a file in the visited set. Queued files are not in it yet."""

    EXTRACTING = "extracting"
    DONE = "done"


@dataclass
class FileRecord:
    """Processing record of one file in the visited set."""

    state: FileState = FileState.EXTRACTING
    dependencies: List[Dependency] = field(default_factory=list)
    error: Optional[DependencyError] = None


class DependencyWalker:
    """
    Collects the transitive imports of top-level Jsonnet files.

    One walker is one run: its visited set is shared by every root it
    processes, so a file imported from several roots is read and parsed
    only once. Create a new walker for an independent run.
    """

    def __init__(
        self,
        library_roots: Sequence[Union[str, Path]] = (),
        fs: Optional[FileSystem] = None,
        allow_binary: bool = False,
        graph: Optional[ImportGraph] = None,
    ):
        self.library_roots = [normalize_path(root) for root in library_roots]
        self.fs = fs or FileSystem()
        self.allow_binary = allow_binary
        self.graph = graph if graph is not None else ImportGraph()
        self.visited: Dict[Path, FileRecord] = {}

    def collect_dependencies(self, root: Union[str, Path]) -> RootResult:
        """
        Collect every file reachable from ``root`` through code imports.

        Args:
            root: A top-level file, as given by the user.

        Returns:
            A RootResult whose dependencies start with the root itself and
            follow in discovery order, or which carries the error that
            stopped the traversal.
        """
        root_path = normalize_path(root)
        result = RootResult(argument=str(root), path=root_path)

        try:
            result.dependencies = self._walk(root_path)
        except DependencyError as e:
            logger.debug("Collecting %s failed: %s", root, e)
            result.dependencies = []
            result.error = e

        return result

    def collect_all(
        self,
        roots: Iterable[Union[str, Path]],
        fail_fast: bool = False,
    ) -> List[RootResult]:
        """
        Collect dependencies for several roots, in order.

        Args:
            roots: Top-level files.
            fail_fast: If True, stop after the first root that fails.

        Returns:
            One RootResult per processed root.
        """
        results = []
        for root in roots:
            result = self.collect_dependencies(root)
            results.append(result)
            if fail_fast and not result.ok:
                break
        return results

    def _walk(self, root: Path) -> List[Dependency]:
        found: Dict[Path, Dependency] = {root: Dependency(root, ImportKind.CODE)}
        queue: Deque[Path] = deque([root])
        queued = {root}
        self.graph.add_node(root)

        while queue:
            current = queue.popleft()
            for dep in self._process(current):
                known = found.get(dep.path)
                # a file imported both as text and as code counts as code
                if known is None or (known.kind is ImportKind.TEXT and dep.kind is ImportKind.CODE):
                    found[dep.path] = dep
                if dep.kind is ImportKind.CODE and dep.exists and dep.path not in queued:
                    queued.add(dep.path)
                    queue.append(dep.path)

        return list(found.values())

    def _process(self, path: Path) -> List[Dependency]:
        """Direct dependencies of a file, extracting it on first visit only."""
        record = self.visited.get(path)
        # a record left EXTRACTING by an unexpected exception is redone
        if record is not None and record.state is FileState.DONE:
            if record.error is not None:
                raise record.error
            logger.debug("Already processed %s", path)
            return record.dependencies

        # inserted before extraction so an import cycle finds it
        record = FileRecord()
        self.visited[path] = record
        logger.debug("Extracting %s", path)
        dependencies: List[Dependency] = []
        try:
            specifiers = extract_file_imports(path, self.fs, allow_binary=self.allow_binary)
            for specifier in specifiers:
                dep = self._handle(specifier, path)
                if dep is not None:
                    dependencies.append(dep)
        except DependencyError as e:
            record.error = e
            record.state = FileState.DONE
            raise

        record.dependencies = dependencies
        record.state = FileState.DONE

        return record.dependencies

    def _handle(self, specifier: ImportSpecifier, source: Path) -> Optional[Dependency]:
        if specifier.kind is ImportKind.BINARY:
            raise UnsupportedImportKindError(specifier, source)

        resolved = resolve_import(specifier, self.library_roots, self.fs)

        if specifier.kind is ImportKind.TEXT:
            if resolved is None:
                logger.debug("Skipping missing text import '%s' in %s", specifier.raw, source)
                return None
            self.graph.add_edge(source, resolved, ImportKind.TEXT)
            return Dependency(resolved, ImportKind.TEXT)

        if resolved is None:
            assumed = fallback_path(specifier)
            logger.warning(
                "%s:%d: cannot find import '%s', assuming %s",
                source, specifier.line, specifier.raw, assumed,
            )
            self.graph.add_missing(source, assumed)
            return Dependency(assumed, ImportKind.CODE, exists=False)

        self.graph.add_edge(source, resolved, ImportKind.CODE)
        return Dependency(resolved, ImportKind.CODE)


def collect_dependencies(
    root: Union[str, Path],
    library_roots: Sequence[Union[str, Path]] = (),
    fs: Optional[FileSystem] = None,
) -> RootResult:
    """Collect the dependencies of a single root in a fresh run."""
    return DependencyWalker(library_roots, fs=fs).collect_dependencies(root)
