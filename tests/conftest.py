"""Shared fixtures for jsonnet-deps tests."""

from pathlib import Path
from typing import Dict, List, Set

import pytest

from scanner.filesystem import FileSystem


class RecordingFileSystem(FileSystem):
    """
    A FileSystem that records every call and can fail on chosen paths.

    Tests run as root, where permission bits are not enforced, so denied
    access is simulated by listing paths in ``denied``.
    """

    def __init__(self, denied=()):
        self.denied: Set[Path] = {Path(p) for p in denied}
        self.reads: List[Path] = []
        self.checks: List[Path] = []

    def exists(self, path: Path) -> bool:
        self.checks.append(path)
        if any(path == d or d in path.parents for d in self.denied):
            raise PermissionError(13, "Permission denied", str(path))
        return super().exists(path)

    def read_text(self, path: Path) -> str:
        self.reads.append(path)
        return super().read_text(path)

    def read_count(self, path: Path) -> int:
        return self.reads.count(path)


@pytest.fixture
def fs():
    """A recording file system with nothing denied."""
    return RecordingFileSystem()


@pytest.fixture
def write(tmp_path):
    """Write files below tmp_path: write({"a.jsonnet": "..."}) -> {name: path}."""

    def _write(files: Dict[str, str]) -> Dict[str, Path]:
        paths = {}
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            paths[name] = path
        return paths

    return _write


@pytest.fixture(autouse=True)
def _no_jsonnet_path(monkeypatch):
    """Keep the caller's JSONNET_PATH out of the tests."""
    monkeypatch.delenv("JSONNET_PATH", raising=False)


@pytest.fixture
def make_fs():
    """Factory for recording file systems: make_fs(denied=[path, ...])."""
    return RecordingFileSystem
