"""Configuration for jsonnet-deps: library roots and output defaults."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from graph.model import normalize_path

logger = logging.getLogger(__name__)

JSONNET_PATH_ENV = "JSONNET_PATH"
FORMATS = ("lines", "json", "mermaid")


class ConfigError(Exception):
    """The configuration file is unreadable or invalid."""


@dataclass
class DepsConfig:
    """Settings read from a YAML configuration file."""

    jpath: List[Path] = field(default_factory=list)
    format: Optional[str] = None
    fail_fast: Optional[bool] = None


def load_config(path: Path) -> DepsConfig:
    """
    Load a YAML configuration file.

    Recognized keys are ``jpath`` (list of library directories, relative to
    the file's directory), ``format`` and ``fail_fast``.

    Args:
        path: Path to the configuration file.

    Returns:
        The parsed configuration.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or has
                     unknown keys or wrongly typed values.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    config = _from_mapping(data, path)
    logger.debug("Loaded config from %s: %s", path, config)
    return config


def _from_mapping(data: Dict[str, Any], path: Path) -> DepsConfig:
    unknown = set(data) - {"jpath", "format", "fail_fast"}
    if unknown:
        raise ConfigError(f"{path}: unknown keys: {', '.join(sorted(unknown))}")

    config = DepsConfig()
    base = path.parent

    jpath = data.get("jpath", [])
    if isinstance(jpath, str):
        jpath = [jpath]
    if not isinstance(jpath, list) or not all(isinstance(p, str) for p in jpath):
        raise ConfigError(f"{path}: 'jpath' must be a list of directories")
    config.jpath = [base / Path(p).expanduser() for p in jpath]

    fmt = data.get("format")
    if fmt is not None and fmt not in FORMATS:
        raise ConfigError(f"{path}: 'format' must be one of {', '.join(FORMATS)}")
    config.format = fmt

    fail_fast = data.get("fail_fast")
    if fail_fast is not None and not isinstance(fail_fast, bool):
        raise ConfigError(f"{path}: 'fail_fast' must be true or false")
    config.fail_fast = fail_fast

    return config


def env_library_roots(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    """Library roots from the JSONNET_PATH environment variable, in order."""
    if environ is None:
        environ = os.environ
    value = environ.get(JSONNET_PATH_ENV, "")
    return [Path(part) for part in value.split(os.pathsep) if part]


def merge_library_roots(*sources: Sequence[Path]) -> List[Path]:
    """
    Concatenate library root lists, highest precedence first.

    Later duplicates of a directory are dropped.
    """
    merged: List[Path] = []
    seen = set()
    for roots in sources:
        for root in roots:
            key = normalize_path(root)
            if key in seen:
                continue
            seen.add(key)
            merged.append(Path(root))
    return merged
