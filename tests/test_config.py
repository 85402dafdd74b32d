"""Tests for configuration loading."""

import os
import pytest
from pathlib import Path

from config import (
    ConfigError,
    DepsConfig,
    env_library_roots,
    load_config,
    merge_library_roots,
)


class TestLoadConfig:
    """Tests for the YAML configuration file."""

    def test_full_config(self, write, tmp_path):
        """Test all recognized keys."""
        paths = write({
            "deps.yaml": "jpath:\n  - vendor\n  - /opt/jsonnet\nformat: json\nfail_fast: true\n",
        })

        config = load_config(paths["deps.yaml"])

        assert config.jpath == [tmp_path / "vendor", Path("/opt/jsonnet")]
        assert config.format == "json"
        assert config.fail_fast is True

    def test_empty_file(self, write):
        """Test that an empty file gives defaults."""
        paths = write({"deps.yaml": ""})

        assert load_config(paths["deps.yaml"]) == DepsConfig()

    def test_single_jpath_string(self, write, tmp_path):
        """Test a jpath given as one string."""
        paths = write({"deps.yaml": "jpath: lib\n"})

        assert load_config(paths["deps.yaml"]).jpath == [tmp_path / "lib"]

    @pytest.mark.parametrize("content", [
        "- a\n- b\n",
        "jpath: [1, 2]\n",
        "format: xml\n",
        "fail_fast: sometimes\n",
        "colour: blue\n",
        "jpath: [unclosed\n",
    ])
    def test_invalid(self, write, content):
        """Test that invalid files raise ConfigError."""
        paths = write({"deps.yaml": content})

        with pytest.raises(ConfigError):
            load_config(paths["deps.yaml"])

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")


class TestLibraryRoots:
    """Tests for library root sources."""

    def test_env_library_roots(self):
        """Test splitting JSONNET_PATH in order."""
        environ = {"JSONNET_PATH": os.pathsep.join(["/a", "", "/b"])}

        assert env_library_roots(environ) == [Path("/a"), Path("/b")]

    def test_env_unset(self):
        """Test an unset JSONNET_PATH."""
        assert env_library_roots({}) == []

    def test_env_from_process(self, monkeypatch):
        """Test reading the real environment."""
        monkeypatch.setenv("JSONNET_PATH", "/from/env")

        assert env_library_roots() == [Path("/from/env")]

    def test_merge_keeps_precedence(self):
        """Test that earlier sources come first and duplicates are dropped."""
        merged = merge_library_roots(
            [Path("/cli"), Path("/shared")],
            [Path("/config"), Path("/shared/")],
            [Path("/env"), Path("/cli")],
        )

        assert merged == [Path("/cli"), Path("/shared"), Path("/config"), Path("/env")]
