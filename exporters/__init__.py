"""Exporters for converting dependency results to various output formats."""

from .line_exporter import to_lines
from .json_exporter import to_json
from .mermaid_exporter import to_mermaid

__all__ = ["to_lines", "to_json", "to_mermaid"]
