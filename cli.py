#!/usr/bin/env python3
"""
jsonnet-deps CLI

Lists, for each given Jsonnet file, every file it transitively imports, so
that a build system knows when a cached output must be rebuilt.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import FORMATS, ConfigError, DepsConfig, env_library_roots, load_config, merge_library_roots
from graph.model import ImportGraph, normalize_path
from scanner.traversal import DependencyWalker
from exporters import to_lines, to_json, to_mermaid


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="jsonnet-deps",
        description="Print the transitive imports of Jsonnet files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jsonnet-deps main.jsonnet                 # main.jsonnet: /abs/main.jsonnet /abs/lib.libsonnet
  jsonnet-deps a.jsonnet b.jsonnet -J vendor  # Search vendor/ after each file's directory
  jsonnet-deps main.jsonnet -f json         # Split into deep, leaf and missing deps
  jsonnet-deps main.jsonnet -f mermaid      # Import graph as a Mermaid flowchart
  jsonnet-deps *.jsonnet --fail-fast        # Stop at the first file that fails

Library directories are searched in this order: -J options, the config
file's jpath list, then JSONNET_PATH.
        """,
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Top-level Jsonnet files",
    )

    parser.add_argument(
        "-J", "--jpath",
        action="append",
        default=[],
        metavar="DIR",
        help="Library search directory (repeatable, searched in order)",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="YAML configuration file",
    )

    parser.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: lines)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "--relative-to",
        type=str,
        default=None,
        help="Show dependencies relative to this directory",
    )

    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Stop at the first file that cannot be analysed",
    )

    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-dir",
        action="store_true",
        help="Group nodes by directory in Mermaid output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log resolution details to stderr",
    )

    return parser.parse_args(args)


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = DepsConfig()
    if parsed.config:
        try:
            config = load_config(Path(parsed.config))
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    library_roots = merge_library_roots(
        [Path(p) for p in parsed.jpath],
        config.jpath,
        env_library_roots(),
    )
    output_format = parsed.format or config.format or "lines"
    fail_fast = parsed.fail_fast if parsed.fail_fast is not None else bool(config.fail_fast)
    base: Optional[Path] = normalize_path(parsed.relative_to) if parsed.relative_to else None

    graph = ImportGraph()
    walker = DependencyWalker(library_roots, graph=graph)
    results = walker.collect_all(parsed.files, fail_fast=fail_fast)

    failures: List[str] = []
    for result in results:
        if not result.ok:
            failures.append(f"Error: {result.error}")

    # Generate output
    if output_format == "json":
        output = to_json(results, base=base)
    elif output_format == "mermaid":
        output = to_mermaid(
            graph,
            orientation=parsed.orientation,
            base=base,
            group_by_directory=parsed.group_by_dir,
        )
    else:  # lines (default)
        output = to_lines(results, base=base)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output + "\n" if output else "", encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    elif output:
        print(output)

    for failure in failures:
        print(failure, file=sys.stderr)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
