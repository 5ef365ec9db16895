"""
DocDoc deps command.

SUMMARY: List every file reachable from an entry document
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from docdoc.cli import (
    OutputFormatter,
    add_entry_arg,
    add_json_flag,
    add_standard_flags,
    load_config,
    resolve_format,
)
from docdoc.core.exceptions import DocdocError
from docdoc.core.resolver import IncludeResolver

SUMMARY = "List every file reachable from an entry document"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_entry_arg(parser)
    add_json_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List the dependency set of the entry document, sorted."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_config(args)
        entry = Path(args.entry)
        doc_format = resolve_format(args, entry, config) if getattr(args, "format", None) else None
        resolver = IncludeResolver.from_config(config)
        dependencies = sorted(resolver.collect_dependencies(entry, doc_format=doc_format))
    except DocdocError as e:
        formatter.error(e, error_code="deps_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "entry": str(entry.resolve()),
                "format": doc_format.value if doc_format else None,
                "dependencies": [str(p) for p in dependencies],
            }
        )
    else:
        for path in dependencies:
            formatter.text(str(path))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
