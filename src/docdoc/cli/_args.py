"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_entry_arg(parser: argparse.ArgumentParser) -> None:
    """Add the required entry document positional argument."""
    parser.add_argument("entry", help="The path of the entry file")


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_format_flag(parser: argparse.ArgumentParser) -> None:
    """Add --format flag; the format is auto-detected from the extension when omitted."""
    parser.add_argument(
        "--format",
        "-f",
        dest="format",
        help="Specify doc format (asciidoc|adoc|markdown|md). Guessed from the entry extension if not set.",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for the directory configuration is loaded from."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project directory holding .docdoc/config (defaults to the current directory)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (debug logging to stderr)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags every DocDoc command accepts."""
    add_format_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_entry_arg",
    "add_json_flag",
    "add_format_flag",
    "add_repo_root_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
