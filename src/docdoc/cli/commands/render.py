"""
DocDoc render command.

SUMMARY: Render an entry document with all includes resolved
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from docdoc.cli import (
    OutputFormatter,
    add_entry_arg,
    add_standard_flags,
    load_config,
    resolve_format,
)
from docdoc.core.exceptions import DocdocError, DocumentIOError
from docdoc.core.output import clear_terminal, open_output
from docdoc.core.resolver import IncludeResolver

SUMMARY = "Render an entry document with all includes resolved"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_entry_arg(parser)
    parser.add_argument(
        "--output",
        "-o",
        help="The path of the file to write the output to. Defaults to stdout.",
    )
    parser.add_argument(
        "--watch",
        "-w",
        action="store_true",
        help="Watch doc import tree, starting at entry file.",
    )
    add_standard_flags(parser)


def _report_cycle_error(error: DocdocError) -> None:
    logger.debug("Watch cycle failed", exc_info=error)
    print(f"Error stitching together documents: {error}", file=sys.stderr)


def main(args: argparse.Namespace) -> int:
    """Render once, or keep re-rendering on change with --watch."""
    formatter = OutputFormatter()

    try:
        config = load_config(args)
        entry = Path(args.entry)
        doc_format = resolve_format(args, entry, config)
        resolver = IncludeResolver.from_config(config)
        output: Optional[Path] = Path(args.output) if args.output else None
        logger.debug("Rendering %s as %s", entry, doc_format.value)

        def render_once() -> None:
            with open_output(output, encoding=config.output_encoding) as sink:
                resolver.render(entry, sink, doc_format=doc_format)

        if not args.watch:
            render_once()
            return 0

        from docdoc.core.watch import WatchCoordinator

        def render_and_refresh() -> None:
            if config.clear_terminal:
                clear_terminal()
            render_once()

        # The first render fails the command; only change-driven renders are reported and retried.
        render_and_refresh()

        coordinator = WatchCoordinator(
            entry,
            render_and_refresh,
            resolver=resolver,
            doc_format=doc_format,
            debounce_seconds=config.debounce_seconds,
            on_error=_report_cycle_error,
        )
        coordinator.run(initial_render=False)
        return 0
    except DocdocError as e:
        formatter.error(e, error_code="render_error")
        return 1
    except BrokenPipeError as e:
        formatter.error(DocumentIOError(f"Failed to write output: {e}"), error_code="render_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
