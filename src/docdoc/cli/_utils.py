"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from docdoc.core.config import DocdocConfig
from docdoc.core.documents import DocFormat
from docdoc.core.exceptions import FormatDetectionError
from docdoc.core.stdlib_logging import configure_stdlib_logging


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get the project root from ``--repo-root`` or the current directory."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return Path.cwd()


def load_config(args: argparse.Namespace) -> DocdocConfig:
    """Load config for the command and configure logging from it."""
    config = DocdocConfig(repo_root=get_repo_root(args))
    level = "DEBUG" if getattr(args, "verbose", False) else config.log_level
    configure_stdlib_logging(level=level, log_path=config.log_file)
    return config


def resolve_format(args: argparse.Namespace, entry: Path, config: DocdocConfig) -> DocFormat:
    """Return the explicit ``--format`` or the one detected from ``entry``.

    Raises:
        FormatDetectionError: No format given and the extension is unknown.
    """
    raw: Optional[str] = getattr(args, "format", None)
    if raw:
        try:
            return DocFormat.from_name(raw)
        except ValueError as exc:
            raise FormatDetectionError(str(exc), context={"format": raw}) from exc

    detected = DocFormat.detect(entry, config.format_extensions)
    if detected is None:
        raise FormatDetectionError(
            "Could not auto-detect entry document format. Please specify it using the `--format` argument",
            context={"entry": str(entry)},
        )
    return detected


__all__ = ["get_repo_root", "load_config", "resolve_format"]
