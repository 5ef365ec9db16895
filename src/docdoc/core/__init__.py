"""DocDoc core: directive parsing, include resolution, and watch coordination."""

from .directives import DIRECTIVE_PATTERN, IncludeRef, Segment, Text, parse_line
from .documents import DocFormat, Document, Lineage
from .exceptions import (
    ConfigError,
    DocdocError,
    DocumentIOError,
    FormatDetectionError,
    IncludeCycleError,
    WatchError,
)
from .resolver import IncludeResolver, collect_dependencies, render, render_to_string

__all__ = [
    "DIRECTIVE_PATTERN",
    "IncludeRef",
    "Segment",
    "Text",
    "parse_line",
    "DocFormat",
    "Document",
    "Lineage",
    "ConfigError",
    "DocdocError",
    "DocumentIOError",
    "FormatDetectionError",
    "IncludeCycleError",
    "WatchError",
    "IncludeResolver",
    "collect_dependencies",
    "render",
    "render_to_string",
]
