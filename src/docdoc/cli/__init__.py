"""
DocDoc CLI package.

Commands are auto-discovered from ``docdoc/cli/commands/``. Each command
module defines ``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Config loading and format resolution
"""
from ._output import OutputFormatter
from ._args import (
    add_entry_arg,
    add_format_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._utils import get_repo_root, load_config, resolve_format

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_entry_arg",
    "add_format_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
    # Utilities
    "get_repo_root",
    "load_config",
    "resolve_format",
]
