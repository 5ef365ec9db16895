"""Shared helpers for DocDoc core modules."""

from .merge import deep_merge
from .yaml_io import iter_yaml_files, merge_yaml_directory, read_yaml

__all__ = ["deep_merge", "iter_yaml_files", "merge_yaml_directory", "read_yaml"]
