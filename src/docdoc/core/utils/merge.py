"""Merging of configuration layers.

DocDoc config is made of nested mappings with scalar leaves. A later layer
refines an earlier one key by key: mappings are merged recursively and any
other value, lists included, replaces what was there. This is what lets a
project add one entry to ``formats.extensions`` without restating the
bundled ones.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return ``base`` refined by ``override``; neither input is modified.

    Example:
        >>> deep_merge({"formats": {"extensions": {"md": "markdown"}}},
        ...            {"formats": {"extensions": {"txt": "markdown"}}})
        {'formats': {'extensions': {'md': 'markdown', 'txt': 'markdown'}}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
