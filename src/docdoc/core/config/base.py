"""Typed accessor over the merged DocDoc configuration.

Usage:
    cfg = DocdocConfig(repo_root=Path("/path/to/project"))
    print(cfg.debounce_ms)
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .cache import get_cached_config


class DocdocConfig:
    """Read-only view of the configuration sections DocDoc uses."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize the accessor.

        Args:
            repo_root: Project root to load config for. Defaults to the cwd.
            data: Pre-merged config dict; skips loading when given.
        """
        self._repo_root = repo_root
        if data is not None:
            self._config: Dict[str, Any] = dict(data)
        else:
            self._config = get_cached_config(repo_root=repo_root)

    @property
    def repo_root(self) -> Path:
        if self._repo_root:
            return Path(self._repo_root)
        return Path.cwd()

    def section(self, name: str) -> Dict[str, Any]:
        """Return a top-level config section, or an empty dict."""
        value = self._config.get(name)
        return value if isinstance(value, dict) else {}

    @cached_property
    def input_encoding(self) -> str:
        return str(self.section("input").get("encoding") or "utf-8")

    @cached_property
    def output_encoding(self) -> str:
        return str(self.section("output").get("encoding") or "utf-8")

    @cached_property
    def output_newline(self) -> str:
        return str(self.section("output").get("newline") or "\n")

    @cached_property
    def format_extensions(self) -> Dict[str, str]:
        extensions = self.section("formats").get("extensions") or {}
        return {str(k).lstrip("."): str(v) for k, v in extensions.items()}

    @cached_property
    def debounce_ms(self) -> int:
        return int(self.section("watch").get("debounce_ms", 100))

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @cached_property
    def clear_terminal(self) -> bool:
        return bool(self.section("watch").get("clear_terminal", True))

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level") or "WARNING").upper()

    @cached_property
    def log_file(self) -> Optional[Path]:
        raw = self.section("logging").get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.repo_root / path


__all__ = ["DocdocConfig"]
