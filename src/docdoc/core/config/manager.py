"""
DocDoc configuration management (layered YAML, validated with JSON Schema).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from docdoc.core.exceptions import ConfigError
from docdoc.core.utils.yaml_io import merge_yaml_directory
from docdoc.data import get_data_path, read_json

# Module logger (warnings are user-visible via CLI log config).
logger = logging.getLogger(__name__)

ENV_PREFIX = "DOCDOC_"
PROJECT_CONFIG_DIRNAME = ".docdoc"


class ConfigManager:
    """Load, merge, and validate DocDoc configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: DOCDOC_<section>__<key>
    2. Project-local config: <project>/.docdoc/config.local/*.yaml (alphabetical order, uncommitted)
    3. Project config: <project>/.docdoc/config/*.yaml (alphabetical order)
    4. Bundled defaults: docdoc.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else Path.cwd()

        project_dir = self.repo_root / PROJECT_CONFIG_DIRNAME

        # Bundled defaults from docdoc.data package (always available)
        self.core_config_dir = get_data_path("config")

        # Project-specific config overrides
        self.project_config_dir = project_dir / "config"
        # Project-local config overrides (uncommitted; per-user per-project)
        self.project_local_config_dir = project_dir / "config.local"

    def config_dirs(self) -> List[Path]:
        """Config directories in low→high precedence order."""
        return [self.core_config_dir, self.project_config_dir, self.project_local_config_dir]

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": f"{ENV_PREFIX}{raw}"},
            )
        # Normalize to lowercase so env overrides create canonical keys.
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX) :]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if nxt is None:
                nxt = cur[part] = {}
            elif not isinstance(nxt, dict):
                raise ConfigError(
                    f"Cannot override '{'.'.join(path)}': '{part}' is not a section",
                    context={"path": ".".join(path)},
                )
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return merge_yaml_directory(cfg, directory)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid configuration in {directory}: {exc}", context={"dir": str(directory)}) from exc

    def validate_schema(self, cfg: Dict[str, Any]) -> None:
        schema = read_json("schemas", "config.schema.json")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
        if not errors:
            return
        first = errors[0]
        key_path = ".".join(str(p) for p in first.path) or "<root>"
        raise ConfigError(
            f"Invalid configuration at '{key_path}': {first.message}",
            context={"path": key_path, "errors": len(errors)},
        )

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers (UNCACHED)."""
        cfg: Dict[str, Any] = {}
        for directory in self.config_dirs():
            cfg = self._load_directory(directory, cfg)
        self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load merged configuration through the shared cache."""
        from .cache import get_cached_config

        return get_cached_config(repo_root=self.repo_root, validate=validate)


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_DIRNAME"]
