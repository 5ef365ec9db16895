"""Layered YAML configuration for DocDoc."""

from .base import DocdocConfig
from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager

__all__ = ["ConfigManager", "DocdocConfig", "clear_all_caches", "get_cached_config"]
