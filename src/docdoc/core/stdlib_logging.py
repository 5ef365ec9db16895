from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED_TARGET: str | None = None
_DOCDOC_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install the DocDoc handler on the root logger.

    Logs go to ``log_path`` when given, otherwise to stderr. Never to stdout,
    which may carry the rendered document.

    Idempotent per-process: if already configured for the same target, only
    the level is updated.
    """
    global _CONFIGURED_TARGET, _DOCDOC_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _DOCDOC_HANDLER is not None:
        _DOCDOC_HANDLER.setLevel(_level_from_name(level))
        return

    # Replace the DocDoc-installed handler when switching targets.
    if _DOCDOC_HANDLER is not None:
        root.removeHandler(_DOCDOC_HANDLER)
        _DOCDOC_HANDLER.close()
        _DOCDOC_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _DOCDOC_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handler installed by configure_stdlib_logging."""
    global _CONFIGURED_TARGET, _DOCDOC_HANDLER
    if _DOCDOC_HANDLER is not None:
        logging.getLogger().removeHandler(_DOCDOC_HANDLER)
        _DOCDOC_HANDLER.close()
    _CONFIGURED_TARGET = None
    _DOCDOC_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
