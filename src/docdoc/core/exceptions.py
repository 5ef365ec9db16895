from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence


class DocdocError(Exception):
    """Base exception for DocDoc."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class IncludeCycleError(DocdocError):
    """Raised when a document includes itself along one include lineage."""

    def __init__(
        self,
        path: Path,
        *,
        chain: Sequence[Path] = (),
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.path = Path(path)
        self.chain = tuple(Path(p) for p in chain)
        ctx = dict(context or {})
        ctx["path"] = str(self.path)
        if self.chain:
            ctx["chain"] = [str(p) for p in self.chain]
            message = (
                f"Circular include detected: {self.path} "
                f"(chain: {' -> '.join(str(p) for p in self.chain)})"
            )
        else:
            message = f"Circular include detected: {self.path}"
        super().__init__(message, context=ctx)


class DocumentIOError(DocdocError, OSError):
    """Raised when a document cannot be opened, read, canonicalized, or written."""

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[Path] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        ctx = dict(context or {})
        if self.path is not None:
            ctx["path"] = str(self.path)
        DocdocError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)


class FormatDetectionError(DocdocError, ValueError):
    """Raised when no document format is given and none can be detected."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DocdocError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class WatchError(DocdocError, RuntimeError):
    """Raised when a filesystem watch subscription cannot be added or removed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DocdocError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(DocdocError, ValueError):
    """Raised for invalid configuration files, schema violations, or env overrides."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DocdocError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "DocdocError",
    "IncludeCycleError",
    "DocumentIOError",
    "FormatDetectionError",
    "WatchError",
    "ConfigError",
]
