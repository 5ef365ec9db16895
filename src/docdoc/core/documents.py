"""Document data model for include resolution.

- ``DocFormat``: document kind, carried as metadata only
- ``Document``: a canonical document path plus its include base directory
- ``Lineage``: the ordered chain of documents from the entry file down to the
  current include site, used for per-branch cycle detection
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Mapping, Optional, Tuple

DEFAULT_EXTENSIONS: Mapping[str, str] = {
    "adoc": "asciidoc",
    "asciidoc": "asciidoc",
    "md": "markdown",
    "markdown": "markdown",
}


class DocFormat(str, Enum):
    """Supported document kinds."""

    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"

    @classmethod
    def from_name(cls, name: str) -> "DocFormat":
        """Parse a format name or alias (``adoc``, ``md``).

        Raises:
            ValueError: If the name is not a known format.
        """
        key = str(name).strip().lower()
        aliases = {"adoc": cls.ASCIIDOC, "md": cls.MARKDOWN}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(sorted([f.value for f in cls] + list(aliases)))
            raise ValueError(f"Unknown document format '{name}' (expected one of: {choices})") from None

    @classmethod
    def detect(
        cls,
        path: Path,
        extensions: Optional[Mapping[str, str]] = None,
    ) -> Optional["DocFormat"]:
        """Guess the format from the file extension, or ``None`` when unknown."""
        suffix = Path(path).suffix
        if not suffix:
            return None
        mapping = extensions if extensions is not None else DEFAULT_EXTENSIONS
        name = mapping.get(suffix[1:])
        if name is None:
            return None
        try:
            return cls.from_name(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class Document:
    """A document taking part in one resolution run."""

    path: Path

    @property
    def base_dir(self) -> Path:
        """Directory that this document's own include paths are relative to."""
        return self.path.parent

    def resolve_include(self, raw: str) -> Path:
        """Join ``raw`` onto this document's directory (not canonicalized)."""
        return self.base_dir / raw


@dataclass(frozen=True)
class Lineage:
    """Immutable include chain for one branch of the include tree.

    ``extend`` returns a new lineage and never touches the receiver, so a
    document hands the same lineage to each of its directives and sibling
    directives never observe each other's descendants.
    """

    chain: Tuple[Path, ...] = ()
    members: FrozenSet[Path] = field(default=frozenset(), compare=False, repr=False)

    @classmethod
    def root(cls, path: Path) -> "Lineage":
        return cls(chain=(path,), members=frozenset({path}))

    def extend(self, path: Path) -> "Lineage":
        return Lineage(chain=self.chain + (path,), members=self.members | {path})

    def __contains__(self, path: object) -> bool:
        return path in self.members

    @property
    def depth(self) -> int:
        return len(self.chain) - 1


__all__ = ["DEFAULT_EXTENSIONS", "DocFormat", "Document", "Lineage"]
