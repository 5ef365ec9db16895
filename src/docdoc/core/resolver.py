"""Include resolution for DocDoc documents.

Handles:
- Rendering: depth-first expansion of ``#[docdoc:path="..."]`` directives,
  streamed line by line to an output sink
- Dependency collection: the same walk with output discarded, returning every
  canonical path that was opened

Cycle detection is per lineage. Each directive is expanded with the lineage of
the document it appears in, so the same file may be included from two sibling
branches (diamond inclusion) but never twice along one branch.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Set, TextIO, Union

from .directives import IncludeRef, Text, parse_line
from .documents import DocFormat, Document, Lineage
from .exceptions import DocumentIOError, IncludeCycleError

if TYPE_CHECKING:
    from .config import DocdocConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ResolveContext:
    """Per-run state shared by every branch of one traversal.

    Lineages are not stored here: they are passed down the recursion so each
    branch gets its own. Only the dependency set is global to the run.
    """

    output: Optional[TextIO] = None
    newline: str = "\n"
    doc_format: Optional[DocFormat] = None

    # Tracking
    dependencies: Set[Path] = field(default_factory=set)
    documents_opened: int = 0

    def emit(self, text: str) -> None:
        """Write one text segment plus its line terminator (no-op without output)."""
        if self.output is None:
            return
        try:
            self.output.write(text + self.newline)
        except OSError as exc:
            raise DocumentIOError(f"Failed to write output: {exc}") from exc

    def record_document(self, path: Path) -> None:
        """Record that a document was opened."""
        self.dependencies.add(path)
        self.documents_opened += 1


class IncludeResolver:
    """Resolve include directives starting from an entry document."""

    def __init__(self, *, encoding: str = "utf-8", newline: str = "\n") -> None:
        """Initialize the resolver.

        Args:
            encoding: Text encoding used to read every document
            newline: Line terminator written after each text segment
        """
        self.encoding = encoding
        self.newline = newline

    @classmethod
    def from_config(cls, config: Optional["DocdocConfig"] = None) -> "IncludeResolver":
        if config is None:
            return cls()
        return cls(encoding=config.input_encoding, newline=config.output_newline)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        entry: PathLike,
        output: TextIO,
        *,
        doc_format: Optional[DocFormat] = None,
    ) -> None:
        """Render ``entry`` with every include expanded in place.

        Output is streamed as it is produced; on error, whatever was already
        written stays written.

        Raises:
            IncludeCycleError: A document includes itself along one lineage.
            DocumentIOError: A document cannot be opened or read, or the output
                cannot be written.
        """
        context = ResolveContext(output=output, newline=self.newline, doc_format=doc_format)
        self._run(entry, context)
        logger.debug("Rendered %s from %d document(s)", entry, context.documents_opened)

    def render_to_string(self, entry: PathLike, *, doc_format: Optional[DocFormat] = None) -> str:
        """Render ``entry`` into a string (buffered; nothing is returned on error)."""
        buffer = io.StringIO()
        self.render(entry, buffer, doc_format=doc_format)
        return buffer.getvalue()

    def collect_dependencies(
        self,
        entry: PathLike,
        *,
        doc_format: Optional[DocFormat] = None,
    ) -> Set[Path]:
        """Return every canonical path reachable from ``entry``, entry included.

        Runs the same traversal as :meth:`render` and fails the same way; a
        cycle anywhere in the graph fails the whole call.
        """
        context = ResolveContext(output=None, newline=self.newline, doc_format=doc_format)
        self._run(entry, context)
        logger.debug("Collected %d dependencies for %s", len(context.dependencies), entry)
        return set(context.dependencies)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _run(self, entry: PathLike, context: ResolveContext) -> None:
        entry_path = self._canonicalize(Path(entry))
        document = Document(entry_path)
        if context.doc_format is not None:
            logger.debug("Resolving %s as %s", entry_path, context.doc_format.value)
        self._process_document(document, Lineage.root(entry_path), context)

    def _process_document(self, document: Document, lineage: Lineage, context: ResolveContext) -> None:
        """Evaluate every line of ``document`` with the lineage that reached it."""
        handle = self._open(document.path)
        with handle:
            context.record_document(document.path)
            logger.debug("Opened %s (depth %d)", document.path, lineage.depth)
            for line in self._iter_lines(handle, document.path):
                for segment in parse_line(line):
                    if isinstance(segment, Text):
                        context.emit(segment.content)
                    else:
                        self._expand_include(segment, document, lineage, context)

    def _expand_include(
        self,
        ref: IncludeRef,
        document: Document,
        lineage: Lineage,
        context: ResolveContext,
    ) -> None:
        target = self._canonicalize(document.resolve_include(ref.path), origin=document.path)
        if target in lineage:
            raise IncludeCycleError(target, chain=(*lineage.chain, target))

        logger.debug("Including %s from %s", target, document.path)
        self._process_document(Document(target), lineage.extend(target), context)

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _canonicalize(self, path: Path, *, origin: Optional[Path] = None) -> Path:
        try:
            return path.resolve(strict=True)
        except OSError as exc:
            where = f" (included from {origin})" if origin is not None else ""
            raise DocumentIOError(
                f"Cannot resolve document {path}{where}: {exc.strerror or exc}",
                path=path,
            ) from exc

    def _open(self, path: Path) -> TextIO:
        try:
            return open(path, "r", encoding=self.encoding, newline=None)
        except OSError as exc:
            raise DocumentIOError(f"Cannot open document {path}: {exc.strerror or exc}", path=path) from exc

    def _iter_lines(self, handle: TextIO, path: Path) -> Iterator[str]:
        """Yield lines without terminators; read errors surface as DocumentIOError."""
        while True:
            try:
                line = handle.readline()
            except (OSError, UnicodeDecodeError) as exc:
                raise DocumentIOError(f"Cannot read document {path}: {exc}", path=path) from exc
            if not line:
                return
            yield line[:-1] if line.endswith("\n") else line


def render(
    entry: PathLike,
    output: TextIO,
    *,
    doc_format: Optional[DocFormat] = None,
    config: Optional["DocdocConfig"] = None,
) -> None:
    """Render ``entry`` to ``output``. See :meth:`IncludeResolver.render`."""
    IncludeResolver.from_config(config).render(entry, output, doc_format=doc_format)


def render_to_string(
    entry: PathLike,
    *,
    doc_format: Optional[DocFormat] = None,
    config: Optional["DocdocConfig"] = None,
) -> str:
    return IncludeResolver.from_config(config).render_to_string(entry, doc_format=doc_format)


def collect_dependencies(
    entry: PathLike,
    *,
    doc_format: Optional[DocFormat] = None,
    config: Optional["DocdocConfig"] = None,
) -> Set[Path]:
    """Return the dependency set of ``entry``. See :meth:`IncludeResolver.collect_dependencies`."""
    return IncludeResolver.from_config(config).collect_dependencies(entry, doc_format=doc_format)


__all__ = [
    "IncludeResolver",
    "ResolveContext",
    "render",
    "render_to_string",
    "collect_dependencies",
]
