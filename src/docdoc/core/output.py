"""Output destinations for rendered documents."""
from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO

from .exceptions import DocumentIOError

CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"


@contextmanager
def open_output(path: Optional[Path], *, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Yield the sink a render should stream into.

    ``None`` means stdout, which is flushed but never closed. A file path is
    truncated on open, so each render replaces the previous output.
    """
    if path is None:
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return

    target = Path(path)
    try:
        # newline="" keeps the configured terminator byte-exact on every platform.
        handle = open(target, "w", encoding=encoding, newline="")
    except OSError as exc:
        raise DocumentIOError(f"Cannot open output {target}: {exc.strerror or exc}", path=target) from exc
    with handle:
        yield handle


def clear_terminal(stream: Optional[TextIO] = None) -> None:
    """Clear the terminal and move the cursor home."""
    out = stream if stream is not None else sys.stdout
    out.write(CLEAR_SCREEN)
    out.flush()


__all__ = ["CLEAR_SCREEN", "open_output", "clear_terminal"]
