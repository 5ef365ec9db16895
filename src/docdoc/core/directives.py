"""Include directive parsing.

A directive is the literal marker ``#[docdoc:path="<relative-path>"]``. The
path may not contain ``"`` or ``#`` and there is no escape syntax; anything
that does not match the marker exactly stays plain text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

DIRECTIVE_PREFIX = '#[docdoc:path="'
DIRECTIVE_SUFFIX = '"]'

# Pattern for include directives: #[docdoc:path="relative/path"]
DIRECTIVE_PATTERN = re.compile(r'#\[docdoc:path="([^"#]*)"\]')


@dataclass(frozen=True)
class Text:
    """Literal text between (or around) directives."""

    content: str

    def render(self) -> str:
        return self.content


@dataclass(frozen=True)
class IncludeRef:
    """An include directive carrying its raw, unresolved path."""

    path: str

    def render(self) -> str:
        return f"{DIRECTIVE_PREFIX}{self.path}{DIRECTIVE_SUFFIX}"


Segment = Union[Text, IncludeRef]


def parse_line(line: str) -> List[Segment]:
    """Split one line into ordered ``Text`` and ``IncludeRef`` segments.

    Empty gaps between adjacent directives are dropped. A line without any
    directive yields exactly one ``Text`` segment holding the whole line,
    even when the line is empty.

    Args:
        line: A single line without its line terminator

    Returns:
        Segments in left-to-right order
    """
    matches = list(DIRECTIVE_PATTERN.finditer(line))
    if not matches:
        return [Text(line)]

    segments: List[Segment] = []
    cursor = 0
    for match in matches:
        if match.start() > cursor:
            segments.append(Text(line[cursor : match.start()]))
        segments.append(IncludeRef(match.group(1)))
        cursor = match.end()

    if cursor < len(line):
        segments.append(Text(line[cursor:]))

    return segments


def unparse(segments: List[Segment]) -> str:
    """Rebuild the original line from its segments."""
    return "".join(segment.render() for segment in segments)


__all__ = [
    "DIRECTIVE_PATTERN",
    "Text",
    "IncludeRef",
    "Segment",
    "parse_line",
    "unparse",
]
