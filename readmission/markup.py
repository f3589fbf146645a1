"""Split recommendation text into [DO] / [DON'T] call-outs and plain narrative."""

import re

from readmission.models import DirectiveSegment

DO_MARKER = "[DO]"
DONT_MARKER = "[DON'T]"

# A directive runs from its marker to the next newline, the next marker, or the end
DIRECTIVE_PATTERN = re.compile(r"(\[DO\].*?|\[DON'T\].*?)(?=\n|\[DO\]|\[DON'T\]|$)")


def split_directives(text: str | None) -> list[DirectiveSegment]:
    """Segments in reading order. Markers must match exactly; nothing else is parsed."""
    segments = []
    for part in DIRECTIVE_PATTERN.split(text or ""):
        if part.startswith(DO_MARKER):
            segments.append(DirectiveSegment(kind="do", text=part[len(DO_MARKER):].strip()))
        elif part.startswith(DONT_MARKER):
            segments.append(DirectiveSegment(kind="dont", text=part[len(DONT_MARKER):].strip()))
        elif part.strip():
            segments.append(DirectiveSegment(kind="text", text=part.strip()))
    return segments
