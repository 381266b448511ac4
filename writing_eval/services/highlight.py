from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional

from writing_eval.models.analysis import KNOWN_ERROR_TYPES, ErrorAnnotation


class HighlightSegment(NamedTuple):
    start: int
    end: int
    text: str
    error: Optional[ErrorAnnotation] = None

    @property
    def highlighted(self) -> bool:
        return self.error is not None


def display_category(category: str) -> str:
    """Category used for display; anything outside the four known types shows as style."""
    return category if category in KNOWN_ERROR_TYPES else "style"


def build_highlight_segments(text: str, errors: Iterable[ErrorAnnotation]) -> List[HighlightSegment]:
    """Split `text` into consecutive plain and highlighted segments.

    Only located errors take part, ordered by start offset. A span that starts
    inside an earlier highlight is skipped.
    """
    located = sorted((e for e in errors if e.located), key=lambda e: e.start)
    segments: List[HighlightSegment] = []
    last = 0

    for err in located:
        if err.start < last or err.end > len(text):
            continue
        if err.start > last:
            segments.append(HighlightSegment(last, err.start, text[last:err.start]))
        segments.append(HighlightSegment(err.start, err.end, text[err.start:err.end], err))
        last = err.end

    if last < len(text):
        segments.append(HighlightSegment(last, len(text), text[last:]))
    return segments


def annotate_text(text: str, errors: Iterable[ErrorAnnotation]) -> str:
    """Inline markup for terminals: `[[seen|grammar -> saw]]`."""
    parts = []
    for seg in build_highlight_segments(text, errors):
        if seg.error is None:
            parts.append(seg.text)
        else:
            parts.append(f"[[{seg.text}|{display_category(seg.error.type)} -> {seg.error.correction}]]")
    return "".join(parts)
