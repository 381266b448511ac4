from typing import NamedTuple

ERRORS_MARKER = "ERRORS:"


class Segments(NamedTuple):
    analysis: str
    errors: str


def split_segments(output: str) -> Segments:
    """Split raw model output at the first `ERRORS:` marker.

    The marker stays at the head of the errors segment. Without a marker the
    whole output is analysis and the errors segment is empty.
    """
    idx = output.find(ERRORS_MARKER)
    if idx == -1:
        return Segments(analysis=output, errors="")
    return Segments(analysis=output[:idx], errors=output[idx:])
