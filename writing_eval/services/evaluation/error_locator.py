from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List

from writing_eval.models.analysis import ErrorAnnotation

logger = logging.getLogger(__name__)

# Shortest bracketed run: "[ ... ]" up to the first closing bracket
_FRAGMENT_PATTERN = re.compile(r"\[.*?\]", re.DOTALL)

_RECATEGORIZE = {"register": "style"}


def _fold(text: str) -> str:
    """Lower-case without changing the string length, so offsets stay valid."""
    return "".join(ch.lower() if len(ch.lower()) == 1 else ch for ch in text)


def extract_error_records(errors_text: str) -> List[Dict[str, Any]]:
    """Decode every bracketed fragment independently and flatten the survivors."""
    records: List[Dict[str, Any]] = []
    for fragment in _FRAGMENT_PATTERN.findall(errors_text):
        try:
            decoded = json.loads(fragment)
        except (ValueError, RecursionError) as exc:
            logger.debug(f"Dropping undecodable error fragment: {type(exc).__name__}")
            continue
        items = decoded if isinstance(decoded, list) else [decoded]
        for item in items:
            if isinstance(item, dict):
                records.append(item)
            else:
                logger.debug(f"Skipping non-object error entry: {item!r}")
    return records


def _to_annotation(record: Dict[str, Any]) -> ErrorAnnotation:
    category = str(record.get("type") or "style")
    return ErrorAnnotation(
        text=str(record.get("text") or ""),
        correction=str(record.get("correction") or ""),
        type=_RECATEGORIZE.get(category, category),
        explanation=str(record.get("explanation") or ""),
    )


def locate_errors(annotations: Iterable[ErrorAnnotation], writing: str) -> List[ErrorAnnotation]:
    """Attach a span to each annotation, claiming the first unused occurrence.

    A boolean mask over the submission marks characters already claimed, so a
    phrase repeated in the text maps to distinct occurrences and no two spans
    overlap. Annotations that cannot be placed are kept without a span.
    """
    haystack = _fold(writing)
    used = [False] * len(writing)
    located: List[ErrorAnnotation] = []

    for annotation in annotations:
        if not annotation.text:
            located.append(annotation)
            continue

        needle = _fold(annotation.text)
        length = len(needle)
        start = haystack.find(needle)
        while start != -1 and any(used[start:start + length]):
            start = haystack.find(needle, start + 1)

        if start == -1:
            logger.info(f"Could not locate error text in submission: {annotation.text!r}")
            located.append(annotation)
            continue

        end = start + len(annotation.text)
        used[start:end] = [True] * (end - start)
        located.append(annotation.model_copy(update={"start": start, "end": end}))

    return located


def parse_errors(errors_text: str, writing: str) -> List[ErrorAnnotation]:
    """Errors segment + original submission -> annotations with best-effort spans."""
    if not errors_text:
        return []
    annotations = [_to_annotation(record) for record in extract_error_records(errors_text)]
    return locate_errors(annotations, writing)
