from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Union

from writing_eval.models.analysis import Criterion, CriterionName

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 3
MAX_SCORE = 5

_NAMES = r"Content|Communicative\s+Achievement|Organisation|Language"

# "Content (4/5): feedback ..." up to the next header or end of text
_HEADER_PATTERN = re.compile(
    rf"({_NAMES})\s*\((\d(?:\.\d)?)/5\):\s*(.*?)(?=(?:{_NAMES})\s*\(\d(?:\.\d)?/5\):|\Z)",
    re.IGNORECASE | re.DOTALL,
)

# Looser single-line form: "**Organisation** - 3/5 : feedback"
_LINE_PATTERN = re.compile(rf"({_NAMES}).*?(\d)/5.*?:\s*(.+)", re.IGNORECASE)

_NEWLINES = re.compile(r"[\r\n]+")


def _parse_score(raw: str) -> Union[int, float]:
    value = float(raw)
    value = min(max(value, 0.0), float(MAX_SCORE))
    return int(value) if value.is_integer() else value


def _clean_feedback(raw: str) -> str:
    return _NEWLINES.sub(" ", raw.strip())


def _default_feedback(name: CriterionName) -> str:
    return (
        "Assessment provided. Please refer to the full analysis above for detailed "
        f"feedback on {name.value.lower()}."
    )


def _last_resort_score(name: CriterionName, text: str) -> Optional[Union[int, float]]:
    pattern = re.compile(rf"{re.escape(name.value)}.*?(\d)/5", re.IGNORECASE | re.DOTALL)
    match = pattern.search(text)
    return _parse_score(match.group(1)) if match else None


def extract_criteria(analysis_text: str) -> List[Criterion]:
    """Recover the four criterion scores from the analysis segment.

    Three passes run in order of strictness: labelled headers, a line-by-line
    scan for anything still missing, then a bare `N/5` search or the default
    score. The result always holds one Criterion per category in canonical order.
    """
    found: Dict[CriterionName, Criterion] = {}

    for match in _HEADER_PATTERN.finditer(analysis_text):
        name = CriterionName.lookup(match.group(1))
        if name is None or name in found:
            continue
        found[name] = Criterion(
            name=name,
            score=_parse_score(match.group(2)),
            feedback=_clean_feedback(match.group(3)),
        )

    if len(found) < len(CriterionName):
        logger.info(f"Primary criterion parsing incomplete ({len(found)}/4), trying line scan")
        for line in analysis_text.splitlines():
            match = _LINE_PATTERN.search(line)
            if not match:
                continue
            name = CriterionName.lookup(match.group(1))
            if name is None or name in found:
                continue
            found[name] = Criterion(
                name=name,
                score=_parse_score(match.group(2)),
                feedback=match.group(3).strip(),
            )

    for name in CriterionName:
        if name in found:
            continue
        logger.warning(f"Missing criterion: {name.value}, adding default")
        score = _last_resort_score(name, analysis_text)
        found[name] = Criterion(
            name=name,
            score=DEFAULT_SCORE if score is None else score,
            feedback=_default_feedback(name),
        )

    return sorted(found.values(), key=lambda c: c.name.order)
