from __future__ import annotations

import logging
import math
from typing import Sequence

from writing_eval.models.analysis import AnalysisResult, Criterion
from writing_eval.services.evaluation.criterion_extractor import DEFAULT_SCORE, extract_criteria
from writing_eval.services.evaluation.error_locator import parse_errors
from writing_eval.services.evaluation.segment_splitter import split_segments

logger = logging.getLogger(__name__)


def compute_overall_score(criteria: Sequence[Criterion]) -> int:
    """Mean of the criterion scores rounded half up (3.5 -> 4, 3.25 -> 3).

    Falls back to the default score when there is nothing to average.
    """
    if not criteria:
        return DEFAULT_SCORE
    mean = sum(c.score for c in criteria) / len(criteria)
    return int(math.floor(mean + 0.5))


def parse_analysis_output(output: str, writing: str) -> AnalysisResult:
    """Turn the model's free-text answer into a structured AnalysisResult.

    - output: raw completion text (criterion sections, then `ERRORS:` and JSON lists)
    - writing: the original submission, used as the corpus for error spans
    """
    segments = split_segments(output)
    criteria = extract_criteria(segments.analysis)
    errors = parse_errors(segments.errors, writing)

    located = sum(1 for e in errors if e.located)
    logger.info(f"Parsed {len(criteria)} criteria and {len(errors)} errors ({located} located)")

    return AnalysisResult(
        overall_score=compute_overall_score(criteria),
        criteria=criteria,
        errors=errors,
    )
