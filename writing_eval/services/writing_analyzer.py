from __future__ import annotations

import logging
from time import perf_counter
from typing import Dict, Optional

from writing_eval.core.async_manager import async_retry, async_timeout
from writing_eval.core.config import settings
from writing_eval.core.exceptions import LLMConnectionException
from writing_eval.models.analysis import AnalysisResult
from writing_eval.models.request import AnalysisRequest
from writing_eval.services.evaluation.post_process import parse_analysis_output
from writing_eval.services.evaluation.pre_process import pre_process_submission
from writing_eval.utils.prompt_loader import PromptLoader
from writing_eval.utils.tracer import LLM

logger = logging.getLogger(__name__)


class WritingAnalyzer:
    """Top-level orchestration for one writing analysis.

    Flow:
      pre_process → prompt → LLM completion → parse (criteria + located errors)
    """

    def __init__(self, llm: LLM, loader: PromptLoader):
        self.llm = llm
        self.loader = loader

    async def analyze(self, req: AnalysisRequest, trace_id: Optional[str] = None) -> AnalysisResult:
        timings_ms: Dict[str, float] = {}
        t0 = perf_counter()

        pre = pre_process_submission(req.writing)
        logger.info(f"Word count: {pre['word_count']}, character count: {pre['char_count']}")
        t1 = perf_counter()
        timings_ms["pre_process"] = (t1 - t0) * 1000.0

        messages = self.loader.render_messages(
            exam_level=req.exam_level,
            task_type=req.task_type,
            writing=req.writing,
        )
        output = await self._complete(messages, req, trace_id)
        t2 = perf_counter()
        timings_ms["llm"] = (t2 - t1) * 1000.0
        logger.debug(f"Raw model output: {output}")

        result = parse_analysis_output(output, req.writing)
        t3 = perf_counter()
        timings_ms["parse"] = (t3 - t2) * 1000.0
        timings_ms["total"] = (t3 - t0) * 1000.0
        logger.debug(f"Timings (ms): {timings_ms}")

        logger.info(
            f"Analysis finished for {req.exam_level} {req.task_type}: overall={result.overall_score} "
            f"errors={len(result.errors)} total={timings_ms['total']:.1f}ms"
        )
        return result

    async def _complete(self, messages, req: AnalysisRequest, trace_id: Optional[str]) -> str:
        @async_retry(max_attempts=settings.LLM_MAX_ATTEMPTS, delay=1.0, retry_on=(LLMConnectionException,))
        @async_timeout(settings.API_TIMEOUT_S)
        async def _call() -> str:
            response = await self.llm.run_completion(
                messages=messages,
                trace_id=trace_id,
                name="writing_analysis",
                prompt_key="analysis",
                prompt_meta={
                    "exam_level": req.exam_level,
                    "task_type": req.task_type,
                    "text_length": len(req.writing),
                    "prompt_version": self.loader.version,
                },
            )
            return response.get("content") or ""

        try:
            return await _call()
        except TimeoutError as e:
            raise LLMConnectionException(
                f"Completion timed out after {settings.API_TIMEOUT_S}s",
                details={"trace_id": trace_id},
            ) from e
