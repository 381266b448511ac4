import logging

from fastapi import APIRouter, Depends, Request

from writing_eval.core.async_manager import get_connection_pool
from writing_eval.core.dependencies import get_analyzer, route_timer
from writing_eval.core.exceptions import RateLimitException
from writing_eval.core.rate_limit import RateLimiter, client_key, get_rate_limiter
from writing_eval.models.analysis import AnalysisResult
from writing_eval.models.request import AnalysisRequest
from writing_eval.services.writing_analyzer import WritingAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(route_timer)])


def enforce_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    key = client_key(request)
    if limiter.hit(key):
        raise RateLimitException(
            "You are being rate limited. Please try again later.",
            retry_after=limiter.retry_after(key) or int(limiter.window_s),
        )


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
)
async def analyze(
    req: AnalysisRequest,
    request: Request,
    analyzer: WritingAnalyzer = Depends(get_analyzer),
) -> AnalysisResult:
    """Score a CAE/CPE writing sample and locate its language errors."""
    request_id = getattr(request.state, "request_id", None)
    logger.info(f"[{request_id}] Analyzing {req.exam_level} {req.task_type} ({len(req.writing)} chars)")

    async with get_connection_pool().acquire():
        return await analyzer.analyze(req, trace_id=request_id)
