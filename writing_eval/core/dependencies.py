# writing_eval/core/dependencies.py
import logging
import time
from collections.abc import AsyncIterator
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request

from writing_eval.client.bootstrap import build_llm
from writing_eval.core.config import settings
from writing_eval.core.exceptions import PromptLoadException
from writing_eval.services.writing_analyzer import WritingAnalyzer
from writing_eval.utils.prompt_loader import PromptLoader
from writing_eval.utils.tracer import LLM

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """성능 모니터링 클래스"""

    def __init__(self, slow_ms: float = 5000.0):
        self.slow_ms = slow_ms
        self.request_count = 0
        self.total_response_time = 0.0
        self.slow_requests = 0
        self.error_count = 0

    def record_request(self, response_time: float, success: bool = True):
        """요청 기록 (response_time 단위: ms)"""
        self.request_count += 1
        self.total_response_time += response_time

        if response_time > self.slow_ms:
            self.slow_requests += 1

        if not success:
            self.error_count += 1

    def get_stats(self) -> dict:
        """통계 반환"""
        if self.request_count == 0:
            return {
                "total_requests": 0,
                "average_response_time": 0,
                "slow_request_ratio": 0,
                "error_ratio": 0
            }

        return {
            "total_requests": self.request_count,
            "average_response_time": self.total_response_time / self.request_count,
            "slow_request_ratio": self.slow_requests / self.request_count,
            "error_ratio": self.error_count / self.request_count
        }


_performance_monitor: Optional[PerformanceMonitor] = None


def get_performance_monitor() -> PerformanceMonitor:
    """성능 모니터 인스턴스 반환"""
    global _performance_monitor
    if _performance_monitor is None:
        _performance_monitor = PerformanceMonitor(settings.SLOW_REQUEST_MS)
    return _performance_monitor


async def route_timer(request: Request) -> AsyncIterator[None]:
    start = time.perf_counter()
    method = request.method
    path = request.url.path
    request_id = f"req_{int(time.time() * 1000)}"
    request.state.request_id = request_id

    logger.info(f"[{request_id}] → {method} {path}")

    perf_monitor = get_performance_monitor()
    success = True

    try:
        yield
    except Exception as e:
        success = False
        logger.error(f"[{request_id}] Request failed: {e}")
        raise
    finally:
        dur_ms = (time.perf_counter() - start) * 1000.0
        slow_tag = " SLOW" if dur_ms > settings.SLOW_REQUEST_MS else ""
        perf_monitor.record_request(dur_ms, success)
        logger.info(f"[{request_id}] ← {method} {path} {dur_ms:.1f}ms{slow_tag}")


@lru_cache()
def get_loader() -> PromptLoader:
    """프롬프트 로더 (버전 고정, 프로세스당 1회 로드)"""
    try:
        return PromptLoader(version=settings.PROMPT_VERSION)
    except (FileNotFoundError, ValueError) as e:
        raise PromptLoadException(
            f"Failed to load prompts for version {settings.PROMPT_VERSION}",
            version=settings.PROMPT_VERSION,
            details={"error": str(e)},
        ) from e


def get_llm() -> LLM:
    return build_llm()


def get_analyzer(
    llm: LLM = Depends(get_llm),
    loader: PromptLoader = Depends(get_loader),
) -> WritingAnalyzer:
    return WritingAnalyzer(llm, loader)
