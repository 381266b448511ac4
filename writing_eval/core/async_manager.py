# writing_eval/core/async_manager.py
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from writing_eval.core.config import settings

logger = logging.getLogger(__name__)


class AsyncConnectionPool:
    """비동기 연결 풀 관리자 (upstream LLM 동시 호출 수 제한)"""

    def __init__(self, max_connections: int = 10, timeout: float = 30.0):
        self.max_connections = max_connections
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(max_connections)
        self._active_connections = 0
        self._total_requests = 0
        self._failed_requests = 0
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def acquire(self):
        """연결 획득 컨텍스트 매니저"""
        acquired_at = time.time()
        acquired = False

        try:
            async with asyncio.timeout(self.timeout):
                await self._semaphore.acquire()
            acquired = True
            async with self._lock:
                self._active_connections += 1
                self._total_requests += 1
            logger.debug(f"Connection acquired. Active: {self._active_connections}/{self.max_connections}")
            yield
        except asyncio.TimeoutError:
            async with self._lock:
                self._failed_requests += 1
            logger.error(f"Connection acquisition timeout after {self.timeout}s")
            raise
        except Exception:
            async with self._lock:
                self._failed_requests += 1
            raise
        finally:
            if acquired:
                self._semaphore.release()
                async with self._lock:
                    self._active_connections -= 1
                duration = time.time() - acquired_at
                logger.debug(f"Connection released after {duration:.2f}s. Active: {self._active_connections}")

    def get_stats(self) -> Dict[str, Any]:
        """연결 풀 통계 반환"""
        return {
            "max_connections": self.max_connections,
            "active_connections": self._active_connections,
            "total_requests": self._total_requests,
            "failed_requests": self._failed_requests,
            "success_rate": (
                (self._total_requests - self._failed_requests) / self._total_requests
                if self._total_requests > 0 else 0
            ),
        }


# 전역 인스턴스
_connection_pool: Optional[AsyncConnectionPool] = None


def get_connection_pool() -> AsyncConnectionPool:
    """전역 연결 풀 인스턴스 반환"""
    global _connection_pool
    if _connection_pool is None:
        _connection_pool = AsyncConnectionPool(settings.MAX_CONNECTIONS, settings.CONNECTION_TIMEOUT)
    return _connection_pool


def async_timeout(timeout: float):
    """비동기 함수 타임아웃 데코레이터"""
    def decorator(func: Callable[..., Awaitable]):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                logger.error(f"Function {func.__name__} timed out after {timeout}s")
                raise
        return wrapper
    return decorator


def async_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
):
    """비동기 함수 재시도 데코레이터. `retry_on` 외의 예외는 즉시 전파"""
    def decorator(func: Callable[..., Awaitable]):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_attempts - 1:
                        logger.error(f"Function {func.__name__} failed after {max_attempts} attempts")
                        raise

                    logger.warning(f"Function {func.__name__} failed (attempt {attempt + 1}/{max_attempts}): {e}")
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff
        return wrapper
    return decorator
