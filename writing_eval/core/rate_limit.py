# writing_eval/core/rate_limit.py
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Request

from writing_eval.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    last_request: float
    count: int = 0


class RateLimiter:
    """In-memory limiter keyed by client address.

    The window restarts from the last accepted request, so a client is only
    reset after `window_s` seconds without an accepted request.
    """

    def __init__(
        self,
        max_requests: int = 5,
        window_s: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.last_request > self.window_s

    def _evict_expired(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in stale:
            del self._windows[key]

    def hit(self, key: str) -> bool:
        """Count one request for `key`. Returns True when the request must be rejected."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                self._evict_expired(now)
                self._windows[key] = _Window(last_request=now, count=1)
                return False
            if window.count >= self.max_requests:
                logger.debug(f"Rate limited {key}: {window.count}/{self.max_requests}")
                return True
            window.count += 1
            window.last_request = now
            return False

    def retry_after(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return 0
            return max(0, int(round(window.last_request + self.window_s - now)))

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """전역 rate limiter 인스턴스 반환"""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_S)
    return _rate_limiter
