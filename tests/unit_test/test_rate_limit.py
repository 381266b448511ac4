"""
Unit tests for core/rate_limit.py
"""
from types import SimpleNamespace

import pytest

from writing_eval.core.rate_limit import RateLimiter, client_key


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
class TestRateLimiter:

    def test_allows_up_to_limit_then_rejects(self):
        limiter = RateLimiter(max_requests=5, window_s=60, clock=FakeClock())
        assert [limiter.hit("1.2.3.4") for _ in range(5)] == [False] * 5
        assert limiter.hit("1.2.3.4") is True
        assert limiter.hit("1.2.3.4") is True

    def test_keys_are_independent(self):
        limiter = RateLimiter(max_requests=1, window_s=60, clock=FakeClock())
        assert limiter.hit("a") is False
        assert limiter.hit("a") is True
        assert limiter.hit("b") is False

    def test_window_expiry_resets_count(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=2, window_s=60, clock=clock)
        limiter.hit("a")
        limiter.hit("a")
        assert limiter.hit("a") is True

        clock.now += 61
        assert limiter.hit("a") is False

    def test_window_restarts_from_last_accepted_request(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=2, window_s=60, clock=clock)
        limiter.hit("a")
        clock.now += 50
        limiter.hit("a")
        clock.now += 5
        assert limiter.hit("a") is True
        clock.now += 6
        assert limiter.hit("a") is True
        clock.now += 50
        assert limiter.hit("a") is False

    def test_steady_client_is_not_reset_between_requests(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=5, window_s=60, clock=clock)
        results = []
        for _ in range(6):
            results.append(limiter.hit("a"))
            clock.now += 50
        assert results == [False] * 5 + [True]

    def test_rejected_requests_do_not_extend_the_window(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=1, window_s=60, clock=clock)
        limiter.hit("a")
        clock.now += 40
        assert limiter.hit("a") is True
        clock.now += 21
        assert limiter.hit("a") is False

    def test_expired_windows_are_evicted(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=1, window_s=60, clock=clock)
        limiter.hit("a")
        limiter.hit("b")
        assert limiter.tracked_keys() == 2

        clock.now += 61
        limiter.hit("c")
        assert limiter.tracked_keys() == 1
        assert limiter.hit("c") is True
        assert limiter.hit("a") is False

    def test_retry_after(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=1, window_s=60, clock=clock)
        assert limiter.retry_after("a") == 0
        limiter.hit("a")
        clock.now += 15
        assert limiter.retry_after("a") == 45

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_s=60, clock=FakeClock())
        limiter.hit("a")
        limiter.reset()
        assert limiter.hit("a") is False


def _request(headers=None, host="10.0.0.1"):
    client = SimpleNamespace(host=host) if host else None
    return SimpleNamespace(headers=headers or {}, client=client)


@pytest.mark.unit
class TestClientKey:

    def test_forwarded_for_first_entry(self):
        req = _request({"x-forwarded-for": "203.0.113.7, 10.0.0.2"})
        assert client_key(req) == "203.0.113.7"

    def test_falls_back_to_peer_address(self):
        assert client_key(_request()) == "10.0.0.1"

    def test_unknown_when_nothing_available(self):
        assert client_key(_request(host=None)) == "unknown"
