"""
Unit tests for utils/price_tracker.py
"""
import pytest

from writing_eval.utils.price_tracker import PriceTracker, TokenUsage


@pytest.mark.unit
class TestTokenUsage:

    def test_addition(self):
        total = TokenUsage(10, 5, 15) + TokenUsage(1, 2, 3)
        assert total == TokenUsage(11, 7, 18)


@pytest.mark.unit
class TestPriceTracker:

    def test_track_usage_returns_cost_record(self):
        tracker = PriceTracker()
        record = tracker.track_usage(
            {"prompt_tokens": 1_000_000, "completion_tokens": 1_000_000, "total_tokens": 2_000_000},
            operation="llm.analysis",
        )

        assert record["operation"] == "llm.analysis"
        assert record["usage"]["total_tokens"] == 2_000_000
        assert record["cost"]["input_cost"] == pytest.approx(0.59)
        assert record["cost"]["output_cost"] == pytest.approx(0.79)
        assert record["cost"]["total_cost"] == pytest.approx(1.38)

    def test_missing_and_none_fields_count_as_zero(self):
        tracker = PriceTracker()
        record = tracker.track_usage({"prompt_tokens": None})
        assert record["usage"] == {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
        assert record["cost"]["total_cost"] == 0

    def test_session_summary(self):
        tracker = PriceTracker()
        tracker.track_usage({"prompt_tokens": 900, "completion_tokens": 250, "total_tokens": 1150})
        tracker.track_usage({"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150})

        summary = tracker.get_session_summary()
        assert summary["session_info"]["total_calls"] == 2
        assert summary["token_usage"]["total_tokens"] == 1300
        assert summary["token_usage"]["avg_tokens_per_call"] == 650
        assert summary["pricing_info"]["model"] == "llama3-70b-8192"
        assert len(tracker.call_history) == 2

    def test_empty_summary(self):
        summary = PriceTracker().get_session_summary()
        assert summary["session_info"]["total_calls"] == 0
        assert summary["cost_breakdown"]["avg_cost_per_call"] == 0

    def test_reset_session(self):
        tracker = PriceTracker()
        tracker.track_usage({"prompt_tokens": 5, "completion_tokens": 5, "total_tokens": 10})
        tracker.reset_session()
        assert tracker.session_calls == 0
        assert tracker.total_usage == TokenUsage()
        assert tracker.call_history == []
