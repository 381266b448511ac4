# writing_eval/utils/price_tracker.py
from typing import Any, Dict, List
from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass
class TokenUsage:
    """Track token usage for a single completion call."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: 'TokenUsage') -> 'TokenUsage':
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens
        )


@dataclass
class PriceTracker:
    """Track completion costs and usage statistics for the running process."""

    # Groq llama3-70b-8192 list price (USD per 1M tokens)
    model: str = "llama3-70b-8192"
    input_cost_per_1m: float = 0.59
    output_cost_per_1m: float = 0.79

    total_usage: TokenUsage = field(default_factory=TokenUsage)
    session_calls: int = 0
    session_start: datetime = field(default_factory=datetime.now)
    call_history: List[Dict[str, Any]] = field(default_factory=list)

    def _cost(self, prompt_tokens: int, completion_tokens: int) -> Dict[str, float]:
        input_cost = (prompt_tokens / 1_000_000) * self.input_cost_per_1m
        output_cost = (completion_tokens / 1_000_000) * self.output_cost_per_1m
        return {
            "input_cost": round(input_cost, 9),
            "output_cost": round(output_cost, 9),
            "total_cost": round(input_cost + output_cost, 9),
        }

    def track_usage(self, usage_data: Dict[str, Any], operation: str = "analysis") -> Dict[str, Any]:
        """Track usage from a completion response and calculate costs."""
        call_usage = TokenUsage(
            prompt_tokens=int(usage_data.get("prompt_tokens", 0) or 0),
            completion_tokens=int(usage_data.get("completion_tokens", 0) or 0),
            total_tokens=int(usage_data.get("total_tokens", 0) or 0),
        )

        self.total_usage += call_usage
        self.session_calls += 1

        call_record = {
            "timestamp": datetime.now().isoformat(),
            "operation": operation,
            "usage": asdict(call_usage),
            "cost": self._cost(call_usage.prompt_tokens, call_usage.completion_tokens),
        }
        self.call_history.append(call_record)
        return call_record

    def get_session_summary(self) -> Dict[str, Any]:
        """Get summary of current session usage and costs."""
        cost = self._cost(self.total_usage.prompt_tokens, self.total_usage.completion_tokens)
        calls = max(1, self.session_calls)

        return {
            "session_info": {
                "start_time": self.session_start.isoformat(),
                "duration_seconds": (datetime.now() - self.session_start).total_seconds(),
                "total_calls": self.session_calls,
            },
            "token_usage": {
                "total_prompt_tokens": self.total_usage.prompt_tokens,
                "total_completion_tokens": self.total_usage.completion_tokens,
                "total_tokens": self.total_usage.total_tokens,
                "avg_tokens_per_call": self.total_usage.total_tokens / calls,
            },
            "cost_breakdown": {
                **cost,
                "avg_cost_per_call": round(cost["total_cost"] / calls, 9),
            },
            "pricing_info": {
                "input_cost_per_1m_tokens": self.input_cost_per_1m,
                "output_cost_per_1m_tokens": self.output_cost_per_1m,
                "model": self.model,
            },
        }

    def reset_session(self) -> None:
        """Reset tracking for a new session."""
        self.total_usage = TokenUsage()
        self.session_calls = 0
        self.session_start = datetime.now()
        self.call_history = []


# Global tracker instance
_global_tracker = PriceTracker()


def get_price_tracker() -> PriceTracker:
    """Get the global price tracker instance."""
    return _global_tracker


def track_api_usage(usage_data: Dict[str, Any], operation: str = "analysis") -> Dict[str, Any]:
    """Convenience function to track API usage globally."""
    return _global_tracker.track_usage(usage_data, operation)


def get_usage_summary() -> Dict[str, Any]:
    """Convenience function to get usage summary."""
    return _global_tracker.get_session_summary()
