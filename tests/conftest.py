"""
Pytest configuration and shared fixtures
"""
import os
import sys
from typing import Any, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from writing_eval.core.rate_limit import RateLimiter


SAMPLE_WRITING = """The proposal discusses how our town library could attract more young visitors over the next two years. At present, the building is quiet during weekday afternoons, and many teenagers say they prefer studying in cafes because the atmosphere feels more relaxed. I seen this problem myself when I volunteered there last summer.

Firstly, the committee should consider extending opening hours on Friday and Saturday evenings. Local students often have part-time jobs, so they can only visit after work. A modest increase in staffing costs would be balanced by higher membership numbers and stronger community support.

Secondly, the library is gonna need a flexible space for group projects. The current reading room discourages conversation, which is understandable, but collaborative learning requires discussion. Converting the unused storage area on the ground floor into a bookable studio with screens, whiteboards and comfortable seating would meet this need.

Finally, regular events such as film screenings, coding workshops and author talks could transform the library into a genuine cultural hub. Partnerships with nearby schools would help to publicise these activities at little expense.

In conclusion, if these recommendations are implemented, I am confident that the library will become a lively, welcoming place where young residents choose to spend their free time."""


WELL_FORMED_OUTPUT = """Content (4/5): All three recommendations are relevant to the task and reasonably developed.
Communicative Achievement (5/5): The proposal format is used confidently and the tone suits the committee.
Organisation (3/5): Paragraphing is clear, but linking between sections is
rather mechanical.
Language (4/5): A good range of vocabulary with occasional slips in register.
ERRORS:
[{"text": "gonna", "correction": "going to", "type": "register", "explanation": "too informal"}]
"""


class FakeLLM:
    """Stand-in for ObservedLLM: returns canned completions and records calls."""

    model = "fake-llm"

    def __init__(self, output: str = WELL_FORMED_OUTPUT, error: Optional[BaseException] = None):
        self.output = output
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def run_completion(self, *, messages, trace_id=None, name=None, **kwargs) -> Dict[str, Any]:
        self.calls.append({"messages": messages, "trace_id": trace_id, "name": name, **kwargs})
        if self.error is not None:
            raise self.error
        return {
            "content": self.output,
            "usage": {"prompt_tokens": 900, "completion_tokens": 250, "total_tokens": 1150},
        }


@pytest.fixture
def sample_writing() -> str:
    return SAMPLE_WRITING


@pytest.fixture
def well_formed_output() -> str:
    return WELL_FORMED_OUTPUT


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(fake_llm):
    """TestClient with the LLM stubbed and a fresh rate limiter per test"""
    from fastapi.testclient import TestClient

    from main import app
    from writing_eval.core.dependencies import get_llm
    from writing_eval.core.rate_limit import get_rate_limiter

    limiter = RateLimiter(max_requests=5, window_s=60)
    app.dependency_overrides[get_llm] = lambda: fake_llm
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
