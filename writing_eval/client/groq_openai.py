import asyncio
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from writing_eval.core.config import settings
from writing_eval.core.exceptions import LLMConnectionException

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "No response generated"


class GroqChatLLM:
    """Minimal chat-completions wrapper for an OpenAI-compatible endpoint (Groq by default).

    The analysis contract is free text, so no response_format is requested.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        self.client = client or OpenAI(
            api_key=api_key or settings.GROQ_API_KEY or "missing-key",
            base_url=base_url or settings.LLM_BASE_URL,
            timeout=settings.API_TIMEOUT_S,
            max_retries=0,
        )
        self.model = model or settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.top_p = settings.LLM_TOP_P

    async def run_completion(
        self,
        *,
        messages: List[Dict[str, str]],
        trace_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Dict[str, Any]:

        def _invoke_sync() -> Dict[str, Any]:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                top_p=self.top_p,
            )

            content = resp.choices[0].message.content if resp.choices else None
            if not content:
                logger.warning(f"Empty content received from {self.model} ({name or 'completion'})")
                content = EMPTY_RESPONSE

            return {
                "content": content,
                "usage": {
                    "prompt_tokens": resp.usage.prompt_tokens if resp.usage else 0,
                    "completion_tokens": resp.usage.completion_tokens if resp.usage else 0,
                    "total_tokens": resp.usage.total_tokens if resp.usage else 0,
                },
            }

        try:
            return await asyncio.to_thread(_invoke_sync)
        except openai.APIStatusError as e:
            raise LLMConnectionException(
                f"Upstream completion failed with status {e.status_code}",
                details={"status_code": e.status_code, "model": self.model, "trace_id": trace_id},
            ) from e
        except openai.APIError as e:
            raise LLMConnectionException(
                f"Upstream completion failed: {e}",
                details={"model": self.model, "trace_id": trace_id},
            ) from e
