# writing_eval/utils/tracer.py
from typing import Any, Dict, Optional, List, Protocol, runtime_checkable
import logging

from langfuse import Langfuse

from writing_eval.core.config import settings
from writing_eval.utils.price_tracker import track_api_usage

logger = logging.getLogger(__name__)

LANGFUSE_AVAILABLE = bool(settings.LANGFUSE_PUBLIC_KEY and settings.LANGFUSE_SECRET_KEY)

lf: Optional[Langfuse] = None

if LANGFUSE_AVAILABLE:
    try:
        lf = Langfuse(
            public_key=settings.LANGFUSE_PUBLIC_KEY,
            secret_key=settings.LANGFUSE_SECRET_KEY,
            host=settings.LANGFUSE_HOST,
            release="v1.0.0",
        )
        logger.info(f"Langfuse initialized. Host: {settings.LANGFUSE_HOST}")
    except Exception as e:
        logger.warning(f"Langfuse initialization failed: {e}. Tracing disabled.")
        LANGFUSE_AVAILABLE = False
else:
    logger.info("Langfuse credentials not set. Tracing disabled.")


@runtime_checkable
class LLM(Protocol):
    model: Optional[str]

    async def run_completion(
        self, *, messages: List[Dict[str, str]],
        trace_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Dict[str, Any]: ...


class ObservedLLM:
    """Wrap an LLM so every completion is recorded as a Langfuse generation."""

    def __init__(self, inner: LLM, service: str = "groq"):
        self.inner = inner
        self.service = service

    @property
    def model(self) -> Optional[str]:
        return getattr(self.inner, "model", None)

    async def run_completion(
        self,
        *,
        messages: List[Dict[str, str]],
        trace_id: Optional[str] = None,
        name: Optional[str] = None,
        # ---- 프롬프트 추적 파라미터 ----
        prompt_key: str = "analysis",
        prompt_meta: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:

        if not (LANGFUSE_AVAILABLE and lf):
            # Langfuse 미사용 시 그냥 호출
            result = await self.inner.run_completion(messages=messages, trace_id=trace_id, name=name)
            track_api_usage(result.get("usage", {}), operation=f"llm.{prompt_key}")
            return result

        # UI에서 "Type: Generation" + "Name: llm.analysis" 로 필터
        with lf.start_as_current_generation(name=f"llm.{prompt_key}", model=self.model or self.service) as gen:
            md = {
                "service": self.service,
                "prompt_key": prompt_key,
                **({"trace_id": trace_id} if trace_id else {}),
                **(prompt_meta or {}),
            }
            gen.update(input={"messages": messages}, metadata=md)

            try:
                result = await self.inner.run_completion(messages=messages, trace_id=trace_id, name=name)

                usage_info = result.get("usage", {})
                cost_info = track_api_usage(usage_info, operation=f"llm.{prompt_key}")
                cost_data = cost_info.get("cost", {})

                gen.update(
                    output=result.get("content"),
                    metadata={**md, "cost_usd": cost_data.get("total_cost", 0)},
                    usage_details={
                        "input": usage_info.get("prompt_tokens", 0),
                        "output": usage_info.get("completion_tokens", 0),
                        "total": usage_info.get("total_tokens", 0),
                    },
                    cost_details={
                        "input": cost_data.get("input_cost", 0),
                        "output": cost_data.get("output_cost", 0),
                    },
                )
                return result
            except Exception as e:
                gen.update(level="ERROR", status_message=str(e))
                raise
            finally:
                try:
                    lf.flush()
                except Exception as e:
                    logger.debug(f"Langfuse flush failed: {e}")
