# writing_eval/client/bootstrap.py
from typing import Optional
from writing_eval.client.groq_openai import GroqChatLLM
from writing_eval.utils.tracer import ObservedLLM, LLM

_llm_singleton: Optional[LLM] = None


def build_llm() -> LLM:
    global _llm_singleton
    if _llm_singleton is None:
        base = GroqChatLLM()               # 순수 LLM 클라이언트
        _llm_singleton = ObservedLLM(base)  # Langfuse 관측 래퍼
    return _llm_singleton
