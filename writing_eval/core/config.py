# writing_eval/core/config.py
import os
from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()


class Settings:
    # Upstream chat-completions endpoint (Groq exposes the OpenAI wire format)
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "llama3-70b-8192")
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.3"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "1000"))
    LLM_TOP_P: float = float(os.getenv("LLM_TOP_P", "0.9"))
    LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "2"))
    API_TIMEOUT_S: float = float(os.getenv("API_TIMEOUT_S", "60.0"))

    MAX_CONNECTIONS: int = int(os.getenv("MAX_CONNECTIONS", "10"))
    CONNECTION_TIMEOUT: float = float(os.getenv("CONNECTION_TIMEOUT", "30.0"))

    # Per-client request limit
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", "5"))
    RATE_LIMIT_WINDOW_S: float = float(os.getenv("RATE_LIMIT_WINDOW_S", "60"))

    # Submission limits
    MIN_WORDS: int = int(os.getenv("MIN_WORDS", "150"))
    MAX_WORDS: int = int(os.getenv("MAX_WORDS", "500"))
    MAX_CHARS: int = int(os.getenv("MAX_CHARS", "4000"))

    PROMPT_VERSION: str = os.getenv("PROMPT_VERSION", "v1.0.0")
    SLOW_REQUEST_MS: float = float(os.getenv("SLOW_REQUEST_MS", "2000"))

    LANGFUSE_PUBLIC_KEY: str = os.getenv("LANGFUSE_PUBLIC_KEY", "")
    LANGFUSE_SECRET_KEY: str = os.getenv("LANGFUSE_SECRET_KEY", "")
    LANGFUSE_HOST: str = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")


settings = Settings()
