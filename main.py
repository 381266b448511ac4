import time
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
load_dotenv()  # ★ 라우터/모듈 임포트 전에!

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from writing_eval.api.v1.analyze import router as analyze_router
from writing_eval.core.async_manager import get_connection_pool
from writing_eval.core.config import settings
from writing_eval.core.dependencies import get_loader, get_performance_monitor
from writing_eval.core.exceptions import register_exception_handlers
from writing_eval.utils.price_tracker import get_usage_summary

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI 애플리케이션 수명주기 관리"""
    startup_time = time.time()
    logger.info("Starting writing analysis API...")

    # 프롬프트 사전 로딩 (실패해도 기동은 계속, /health 에서 degraded 로 보고)
    try:
        loader = get_loader()
        logger.info(f"Prompts loaded: version={loader.version} items={loader.get_available_prompts()}")
    except Exception as e:
        logger.warning(f"Prompt warmup failed: {e}")

    logger.info(f"Connection pool initialized: {get_connection_pool().get_stats()}")
    logger.info(f"Application startup completed in {(time.time() - startup_time) * 1000:.1f}ms")

    yield

    logger.info(f"Final performance stats: {get_performance_monitor().get_stats()}")
    logger.info(f"Final usage summary: {get_usage_summary()['token_usage']}")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cambridge Writing Analysis API",
        version="1.0.0",
        description="CAE/CPE writing assessment: criterion scores and located language errors",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # CORS (open by default; tighten as needed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analyze_router, prefix="/api", tags=["analysis"])

    @app.get("/health")
    async def health():
        """Service status: prompt availability, LLM configuration, request stats"""
        health_status = {
            "status": "healthy",
            "version": "1.0.0",
            "prompt_version": settings.PROMPT_VERSION,
            "timestamp": time.time(),
            "services": {},
        }

        try:
            get_loader()
            health_status["services"]["prompts"] = "operational"
        except Exception as e:
            logger.warning(f"Prompt check failed: {e}")
            health_status["services"]["prompts"] = "unavailable"
            health_status["status"] = "degraded"

        health_status["services"]["llm"] = "configured" if settings.GROQ_API_KEY else "missing_api_key"
        if not settings.GROQ_API_KEY:
            health_status["status"] = "degraded"

        health_status["connection_pool"] = get_connection_pool().get_stats()
        health_status["performance"] = get_performance_monitor().get_stats()

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(status_code=status_code, content=health_status)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
