# writing_eval/core/exceptions.py
from fastapi import Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class EvaluationException(Exception):
    """Base exception for analysis errors"""
    status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(EvaluationException):
    """Submission rejected before it reaches the model.

    `error` is the short machine-readable label, `message` the sentence shown to the student.
    """
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error = error
        super().__init__(message, details)


class RateLimitException(EvaluationException):
    """Rate limiting errors"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message, {"retry_after": retry_after})
        self.retry_after = retry_after


class LLMConnectionException(EvaluationException):
    """LLM connection/timeout errors"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, retry_after: int = 30):
        super().__init__(message, details)
        self.retry_after = retry_after


class PromptLoadException(EvaluationException):
    """Prompt loading related errors"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, version: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.version = version


# Exception handlers
async def validation_exception_handler(request: Request, exc: ValidationException) -> JSONResponse:
    logger.info(f"Submission rejected: {exc.error} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message, **exc.details},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitException) -> JSONResponse:
    logger.warning(f"Rate limit exceeded: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "Too many requests",
            "message": exc.message,
            "retry_after": exc.retry_after,
        },
        headers={"Retry-After": str(exc.retry_after)},
    )


async def llm_connection_exception_handler(request: Request, exc: LLMConnectionException) -> JSONResponse:
    logger.error(f"LLM connection error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "External service temporarily unavailable",
            "message": exc.message,
            "type": "ServiceUnavailable",
            "retry_after": exc.retry_after,
        },
        headers={"Retry-After": str(exc.retry_after)},
    )


async def prompt_load_exception_handler(request: Request, exc: PromptLoadException) -> JSONResponse:
    logger.error(f"Prompt loading error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "Prompt system unavailable",
            "message": exc.message,
            "type": "PromptLoadError",
            "version": exc.version,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Analysis error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to analyze writing", "details": str(exc)},
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(RateLimitException, rate_limit_exception_handler)
    app.add_exception_handler(LLMConnectionException, llm_connection_exception_handler)
    app.add_exception_handler(PromptLoadException, prompt_load_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
