"""FastAPI middleware."""

import time
from typing_extensions import override

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from construction_ai.core.exceptions import AppError

logger = structlog.get_logger()

# AppError code -> HTTP status
STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION_ERROR": 422,
    "EXTRACTION_ERROR": 422,
    "LLM_ERROR": 502,
    "LLM_TIMEOUT": 504,
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    # Skip logging for health checks and docs to reduce noise
    SKIP_PATHS = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        path = request.url.path

        if path in self.SKIP_PATHS:
            return await call_next(request)

        logger.info(
            "request_started",
            method=request.method,
            path=path,
            user_id=request.headers.get("x-user-id"),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=path,
                error=str(e),
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "request_completed",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"
        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Converts exceptions escaping a route into JSON error bodies."""

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except AppError as e:
            status_code = STATUS_BY_CODE.get(e.code, 500)
            if status_code >= 500:
                logger.exception("application_error", path=request.url.path, code=e.code, error=e.message)
            else:
                logger.info("request_rejected", path=request.url.path, code=e.code, error=e.message)
            return JSONResponse(status_code=status_code, content=e.to_dict())
        except Exception as e:
            logger.exception("unhandled_exception", path=request.url.path, error=str(e))
            return JSONResponse(
                status_code=500,
                content={"error": {"code": "INTERNAL_ERROR", "message": str(e)}},
            )
