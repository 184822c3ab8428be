"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from construction_ai import __version__
from construction_ai.api.dependencies import get_cached_config
from construction_ai.api.middleware import ExceptionHandlerMiddleware, RequestLoggingMiddleware
from construction_ai.api.routes import router as api_router
from construction_ai.core.di_container import container as di_container
from construction_ai.core.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    config = get_cached_config()

    setup_logging(log_level=config.log_level, json_format=not config.debug, log_to_file=config.log_to_file)

    di_container.wire(modules=["construction_ai.api.routes"])

    logger.info(
        "application_starting",
        app_name=config.app_name,
        llm_provider=config.llm.provider,
        llm_model=config.llm.model,
        storage_backend=config.storage.backend,
    )

    yield

    di_container.unwire()
    logger.info("application_shutting_down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_cached_config()

    app = FastAPI(
        title=config.app_name,
        description="Construction document assistant: document ingestion, keyword retrieval and a tool-using chat agent",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "name": config.app_name,
            "version": __version__,
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_cached_config()
    uvicorn.run(
        "construction_ai.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )
